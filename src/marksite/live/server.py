"""Live server — serves the build output over HTTP.

``LiveServer.start()`` binds the listening socket itself, so a port that is
already taken surfaces as ``PortInUseError`` before uvicorn is involved, then
hands the socket to a uvicorn ``Server`` running on the current event loop.
The returned ``ServerSession`` is the only handle to the running server;
``stop()`` shuts it down and releases the port.

The server never coordinates with the rebuild loop: every request reads the
current ``_site`` tree.
"""

from __future__ import annotations

import asyncio
import errno
import socket
from pathlib import Path
from typing import TYPE_CHECKING

import uvicorn

from marksite._errors import PortInUseError, ServerError
from marksite.live.static import create_site_app

if TYPE_CHECKING:
    from starlette.types import ASGIApp


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind a TCP socket on *host*:*port*.

    Raises:
        PortInUseError: If another socket already listens on the port.
        OSError: For any other bind failure, unchanged.

    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as exc:
        sock.close()
        if exc.errno == errno.EADDRINUSE:
            raise PortInUseError(port) from exc
        raise
    sock.set_inheritable(True)
    return sock


class ServerSession:
    """A running server: one bound socket, its port, and its content root.

    Created by ``LiveServer.start()``.  The holder owns the socket and must
    call ``stop()``.

    """

    def __init__(
        self,
        *,
        server: uvicorn.Server,
        sock: socket.socket,
        task: asyncio.Task[None],
        content_root: Path,
    ) -> None:
        self._server = server
        self._sock = sock
        self._task = task
        self.content_root = content_root
        self.host, self.port = sock.getsockname()[:2]

    @property
    def is_running(self) -> bool:
        return not self._task.done()

    @property
    def url(self) -> str:
        host = "localhost" if self.host in ("127.0.0.1", "0.0.0.0") else self.host
        return f"http://{host}:{self.port}"

    async def wait_closed(self) -> None:
        """Wait until the server exits (``stop()`` or a captured signal)."""
        await asyncio.shield(self._task)

    async def stop(self) -> None:
        """Shut the server down and release the socket.  Idempotent."""
        self._server.should_exit = True
        try:
            await self._task
        finally:
            self._sock.close()


class LiveServer:
    """Serves ``<content_root>/_site`` on a port.

    Args:
        content_root: Resolved content root; the output tree is ``_site`` in it.
        port: Port to bind.  ``0`` picks a free port.
        host: Address to bind.
        output_dir: Name of the output tree inside the content root.

    """

    def __init__(
        self,
        content_root: Path,
        port: int = 3000,
        host: str = "127.0.0.1",
        *,
        output_dir: str = "_site",
    ) -> None:
        self.content_root = Path(content_root)
        self.port = port
        self.host = host
        self.output_path = self.content_root / output_dir
        self._session: ServerSession | None = None

    def create_app(self) -> ASGIApp:
        return create_site_app(self.output_path)

    async def start(self) -> ServerSession:
        """Bind the port and start serving.

        Returns:
            The session owning the socket.

        Raises:
            PortInUseError: If the port is taken.
            ServerError: If this server already has a live session.
            OSError: Any other bind failure.

        """
        if self._session is not None and self._session.is_running:
            msg = f"Server already running on port {self._session.port}"
            raise ServerError(msg)

        sock = bind_socket(self.host, self.port)
        config = uvicorn.Config(
            self.create_app(),
            lifespan="off",
            log_level="warning",
            access_log=False,
        )
        server = uvicorn.Server(config)
        task = asyncio.create_task(server.serve(sockets=[sock]), name="marksite-server")

        while not server.started:
            if task.done():
                sock.close()
                task.result()
                msg = "Server exited during startup"
                raise ServerError(msg)
            await asyncio.sleep(0.01)

        self._session = ServerSession(
            server=server, sock=sock, task=task, content_root=self.content_root,
        )
        return self._session
