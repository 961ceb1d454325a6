"""Tests for marksite.live.server — live server lifecycle."""

from __future__ import annotations

import socket
from collections.abc import Iterator
from pathlib import Path

import httpx
import pytest

from marksite._errors import PortInUseError, ServerError
from marksite.live.server import LiveServer, bind_socket


@pytest.fixture
def built_root(tmp_path: Path) -> Path:
    """A content root with a minimal ``_site`` tree."""
    site = tmp_path / "_site"
    (site / "about").mkdir(parents=True)
    (site / "index.html").write_text("<h1>home</h1>")
    (site / "about" / "index.html").write_text("<h1>about</h1>")
    return tmp_path


@pytest.fixture
def occupied_port() -> Iterator[int]:
    """A port held by another listening socket for the test's duration."""
    blocker = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    blocker.bind(("127.0.0.1", 0))
    blocker.listen(1)
    try:
        yield blocker.getsockname()[1]
    finally:
        blocker.close()


class TestBindSocket:
    def test_occupied_port_raises_port_in_use(self, occupied_port: int) -> None:
        with pytest.raises(PortInUseError) as exc_info:
            bind_socket("127.0.0.1", occupied_port)
        assert exc_info.value.port == occupied_port

    def test_other_errors_propagate_unchanged(self) -> None:
        # TEST-NET-1 address: not assigned to any local interface
        with pytest.raises(OSError) as exc_info:
            bind_socket("192.0.2.1", 0)
        assert not isinstance(exc_info.value, PortInUseError)

    def test_free_port(self) -> None:
        sock = bind_socket("127.0.0.1", 0)
        try:
            assert sock.getsockname()[1] > 0
        finally:
            sock.close()


class TestLiveServer:
    @pytest.mark.asyncio
    async def test_start_serves_output_tree(self, built_root: Path) -> None:
        session = await LiveServer(built_root, port=0).start()
        try:
            assert session.is_running
            assert session.port > 0
            async with httpx.AsyncClient(base_url=f"http://127.0.0.1:{session.port}") as client:
                home = await client.get("/")
                about = await client.get("/about/")
            assert home.status_code == 200
            assert "home" in home.text
            assert "about" in about.text
        finally:
            await session.stop()

    @pytest.mark.asyncio
    async def test_start_on_occupied_port(self, built_root: Path, occupied_port: int) -> None:
        with pytest.raises(PortInUseError) as exc_info:
            await LiveServer(built_root, port=occupied_port).start()
        assert exc_info.value.port == occupied_port

    @pytest.mark.asyncio
    async def test_stop_frees_port_for_immediate_restart(self, built_root: Path) -> None:
        first = await LiveServer(built_root, port=0).start()
        port = first.port
        async with httpx.AsyncClient() as client:
            await client.get(f"http://127.0.0.1:{port}/")
        await first.stop()
        assert not first.is_running

        second = await LiveServer(built_root, port=port).start()
        try:
            assert second.port == port
        finally:
            await second.stop()

    @pytest.mark.asyncio
    async def test_second_start_while_running_is_refused(self, built_root: Path) -> None:
        server = LiveServer(built_root, port=0)
        session = await server.start()
        try:
            with pytest.raises(ServerError, match="already running"):
                await server.start()
        finally:
            await session.stop()

    @pytest.mark.asyncio
    async def test_restart_after_stop(self, built_root: Path) -> None:
        server = LiveServer(built_root, port=0)
        session = await server.start()
        await session.stop()
        session = await server.start()
        await session.stop()

    @pytest.mark.asyncio
    async def test_reads_tree_at_request_time(self, built_root: Path) -> None:
        session = await LiveServer(built_root, port=0).start()
        try:
            async with httpx.AsyncClient(base_url=f"http://127.0.0.1:{session.port}") as client:
                assert (await client.get("/new/")).status_code == 404
                (built_root / "_site" / "new").mkdir()
                (built_root / "_site" / "new" / "index.html").write_text("fresh")
                response = await client.get("/new/")
            assert response.status_code == 200
            assert response.text == "fresh"
        finally:
            await session.stop()

    def test_output_path(self, built_root: Path) -> None:
        server = LiveServer(built_root, output_dir="public")
        assert server.output_path == built_root / "public"
