"""Static-file app for the build output.

Serves ``<content_root>/_site`` with:

- ``/post/`` -> ``post/index.html``
- ``/post`` -> redirect to ``/post/`` when ``post/`` is a directory
- ``/about`` -> ``about.html`` when no ``about/`` directory exists
- ``404.html`` for misses, when the build produced one

The tree is looked up on every request, so a rebuild is visible as soon as
it has been swapped into place.
"""

from __future__ import annotations

import os
import stat
from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException
from starlette.routing import Mount
from starlette.staticfiles import StaticFiles

if TYPE_CHECKING:
    from pathlib import Path

    from starlette.responses import Response
    from starlette.types import Scope


class SiteFiles(StaticFiles):
    """``StaticFiles`` with extension-less clean URLs."""

    async def check_config(self) -> None:
        # The output tree appears with the first build
        if self.directory is not None and not os.path.isdir(self.directory):
            return
        await super().check_config()

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            response: Response | None = await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404:
                raise
            response = None

        if response is not None and response.status_code != 404:
            return response

        clean = await self._clean_url_response(path, scope)
        if clean is not None:
            return clean
        if response is not None:
            return response
        raise HTTPException(status_code=404)

    async def _clean_url_response(self, path: str, scope: Scope) -> Response | None:
        stripped = path.rstrip("/")
        if not stripped or stripped == "." or stripped.endswith(".html"):
            return None
        full_path, stat_result = await run_in_threadpool(
            self.lookup_path, f"{stripped}.html",
        )
        if stat_result is None or not stat.S_ISREG(stat_result.st_mode):
            return None
        return self.file_response(full_path, stat_result, scope)


def create_site_app(output_path: Path) -> Starlette:
    """Return an ASGI app serving *output_path*.

    The directory does not have to exist yet.
    """
    files = SiteFiles(directory=output_path, html=True, check_dir=False)
    return Starlette(routes=[Mount("/", app=files, name="site")])
