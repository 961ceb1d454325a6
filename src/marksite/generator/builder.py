"""Default site builder — Markdown content to a static ``_site`` tree.

Pipeline order:
    1. Load site metadata from ``<content_root>/config.yaml``
    2. Discover and parse ``content/**/*.md`` (YAML front matter + Markdown)
    3. Render pages through Jinja2 (user templates first, bundled theme second)
    4. Render the post index unless ``content/index.md`` exists
    5. Copy bundled assets, then user assets over them
    6. Swap the staged tree into place as ``_site``

Pages are written with clean URLs: ``content/about.md`` becomes
``_site/about/index.html``.

The tree is staged next to ``_site`` and swapped in with two renames, so a
request never sees a half-written build.  Between the renames there is no
``_site`` at all; a request landing in that window gets a 404.
"""

from __future__ import annotations

import asyncio
import datetime as dt
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import markdown
import yaml
from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from marksite._errors import BuildError, MarksiteError
from marksite.config_loader import load_site_config
from marksite.generator.pipeline import BuildResult
from marksite.generator.watcher import SourceWatcher
from marksite.theme import get_asset_dirs, get_template_dirs

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from marksite.config import MarksiteConfig
    from marksite.config_loader import SiteConfig

_MARKDOWN_EXTENSIONS = ["extra", "toc", "sane_lists"]

# Files/directories skipped during discovery and asset copying
_HIDDEN_PREFIXES = (".", "_")


@dataclass(slots=True)
class Page:
    """One content page.

    Attributes:
        source_path: Absolute path to the Markdown source.
        url: Clean URL, always with a trailing slash (``/posts/hello/``).
        title: From front matter, else derived from the file name.
        date: Publication date from front matter, if any.
        metadata: The full front matter mapping.
        html: Rendered Markdown body.

    """

    source_path: Path
    url: str
    title: str
    date: dt.date | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    html: str = ""

    @property
    def is_draft(self) -> bool:
        return bool(self.metadata.get("draft"))


def split_front_matter(source: str, path: Path) -> tuple[dict[str, Any], str]:
    """Split YAML front matter from the Markdown body.

    Front matter is delimited by ``---`` on its own line at the start of the
    file.  Without it, the metadata is empty and the whole source is the body.

    Raises:
        BuildError: If the front matter is not a valid YAML mapping.

    """
    text = source.lstrip("\ufeff")
    if not text.startswith("---"):
        return {}, text
    end = text.find("\n---", 3)
    if end == -1:
        return {}, text
    try:
        meta = yaml.safe_load(text[3:end]) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid front matter in {path}: {exc}"
        raise BuildError(msg) from exc
    if not isinstance(meta, dict):
        msg = f"Front matter in {path} must be a mapping"
        raise BuildError(msg)
    body = text[end + 4:]
    # Drop the rest of the closing fence line
    newline = body.find("\n")
    body = body[newline + 1:] if newline != -1 else ""
    return meta, body


def page_url(rel: Path) -> str:
    """Map a content-relative Markdown path to its clean URL."""
    parts = list(rel.with_suffix("").parts)
    if parts and parts[-1] == "index":
        parts.pop()
    if not parts:
        return "/"
    return "/" + "/".join(parts) + "/"


def _coerce_date(value: object) -> dt.date | None:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            return dt.date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


class SiteBuilder:
    """Builds ``<content_root>/_site`` from a content root.

    Satisfies the ``BuildPipeline`` protocol.  ``build()`` runs the blocking
    file work in a worker thread so the event loop keeps serving requests.

    Args:
        config: Frozen marksite configuration.

    """

    def __init__(self, config: MarksiteConfig) -> None:
        self._config = config
        self._watcher: SourceWatcher | None = None

    @property
    def config(self) -> MarksiteConfig:
        return self._config

    async def build(self) -> BuildResult:
        """Build the site without blocking the event loop."""
        return await asyncio.to_thread(self.build_sync)

    def build_sync(self) -> BuildResult:
        """Run the full build pipeline and return the result.

        Raises:
            BuildError: If any step fails.  The previous ``_site`` is kept.

        """
        start = time.perf_counter()
        output_dir = self._config.output_path
        staging = output_dir.with_name(f".{output_dir.name}.staging")

        try:
            site = load_site_config(self._config.content_root)
            env = self._create_environment()
            pages = self._discover_pages()

            if staging.exists():
                shutil.rmtree(staging)
            staging.mkdir(parents=True)

            written = [self._write_page(env, site, page, staging) for page in pages]
            if not any(page.url == "/" for page in pages):
                written.append(self._write_index(env, site, pages, staging))
            asset_count = self._copy_assets(staging)

            self._swap_into_place(staging, output_dir)
        except BuildError:
            raise
        except MarksiteError as exc:
            raise BuildError(str(exc)) from exc
        except (OSError, TemplateError) as exc:
            msg = f"Build failed: {exc}"
            raise BuildError(msg) from exc

        return BuildResult(
            pages=tuple(output_dir / p.relative_to(staging) for p in written),
            total_assets=asset_count,
            duration_ms=(time.perf_counter() - start) * 1000,
            output_dir=output_dir,
        )

    async def changes(self) -> AsyncIterator[set[Path]]:
        """Yield changed source paths, one set per debounced batch."""
        self._watcher = SourceWatcher(self._config)
        try:
            async for batch in self._watcher.changes():
                yield batch
        finally:
            self._watcher = None

    def stop_watching(self) -> None:
        if self._watcher is not None:
            self._watcher.stop()

    # -- steps --

    def _create_environment(self) -> Environment:
        dirs = [str(d) for d in get_template_dirs(self._config)]
        return Environment(
            loader=FileSystemLoader(dirs),
            autoescape=select_autoescape(["html"]),
        )

    def _discover_pages(self) -> list[Page]:
        content = self._config.content_path
        if not content.is_dir():
            return []

        pages: list[Page] = []
        for path in sorted(content.rglob("*.md")):
            rel = path.relative_to(content)
            if any(part.startswith(_HIDDEN_PREFIXES) for part in rel.parts):
                continue
            meta, body = split_front_matter(path.read_text(encoding="utf-8"), path)
            page = Page(
                source_path=path,
                url=page_url(rel),
                title=str(meta.get("title") or path.stem.replace("-", " ").title()),
                date=_coerce_date(meta.get("date")),
                metadata=meta,
                html=markdown.markdown(body, extensions=_MARKDOWN_EXTENSIONS),
            )
            if not page.is_draft:
                pages.append(page)
        return pages

    def _write_page(
        self, env: Environment, site: SiteConfig, page: Page, staging: Path,
    ) -> Path:
        template_name = str(page.metadata.get("template") or "page.html")
        html = env.get_template(template_name).render(site=site, page=page)
        return _write(staging, page.url, html)

    def _write_index(
        self, env: Environment, site: SiteConfig, pages: list[Page], staging: Path,
    ) -> Path:
        posts = sorted(
            pages,
            key=lambda p: (p.date or dt.date.min, p.title),
            reverse=True,
        )
        html = env.get_template("index.html").render(site=site, posts=posts)
        return _write(staging, "/", html)

    def _copy_assets(self, staging: Path) -> int:
        """Copy assets into ``<staging>/assets``; later dirs override earlier ones."""
        dest_root = staging / "assets"
        copied: set[Path] = set()
        for asset_dir in reversed(get_asset_dirs(self._config)):
            if not asset_dir.is_dir():
                continue
            for src_file in sorted(asset_dir.rglob("*")):
                if not src_file.is_file() or src_file.name.startswith("."):
                    continue
                relative = src_file.relative_to(asset_dir)
                dest_file = dest_root / relative
                dest_file.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(src_file, dest_file)
                copied.add(relative)
        return len(copied)

    def _swap_into_place(self, staging: Path, output_dir: Path) -> None:
        previous = output_dir.with_name(f".{output_dir.name}.old")
        if previous.exists():
            shutil.rmtree(previous)
        if output_dir.exists():
            output_dir.rename(previous)
        staging.rename(output_dir)
        if previous.exists():
            shutil.rmtree(previous)


def _write(root: Path, url: str, html: str) -> Path:
    dest = root.joinpath(*url.strip("/").split("/")) if url != "/" else root
    dest.mkdir(parents=True, exist_ok=True)
    out = dest / "index.html"
    out.write_text(html, encoding="utf-8")
    return out
