"""Project and post scaffolding for ``marksite init`` and ``marksite new``."""

from __future__ import annotations

import datetime as dt
import re
import unicodedata
from pathlib import Path

import yaml

from marksite._errors import ScaffoldError
from marksite.config import CONFIG_FILENAME, DEFAULT_CONTENT_DIR

_SLUG_STRIP = re.compile(r"[^\w\s-]")
_SLUG_SPACES = re.compile(r"[-\s_]+")

_WELCOME_POST = """\
---
title: Hello, world
date: {date}
---

Welcome to your new site. Edit this post in `content/posts/hello-world.md`,
or create another one with:

    marksite new "My next post"
"""


def slugify(title: str) -> str:
    """Turn a post title into a URL-safe file stem."""
    text = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode()
    text = _SLUG_STRIP.sub("", text).strip().lower()
    return _SLUG_SPACES.sub("-", text).strip("-") or "post"


def scaffold_project(directory: str | Path = ".", content_dir: str | None = None) -> Path:
    """Create a new project with an isolated content directory.

    Writes ``<directory>/<content_dir>/config.yaml`` and a welcome post, and a
    project-level ``config.yaml`` pointing at the content directory when the
    project has none yet.

    Returns:
        The absolute content root.

    Raises:
        ScaffoldError: If the content directory already holds a config.yaml.

    """
    project = Path(directory).resolve()
    name = content_dir or DEFAULT_CONTENT_DIR
    content_root = (project / name).resolve()
    site_config = content_root / CONFIG_FILENAME
    if site_config.exists():
        msg = f"{site_config} already exists; refusing to overwrite it"
        raise ScaffoldError(msg)

    posts = content_root / "content" / "posts"
    posts.mkdir(parents=True, exist_ok=True)
    site_config.write_text(
        yaml.safe_dump(
            {"title": "My Site", "description": "A marksite site", "base_url": ""},
            sort_keys=False,
        ),
        encoding="utf-8",
    )
    welcome = posts / "hello-world.md"
    if not welcome.exists():
        welcome.write_text(
            _WELCOME_POST.format(date=dt.date.today().isoformat()), encoding="utf-8",
        )

    root_config = project / CONFIG_FILENAME
    if not root_config.exists() and content_root != project:
        root_config.write_text(
            yaml.safe_dump({"contentDir": f"./{name}"}, sort_keys=False),
            encoding="utf-8",
        )
    return content_root


def create_post(title: str, content_root: Path, *, date: dt.date | None = None) -> Path:
    """Write a new post under ``content/posts/``.

    Returns:
        Path to the created file.

    Raises:
        ScaffoldError: If a post with the same slug already exists.

    """
    posts = content_root / "content" / "posts"
    path = posts / f"{slugify(title)}.md"
    if path.exists():
        msg = f"Post already exists: {path}"
        raise ScaffoldError(msg)

    front_matter = yaml.safe_dump(
        {"title": title, "date": (date or dt.date.today()).isoformat()},
        sort_keys=False,
        allow_unicode=True,
    )
    posts.mkdir(parents=True, exist_ok=True)
    path.write_text(f"---\n{front_matter}---\n\nWrite your post here.\n", encoding="utf-8")
    return path
