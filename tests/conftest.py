"""Shared test fixtures for marksite."""

from __future__ import annotations

from pathlib import Path

import pytest

from marksite.config import CONTENT_DIR_ENV, MarksiteConfig


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's MARKSITE_CONTENT_DIR out of every test."""
    monkeypatch.delenv(CONTENT_DIR_ENV, raising=False)


@pytest.fixture
def legacy_project(tmp_path: Path) -> Path:
    """Create a legacy single-root project.

    ``content/post1.md``, ``config.yaml``, an empty ``templates/`` and an
    ``assets/`` tree holding only the shipped default files.
    """
    content = tmp_path / "content"
    content.mkdir()
    (content / "post1.md").write_text("---\ntitle: Post One\n---\n\nHello.\n")
    (tmp_path / "config.yaml").write_text("title: Legacy Site\n")
    (tmp_path / "templates").mkdir()

    css = tmp_path / "assets" / "css"
    css.mkdir(parents=True)
    (css / "style.css").write_text("body { margin: 0; }\n")
    js = tmp_path / "assets" / "js"
    js.mkdir(parents=True)
    (js / "main.js").write_text("console.log('default');\n")
    return tmp_path


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """Create a migrated content root (``blog-data/``) with a few pages."""
    root = tmp_path / "blog-data"
    posts = root / "content" / "posts"
    posts.mkdir(parents=True)
    (root / "config.yaml").write_text(
        "title: Test Site\ndescription: A site for tests\n"
    )
    (root / "content" / "about.md").write_text(
        "---\ntitle: About\n---\n\nAbout this site.\n"
    )
    (posts / "first.md").write_text(
        "---\ntitle: First Post\ndate: 2024-01-02\n---\n\n# Heading\n\nBody text.\n"
    )
    (posts / "second.md").write_text(
        "---\ntitle: Second Post\ndate: 2024-03-04\n---\n\nMore text.\n"
    )
    return root


@pytest.fixture
def config(content_root: Path) -> MarksiteConfig:
    """A MarksiteConfig rooted at the content_root fixture."""
    return MarksiteConfig(content_root=content_root)
