"""Marksite theme loader — fallback chain for templates and assets.

User templates (``<content_root>/templates``) take priority.  When a template
is not found there, Jinja2 falls through to the bundled default theme.
Same pattern for assets, where user files overwrite bundled ones in the
build output.

The bundled ``assets/css/style.css`` and ``assets/js/main.js`` are the
defaults that ``marksite migrate`` recognizes as uncustomized.

"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from marksite.config import MarksiteConfig


def bundled_theme_path() -> Path:
    """Return the absolute path to the bundled default theme."""
    return Path(__file__).parent


def get_template_dirs(config: MarksiteConfig) -> list[Path]:
    """Return template directories in priority order.

    Returns:
        ``[user_templates_dir, bundled_default_templates]``

    The user directory is included even if it does not exist yet (it may be
    created while ``serve`` is watching).

    """
    bundled = bundled_theme_path() / "templates"
    user_dir = config.templates_path

    dirs: list[Path] = []
    if user_dir != bundled:
        dirs.append(user_dir)
    dirs.append(bundled)
    return dirs


def get_asset_dirs(config: MarksiteConfig) -> list[Path]:
    """Return asset directories in priority order.

    Returns:
        ``[user_assets_dir, bundled_default_assets]``

    """
    bundled = bundled_theme_path() / "assets"
    user_dir = config.assets_path

    dirs: list[Path] = []
    if user_dir != bundled:
        dirs.append(user_dir)
    dirs.append(bundled)
    return dirs
