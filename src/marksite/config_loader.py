"""Load marksite configuration from config.yaml files.

Two files share the name ``config.yaml``:

- the project-level one, at the working directory, may name the content
  directory (``contentDir``).  Reading it never fails.
- the site-level one, inside the content root, carries site metadata used by
  the build.  A malformed site config is a ``ConfigError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from marksite._errors import ConfigError
from marksite.config import CONFIG_FILENAME

# Keys accepted for the content directory in a project-level config.yaml
_CONTENT_DIR_KEYS = ("contentDir", "content_dir")

_DEFAULT_TITLE = "My Site"


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Site metadata from ``<content_root>/config.yaml``.

    Attributes:
        title: Site title shown in page headers.
        description: Site description for the index page and meta tags.
        base_url: Public URL of the deployed site.
        author: Default post author.
        extra: Remaining keys, passed through to templates as ``site.extra``.

    """

    title: str = _DEFAULT_TITLE
    description: str = ""
    base_url: str = ""
    author: str = ""
    extra: dict[str, Any] | None = None


def read_root_content_dir(cwd: Path) -> str | None:
    """Return the content directory named by ``<cwd>/config.yaml``, if any.

    Any read or parse failure yields None.
    """
    data = _safe_load(cwd / CONFIG_FILENAME)
    if not isinstance(data, dict):
        return None
    for key in _CONTENT_DIR_KEYS:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def load_site_config(content_root: Path) -> SiteConfig:
    """Load site metadata from the content root.

    A missing file yields defaults.

    Raises:
        ConfigError: If the file cannot be parsed or is not a mapping.

    """
    path = content_root / CONFIG_FILENAME
    if not path.is_file():
        return SiteConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)

    known = {"title", "description", "base_url", "baseUrl", "author"}
    return SiteConfig(
        title=str(data.get("title") or _DEFAULT_TITLE),
        description=str(data.get("description") or ""),
        base_url=str(data.get("base_url") or data.get("baseUrl") or ""),
        author=str(data.get("author") or ""),
        extra={k: v for k, v in data.items() if k not in known},
    )


def _safe_load(path: Path) -> object:
    """Parse YAML at *path*.  Returns None on any error."""
    if not path.is_file():
        return None
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except Exception:
        return None
