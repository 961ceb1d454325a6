"""Content-root resolution.

Exactly one content root is active per invocation.  It is chosen from a strict
precedence chain, and the first source that yields a non-empty value wins:

    1. explicit ``--content-dir`` flag
    2. ``MARKSITE_CONTENT_DIR`` environment variable
    3. ``contentDir`` in ``./config.yaml``
    4. legacy ``./content`` directory (the working directory itself is the root)
    5. ``./blog-data``

Resolution never fails.  A malformed ``config.yaml`` counts as "no value".
"""

from __future__ import annotations

import enum
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from marksite import console
from marksite.config import CONTENT_DIR_ENV, DEFAULT_CONTENT_DIR
from marksite.config_loader import read_root_content_dir

LEGACY_WARNING = (
    "Using legacy content structure (./content). "
    "Consider migrating with `marksite migrate` and --content-dir"
)


class ResolutionSource(enum.Enum):
    """Where a content root came from, in priority order."""

    FLAG = "flag"
    ENVIRONMENT = "environment"
    ROOT_CONFIG = "root-config"
    LEGACY_LAYOUT = "legacy-layout"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class Resolution:
    """A resolved content root and the source that produced it."""

    path: Path
    source: ResolutionSource


def resolve(
    explicit: str | os.PathLike[str] | None = None,
    *,
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Resolution:
    """Resolve the content root.

    Each source is consulted only when every higher-priority source yielded
    nothing.

    Args:
        explicit: Value of the ``--content-dir`` flag, if given.
        cwd: Working directory; defaults to ``Path.cwd()``.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        Resolution with an absolute path.

    """
    base = (cwd or Path.cwd()).absolute()
    env = os.environ if environ is None else environ

    sources: tuple[tuple[ResolutionSource, Callable[[], str | None]], ...] = (
        (ResolutionSource.FLAG, lambda: os.fspath(explicit) if explicit else None),
        (ResolutionSource.ENVIRONMENT, lambda: env.get(CONTENT_DIR_ENV)),
        (ResolutionSource.ROOT_CONFIG, lambda: read_root_content_dir(base)),
        (ResolutionSource.LEGACY_LAYOUT, lambda: _legacy_root(base)),
    )
    for source, lookup in sources:
        value = lookup()
        if value:
            return Resolution(path=_absolute(base, value), source=source)

    return Resolution(
        path=_absolute(base, DEFAULT_CONTENT_DIR),
        source=ResolutionSource.DEFAULT,
    )


def resolve_content_root(
    explicit: str | os.PathLike[str] | None = None,
    *,
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Resolve the content root and return just the path."""
    return resolve(explicit, cwd=cwd, environ=environ).path


def _legacy_root(base: Path) -> str | None:
    if not (base / "content").exists():
        return None
    console.warn(LEGACY_WARNING)
    return "."


def _absolute(base: Path, value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base / path
    return path.resolve()
