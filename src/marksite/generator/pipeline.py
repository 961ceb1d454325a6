"""Build pipeline contract.

A pipeline turns a content root into ``<content_root>/_site`` and exposes a
change channel the rebuild loop subscribes to.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Aggregate result of one build.

    Attributes:
        pages: Output paths of the rendered pages.
        total_assets: Number of asset files copied.
        duration_ms: Wall-clock time for the build.
        output_dir: Absolute path to the output tree.

    """

    pages: tuple[Path, ...]
    total_assets: int
    duration_ms: float
    output_dir: Path

    @property
    def total_pages(self) -> int:
        return len(self.pages)


@runtime_checkable
class BuildPipeline(Protocol):
    """What the rebuild loop needs from a site builder."""

    async def build(self) -> BuildResult:
        """Materialize the output tree.  Raises ``BuildError`` on failure."""
        ...

    def changes(self) -> AsyncIterator[set[Path]]:
        """Yield debounced batches of changed source paths until cancelled."""
        ...
