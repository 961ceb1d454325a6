"""Source watcher — the change channel feeding the rebuild loop.

Monitors the content root for changes to content, templates, assets and the
site config.  The build output (``_site/``) lives inside the content root, so
it is filtered out; otherwise every build would trigger the next one.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from watchfiles import Change, DefaultFilter, awatch

from marksite.config import CONFIG_FILENAME

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from marksite.config import MarksiteConfig


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A source file change detected by the watcher.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.
        category: What kind of file changed.

    """

    path: Path
    kind: Literal["created", "modified", "deleted"]
    category: Literal["content", "template", "config", "asset"]


_CHANGE_KIND_MAP: dict[Change, Literal["created", "modified", "deleted"]] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def categorize_change(path: Path, config: MarksiteConfig) -> str | None:
    """Determine the category of a changed file based on its location.

    Returns None for files the build does not read, including anything
    under the output directory.

    """
    try:
        rel = path.relative_to(config.content_root)
    except ValueError:
        return None

    parts = rel.parts
    if not parts:
        return None

    if len(parts) == 1 and parts[0] == CONFIG_FILENAME:
        return "config"

    first_dir = parts[0]
    if first_dir == config.output_dir:
        return None
    if first_dir == config.content_dir:
        return "content"
    if first_dir == config.templates_dir:
        return "template"
    if first_dir == config.assets_dir:
        return "asset"

    return None


class SourceFilter(DefaultFilter):
    """watchfiles filter that only passes files the build reads."""

    def __init__(self, config: MarksiteConfig) -> None:
        super().__init__()
        self._config = config

    def __call__(self, change: Change, path: str) -> bool:
        if not super().__call__(change, path):
            return False
        return categorize_change(Path(path), self._config) is not None


class SourceWatcher:
    """Yields debounced batches of source changes for one content root.

    Wraps ``watchfiles.awatch`` so the whole subscription lives on the event
    loop.  Each batch is one debounce window; coalescing across batches is the
    rebuild coordinator's job.

    """

    def __init__(self, config: MarksiteConfig, *, debounce_ms: int = 300) -> None:
        self._config = config
        self._debounce_ms = debounce_ms
        self._stop_event = asyncio.Event()

    def stop(self) -> None:
        """End the subscription; ``changes()`` returns after its current step."""
        self._stop_event.set()

    async def events(self) -> AsyncIterator[list[ChangeEvent]]:
        """Async iterator of categorized change events, one list per batch."""
        async for raw_changes in awatch(
            self._config.content_root,
            watch_filter=SourceFilter(self._config),
            debounce=self._debounce_ms,
            step=100,
            stop_event=self._stop_event,
        ):
            batch: list[ChangeEvent] = []
            for change_type, path_str in raw_changes:
                path = Path(path_str)
                category = categorize_change(path, self._config)
                if category is None:
                    continue
                kind = _CHANGE_KIND_MAP.get(change_type, "modified")
                batch.append(ChangeEvent(path=path, kind=kind, category=category))  # type: ignore[arg-type]
            if batch:
                yield batch

    async def changes(self) -> AsyncIterator[set[Path]]:
        """Async iterator of changed path sets, one per debounced batch."""
        async for batch in self.events():
            yield {event.path for event in batch}
