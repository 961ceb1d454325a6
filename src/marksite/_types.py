"""Shared type definitions for marksite."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

# One debounced batch of changed source files
type ChangeBatch = set[Path]

# Sink for human-readable status lines
type Reporter = Callable[[str], None]

# Callback run after a rebuild finishes
type RebuildHook = Callable[[], Awaitable[None]]
