"""Rebuild coordinator — serializes watch-triggered builds.

The output tree is shared by every request the live server handles, so two
builds must never write it at once.  Change batches arrive on a channel; the
coordinator collapses everything pending into a single trigger and runs one
build at a time:

    change batch ──► notify() ──► pending flag ──► worker: build, repeat

Notifications that land while a build is running set the flag again, which
yields exactly one follow-up build however many arrived.  A failed build is
reported and the loop carries on, so the next change still rebuilds.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from marksite import console

if TYPE_CHECKING:
    from collections.abc import AsyncIterable

    from marksite._types import ChangeBatch, RebuildHook
    from marksite.generator.pipeline import BuildPipeline


class RebuildCoordinator:
    """Runs at most one build at a time, coalescing change notifications.

    Args:
        pipeline: The build pipeline to invoke.
        on_rebuilt: Optional coroutine callback run after each successful build.

    """

    def __init__(
        self,
        pipeline: BuildPipeline,
        *,
        on_rebuilt: RebuildHook | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._on_rebuilt = on_rebuilt
        self._pending = asyncio.Event()
        self._building = False
        self._worker: asyncio.Task[None] | None = None
        self._consumer: asyncio.Task[None] | None = None
        self.builds_completed = 0
        self.builds_failed = 0
        self.hooks_failed = 0

    @property
    def is_building(self) -> bool:
        """Whether a build is in flight right now."""
        return self._building

    @property
    def is_pending(self) -> bool:
        """Whether a follow-up build is scheduled."""
        return self._pending.is_set()

    def notify(self) -> None:
        """Schedule a rebuild.  Repeated calls before it starts collapse into one."""
        self._pending.set()

    def start(self) -> None:
        """Spawn the worker task that performs the builds."""
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._work(), name="marksite-rebuild")

    async def run(self, changes: AsyncIterable[ChangeBatch]) -> None:
        """Consume a change channel until it ends, notifying on every batch.

        Starts the worker if needed.  Stops the worker when the channel ends or
        this coroutine is cancelled.

        """
        self.start()
        try:
            async for batch in changes:
                if batch:
                    self.notify()
        finally:
            await self.stop()

    def watch(self) -> asyncio.Task[None]:
        """Subscribe to the pipeline's change channel in a background task."""
        self._consumer = asyncio.create_task(
            self.run(self._pipeline.changes()), name="marksite-watch",
        )
        self._consumer.add_done_callback(_report_watch_failure)
        return self._consumer

    async def stop(self) -> None:
        """Cancel the worker and the watch subscription, if running."""
        tasks = [
            task
            for task in (self._consumer, self._worker)
            if task is not None and not task.done() and task is not asyncio.current_task()
        ]
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._worker = None

    async def wait_idle(self) -> None:
        """Wait until no build is running or pending."""
        while self._building or self._pending.is_set():
            await asyncio.sleep(0.01)

    async def _work(self) -> None:
        while True:
            await self._pending.wait()
            self._pending.clear()
            self._building = True
            try:
                await self._rebuild()
            finally:
                self._building = False

    async def _rebuild(self) -> None:
        console.info("Rebuilding site...")
        try:
            result = await self._pipeline.build()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self.builds_failed += 1
            console.error(f"rebuilding site: {exc}")
            console.warn("Still serving the last successful build.")
            return

        self.builds_completed += 1
        console.success(
            f"Site rebuilt ({result.total_pages} pages in {result.duration_ms:.0f}ms)"
        )
        if self._on_rebuilt is None:
            return
        try:
            await self._on_rebuilt()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self.hooks_failed += 1
            console.error(f"after rebuild: {exc}")


def _report_watch_failure(task: asyncio.Task[None]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        console.error(f"watching for changes: {exc}")
        console.warn("Automatic rebuilds have stopped; restart to resume.")
