"""Marksite commands — resolve, build, serve, migrate, scaffold.

The public functions here are what the CLI dispatches to.  Each resolves the
content root once (where the command needs one) and then drives the pieces:

    build    resolve -> build [-> rebuild loop]
    serve    resolve -> build -> live server -> rebuild loop
    migrate  legacy layout -> isolated content directory
    init     scaffold a new project
    new      scaffold a new post
"""

from __future__ import annotations

import asyncio
import contextlib
import signal
from pathlib import Path

from marksite import console
from marksite.config import DEFAULT_CONTENT_DIR, MarksiteConfig
from marksite.generator.builder import SiteBuilder
from marksite.live.coordinator import RebuildCoordinator
from marksite.live.server import LiveServer
from marksite.migration import (
    MigrationOutcome,
    MigrationReport,
    assess,
    plan_migration,
)
from marksite.migration import migrate as run_migration
from marksite.paths import resolve_content_root


def load_config(content_dir: str | None = None, **overrides: object) -> MarksiteConfig:
    """Resolve the content root and build the frozen config for this run."""
    root = resolve_content_root(content_dir)
    return MarksiteConfig(content_root=root, **overrides)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# build / serve
# ---------------------------------------------------------------------------


def build(content_dir: str | None = None, *, watch: bool = False) -> None:
    """Build the site once, then optionally rebuild on every change.

    Raises:
        BuildError: If the initial build fails.

    """
    config = load_config(content_dir)
    builder = SiteBuilder(config)

    result = builder.build_sync()
    console.print_banner(
        config, "watch" if watch else "build",
        page_count=result.total_pages, build_ms=result.duration_ms, watching=watch,
    )
    console.success("Site built successfully!")
    if not watch:
        return

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_watch(builder))
    console.info("Stopped watching.")


def serve(
    content_dir: str | None = None,
    *,
    port: int = 3000,
    host: str = "127.0.0.1",
) -> None:
    """Build the site, serve it, and rebuild on every change.

    Raises:
        BuildError: If the initial build fails; no server is started.
        PortInUseError: If the port is taken.

    """
    config = load_config(content_dir, port=port, host=host)
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_serve(config))
    console.info("Server stopped.")


async def _watch(builder: SiteBuilder) -> None:
    coordinator = RebuildCoordinator(builder)
    _install_shutdown_handler()
    try:
        await coordinator.run(builder.changes())
    finally:
        builder.stop_watching()
        await coordinator.stop()


async def _serve(config: MarksiteConfig) -> None:
    builder = SiteBuilder(config)
    result = await builder.build()

    server = LiveServer(config.content_root, config.port, config.host, output_dir=config.output_dir)
    session = await server.start()

    console.print_banner(
        config, "serve",
        page_count=result.total_pages, build_ms=result.duration_ms, watching=True,
    )

    coordinator = RebuildCoordinator(builder)
    coordinator.watch()
    try:
        await session.wait_closed()
    finally:
        builder.stop_watching()
        await coordinator.stop()
        await session.stop()


def _install_shutdown_handler() -> None:
    """Turn SIGTERM into cancellation of the current task."""
    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    if task is None:
        return
    with contextlib.suppress(NotImplementedError, RuntimeError):
        loop.add_signal_handler(signal.SIGTERM, task.cancel)


# ---------------------------------------------------------------------------
# migrate / init / new
# ---------------------------------------------------------------------------


def migrate(
    directory: str | Path = ".",
    name: str = DEFAULT_CONTENT_DIR,
    *,
    dry_run: bool = False,
) -> MigrationReport | None:
    """Migrate a legacy layout, or describe what a migration would do.

    Skips (no legacy layout, destination exists) are reported, not raised.

    Raises:
        CopyFailure: If a copy fails part-way.

    """
    if dry_run:
        _describe_migration(directory, name)
        return None

    report = run_migration(directory, name)
    if report.outcome is MigrationOutcome.MIGRATED:
        console.success(f"Migrated into {report.plan.destination}")
    return report


def _describe_migration(directory: str | Path, name: str) -> None:
    plan = plan_migration(directory, name)
    if not plan.content_path.exists():
        console.info("No legacy content structure found. Nothing to migrate.")
        return
    if plan.destination.exists():
        console.warn(f"{name}/ already exists. Migration would be skipped.")
        return

    verdict = assess(plan)
    console.info(f"Would create {plan.destination}/ with:")
    if plan.config_path.is_file():
        console.info("  config.yaml")
    console.info("  content/")
    if plan.templates_path.exists():
        console.info("  templates/" if verdict.templates else "  (skip templates/: defaults)")
    if plan.assets_path.exists():
        console.info("  assets/" if verdict.assets else "  (skip assets/: defaults)")


def init(directory: str | Path = ".", content_dir: str | None = None) -> Path:
    """Scaffold a new project and return its content root."""
    from marksite.scaffold import scaffold_project

    content_root = scaffold_project(directory, content_dir)
    console.success("Project initialized successfully!")
    console.info("")
    console.info("Next steps:")
    console.info(f"  1. Edit {content_root / 'config.yaml'} to customize your site")
    console.info("  2. Run `marksite build` to build your site")
    console.info("  3. Run `marksite serve` to preview locally")
    return content_root


def new_post(title: str, content_dir: str | None = None) -> Path:
    """Create a new post in the resolved content root and return its path."""
    from marksite.scaffold import create_post

    path = create_post(title, resolve_content_root(content_dir))
    console.success(f"Created new post: {path}")
    return path
