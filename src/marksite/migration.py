"""Legacy layout migration.

Older projects keep ``content/``, ``config.yaml``, ``templates/`` and
``assets/`` directly at the project root.  Migration copies them into an
isolated content directory (``blog-data/`` by default) so that the project
root can track upstream updates to the shipped defaults.

Rules:
    - No ``content/`` at the root: nothing to migrate.
    - Destination already exists: abort before writing anything.
    - ``templates/`` is copied only when non-empty.
    - ``assets/`` is copied only when ``assets/css`` or ``assets/js`` holds
      something besides the shipped ``style.css`` / ``main.js``.
    - Sources are copied, never moved.  A failed copy stops the migration
      and leaves whatever was already written in place.
"""

from __future__ import annotations

import enum
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from marksite import console
from marksite._errors import CopyFailure
from marksite.config import CONFIG_FILENAME, DEFAULT_CONTENT_DIR

if TYPE_CHECKING:
    from collections.abc import Callable

    from marksite._types import Reporter

# Shipped default file per asset subdirectory
DEFAULT_ASSET_FILES: dict[str, str] = {
    "css": "style.css",
    "js": "main.js",
}


class MigrationOutcome(enum.Enum):
    """How a migration run ended."""

    NO_LEGACY = "no-legacy"
    DESTINATION_EXISTS = "destination-exists"
    MIGRATED = "migrated"


@dataclass(frozen=True, slots=True)
class MigrationPlan:
    """Paths involved in one migration.  Computed per run, never persisted."""

    project_dir: Path
    destination: Path

    @property
    def content_path(self) -> Path:
        return self.project_dir / "content"

    @property
    def config_path(self) -> Path:
        return self.project_dir / CONFIG_FILENAME

    @property
    def templates_path(self) -> Path:
        return self.project_dir / "templates"

    @property
    def assets_path(self) -> Path:
        return self.project_dir / "assets"


@dataclass(frozen=True, slots=True)
class CustomizationVerdict:
    """Whether templates/assets differ from the shipped defaults."""

    templates: bool
    assets: bool


@dataclass(slots=True)
class MigrationReport:
    """Result of a migration run.

    Attributes:
        outcome: How the run ended.
        plan: The computed plan.
        copied: Names of the entries copied into the destination, in order.
        skipped: Names of legacy entries left out because they hold defaults.

    """

    outcome: MigrationOutcome
    plan: MigrationPlan
    copied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def plan_migration(
    target_dir: str | Path = ".",
    name: str = DEFAULT_CONTENT_DIR,
) -> MigrationPlan:
    """Compute the migration plan for *target_dir* without touching disk."""
    project_dir = Path(target_dir).resolve()
    return MigrationPlan(project_dir=project_dir, destination=project_dir / name)


def templates_customized(templates_path: Path) -> bool:
    """A templates directory is customized when it has any entry at all."""
    if not templates_path.is_dir():
        return False
    return any(templates_path.iterdir())


def assets_customized(assets_path: Path) -> bool:
    """An assets directory is customized when css/ or js/ holds a non-default file.

    A missing subdirectory counts as not customized.
    """
    for subdir, default_name in DEFAULT_ASSET_FILES.items():
        path = assets_path / subdir
        if not path.is_dir():
            continue
        if any(entry.name != default_name for entry in path.iterdir()):
            return True
    return False


def assess(plan: MigrationPlan) -> CustomizationVerdict:
    """Compute a fresh customization verdict for the plan's sources."""
    return CustomizationVerdict(
        templates=templates_customized(plan.templates_path),
        assets=assets_customized(plan.assets_path),
    )


def migrate(
    target_dir: str | Path = ".",
    name: str = DEFAULT_CONTENT_DIR,
    *,
    report: Reporter = console.info,
) -> MigrationReport:
    """Migrate a legacy project into an isolated content directory.

    Args:
        target_dir: Project directory holding the legacy layout.
        name: Name of the content directory to create inside *target_dir*.
        report: Sink for progress lines.

    Returns:
        MigrationReport describing what happened.

    Raises:
        CopyFailure: If a copy fails.  Earlier steps are not rolled back.

    """
    plan = plan_migration(target_dir, name)
    result = MigrationReport(outcome=MigrationOutcome.NO_LEGACY, plan=plan)

    if not plan.content_path.exists():
        report("No legacy content structure found. Project may already be migrated.")
        return result

    if plan.destination.exists():
        report(f"{name}/ already exists. Skipping migration to prevent data loss.")
        result.outcome = MigrationOutcome.DESTINATION_EXISTS
        return result

    report("Migrating project to the content directory layout...")
    report(f"Creating {name}/ directory...")
    _guarded(plan.destination, lambda: plan.destination.mkdir(parents=True))

    if plan.config_path.is_file():
        _copy(plan.config_path, plan.destination / CONFIG_FILENAME)
        result.copied.append(CONFIG_FILENAME)
        report(f"  copied {CONFIG_FILENAME}")

    _copy(plan.content_path, plan.destination / "content")
    result.copied.append("content")
    report("  copied content/")

    if plan.templates_path.exists():
        if templates_customized(plan.templates_path):
            _copy(plan.templates_path, plan.destination / "templates")
            result.copied.append("templates")
            report("  copied custom templates/")
        else:
            result.skipped.append("templates")
            report("  skipping templates/ (using default templates)")

    if plan.assets_path.exists():
        if assets_customized(plan.assets_path):
            _copy(plan.assets_path, plan.destination / "assets")
            result.copied.append("assets")
            report("  copied custom assets/")
        else:
            result.skipped.append("assets")
            report("  skipping assets/ (using default assets)")

    result.outcome = MigrationOutcome.MIGRATED
    for line in next_steps(name):
        report(line)
    return result


def next_steps(name: str) -> list[str]:
    """Return the follow-up hints printed after a successful migration."""
    return [
        "",
        "Migration complete.",
        "",
        "Next steps:",
        f"  1. Review {name}/",
        "  2. Remove the old files (optional):",
        f"       rm {CONFIG_FILENAME}",
        "       rm -rf content/",
        "  3. Test your site:",
        f"       marksite build --content-dir ./{name}",
        f"       marksite serve --content-dir ./{name}",
        "",
        f"Or set it once in ./{CONFIG_FILENAME}:",
        f"  contentDir: ./{name}",
    ]


def _copy(source: Path, dest: Path) -> None:
    if source.is_dir():
        _guarded(source, lambda: shutil.copytree(source, dest))
    else:
        _guarded(source, lambda: shutil.copy2(source, dest))


def _guarded(source: Path, action: Callable[[], object]) -> None:
    try:
        action()
    except OSError as exc:
        raise CopyFailure(source, exc) from exc
