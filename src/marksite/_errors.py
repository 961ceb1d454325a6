"""Marksite error hierarchy.

All marksite-specific errors inherit from MarksiteError for easy catching.
Content-root resolution never raises; migration skips are outcomes, not errors.
"""

from pathlib import Path


class MarksiteError(Exception):
    """Base error for all marksite operations."""


class ConfigError(MarksiteError):
    """Invalid site configuration."""


class MigrationError(MarksiteError):
    """Error while migrating a legacy project layout."""


class CopyFailure(MigrationError):
    """A filesystem copy failed part-way through a migration.

    Directories created before the failure are left in place.
    """

    def __init__(self, source: Path, cause: OSError) -> None:
        self.source = source
        self.cause = cause
        super().__init__(f"Failed to copy {source}: {cause}")


class BuildError(MarksiteError):
    """Error raised by the build pipeline."""


class ServerError(MarksiteError):
    """Error in the live server lifecycle."""


class PortInUseError(ServerError):
    """The requested port is already bound by another process."""

    def __init__(self, port: int) -> None:
        self.port = port
        super().__init__(
            f"Port {port} is already in use. "
            "Close the other server or pick a different port with --port <number>"
        )


class ScaffoldError(MarksiteError):
    """Refused to scaffold over existing files."""
