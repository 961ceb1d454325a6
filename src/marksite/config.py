"""Marksite configuration.

MarksiteConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path

# Environment variable that overrides content-root resolution
CONTENT_DIR_ENV = "MARKSITE_CONTENT_DIR"

# Fallback content directory when nothing else resolves
DEFAULT_CONTENT_DIR = "blog-data"

# Project-level and site-level configuration file name
CONFIG_FILENAME = "config.yaml"


@dataclass(frozen=True, slots=True)
class MarksiteConfig:
    """Configuration for one marksite invocation.

    Attributes:
        content_root: The resolved content root (config.yaml, content/,
              templates/, assets/).  Always resolved to an absolute path on
              construction and never re-resolved afterwards.
        host: Bind address for ``serve``.
        port: Bind port for ``serve``.
        output_dir: Build output directory, relative to the content root.
        content_dir: Directory holding Markdown sources.
        templates_dir: Directory holding user template overrides.
        assets_dir: Directory holding user asset overrides.

    """

    content_root: Path = field(default_factory=lambda: Path(DEFAULT_CONTENT_DIR))
    host: str = "127.0.0.1"
    port: int = 3000
    output_dir: str = "_site"
    content_dir: str = "content"
    templates_dir: str = "templates"
    assets_dir: str = "assets"

    def __post_init__(self) -> None:
        # watchfiles reports absolute paths; keep relative_to() comparisons valid.
        if not self.content_root.is_absolute():
            object.__setattr__(self, "content_root", self.content_root.resolve())

    @property
    def config_path(self) -> Path:
        """Absolute path to the site-level config.yaml."""
        return self.content_root / CONFIG_FILENAME

    @property
    def content_path(self) -> Path:
        """Absolute path to the Markdown content directory."""
        return self.content_root / self.content_dir

    @property
    def templates_path(self) -> Path:
        """Absolute path to the user templates directory."""
        return self.content_root / self.templates_dir

    @property
    def assets_path(self) -> Path:
        """Absolute path to the user assets directory."""
        return self.content_root / self.assets_dir

    @property
    def output_path(self) -> Path:
        """Absolute path to the build output tree."""
        return self.content_root / self.output_dir
