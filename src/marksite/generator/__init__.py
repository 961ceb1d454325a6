"""Generator layer — the pipeline contract, the default builder, and source watching.

The serve loop only depends on the ``BuildPipeline`` protocol; ``SiteBuilder``
is the implementation the CLI uses.
"""

from marksite.generator.builder import SiteBuilder
from marksite.generator.pipeline import BuildPipeline, BuildResult
from marksite.generator.watcher import SourceWatcher

__all__ = [
    "BuildPipeline",
    "BuildResult",
    "SiteBuilder",
    "SourceWatcher",
]
