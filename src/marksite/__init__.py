"""Marksite — a markdown static site generator.

Resolves where a site's content lives, builds it into ``_site``, migrates
legacy single-root projects into an isolated content directory, and serves
the output with rebuild-on-change.

Quick start::

    import marksite

    marksite.build()                      # resolve content root, build once
    marksite.serve(port=3000)             # build, serve, rebuild on change
    marksite.migrate(".", "blog-data")    # legacy layout -> blog-data/

Content-root resolution order: ``--content-dir``, ``MARKSITE_CONTENT_DIR``,
``contentDir`` in ``./config.yaml``, legacy ``./content``, ``./blog-data``.

"""

__version__ = "0.1.0"
__all__ = [
    "MarksiteConfig",
    "__version__",
    "build",
    "init",
    "migrate",
    "new_post",
    "resolve_content_root",
    "serve",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import marksite`` fast; the CLI only pays for what it runs.
    """
    if name == "MarksiteConfig":
        from marksite.config import MarksiteConfig

        return MarksiteConfig

    if name == "resolve_content_root":
        from marksite.paths import resolve_content_root

        return resolve_content_root

    if name in ("build", "serve", "migrate", "init", "new_post"):
        from marksite import app

        return getattr(app, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
