"""Marksite CLI — marksite init / build / serve / new / migrate.

Entry point for the ``marksite`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys

from marksite.config import DEFAULT_CONTENT_DIR

# Failure prefix per command, e.g. "Error building site: ..."
_ACTIONS: dict[str, str] = {
    "init": "initializing project",
    "build": "building site",
    "serve": "starting server",
    "new": "creating post",
    "migrate": "during migration",
}


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the marksite CLI."""
    parser = argparse.ArgumentParser(
        prog="marksite",
        description="A markdown static site generator.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # marksite init
    init_parser = subparsers.add_parser("init", help="Initialize a new project")
    init_parser.add_argument("-d", "--dir", default=".", help="Target directory")
    init_parser.add_argument("-c", "--content-dir", default=None, help="Content directory")

    # marksite build
    build_parser = subparsers.add_parser("build", help="Build the static site")
    build_parser.add_argument("-d", "--content-dir", default=None, help="Content directory")
    build_parser.add_argument(
        "-w", "--watch", action="store_true", help="Watch for changes and rebuild",
    )

    # marksite serve
    serve_parser = subparsers.add_parser("serve", help="Start the development server")
    serve_parser.add_argument("-d", "--content-dir", default=None, help="Content directory")
    serve_parser.add_argument("-p", "--port", type=int, default=3000, help="Port number")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")

    # marksite new
    new_parser = subparsers.add_parser("new", help="Create a new blog post")
    new_parser.add_argument("title", help="Post title")
    new_parser.add_argument("-d", "--content-dir", default=None, help="Content directory")

    # marksite migrate
    migrate_parser = subparsers.add_parser(
        "migrate",
        help="Move a legacy project into an isolated content directory",
    )
    migrate_parser.add_argument("-d", "--dir", default=".", help="Project directory")
    migrate_parser.add_argument(
        "-n", "--name", default=DEFAULT_CONTENT_DIR, help="Content directory name",
    )
    migrate_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be copied",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from marksite import __version__

    return __version__


def _dispatch(args: argparse.Namespace) -> None:
    from marksite import app

    if args.command == "init":
        app.init(args.dir, args.content_dir)
    elif args.command == "build":
        app.build(args.content_dir, watch=args.watch)
    elif args.command == "serve":
        app.serve(args.content_dir, port=args.port, host=args.host)
    elif args.command == "new":
        app.new_post(args.title, args.content_dir)
    elif args.command == "migrate":
        app.migrate(args.dir, args.name, dry_run=args.dry_run)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    from marksite import console
    from marksite._errors import MarksiteError

    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        _dispatch(args)
    except (MarksiteError, OSError) as exc:
        console.error(f"{_ACTIONS[args.command]}: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
