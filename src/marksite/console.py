"""Console output — status lines and the startup banner.

Every human-readable line marksite prints goes to stderr through this module.
Detects ``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from marksite.config import MarksiteConfig


# ---------------------------------------------------------------------------
# ANSI helpers: respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_RED = "\033[31m" if _COLOR else ""


_MODE_STYLES: dict[str, tuple[str, str]] = {
    "build": (_YELLOW, "build"),
    "watch": (_GREEN, "watch"),
    "serve": (_CYAN, "serve"),
}


def _mode_badge(mode: str) -> str:
    """Return a styled [mode] badge."""
    color, label = _MODE_STYLES.get(mode, (_DIM, mode))
    return f"{color}[{label}]{_RESET}"


def _clickable_url(url: str) -> str:
    """Wrap *url* in an OSC 8 hyperlink escape if the terminal supports it."""
    if not _COLOR:
        return url
    return f"\033]8;;{url}\033\\{_BOLD}{_CYAN}{url}{_RESET}\033]8;;\033\\"


# ---------------------------------------------------------------------------
# Status lines
# ---------------------------------------------------------------------------

def info(message: str) -> None:
    """Print a plain status line."""
    print(message, file=sys.stderr)


def success(message: str) -> None:
    print(f"{_GREEN}✓{_RESET} {message}", file=sys.stderr)


def warn(message: str) -> None:
    print(f"{_YELLOW}!{_RESET} {message}", file=sys.stderr)


def error(message: str) -> None:
    print(f"{_RED}{_BOLD}Error{_RESET} {message}", file=sys.stderr)


def print_banner(
    config: MarksiteConfig,
    mode: str,
    *,
    page_count: int = 0,
    build_ms: float = 0.0,
    watching: bool = False,
) -> None:
    """Print the marksite startup banner to stderr.

    Args:
        config: Resolved MarksiteConfig.
        mode: One of ``"build"``, ``"watch"``, ``"serve"``.
        page_count: Number of pages written by the initial build.
        build_ms: Time spent on the initial build in milliseconds.
        watching: Whether the rebuild loop is active.

    """
    from marksite import __version__

    header = f"  {_BOLD}marksite{_RESET} {_DIM}v{__version__}{_RESET}  {_mode_badge(mode)}"
    lines: list[str] = [
        "",
        header,
        f"  {_DIM}{'─' * 43}{_RESET}",
        f"  {_DIM}├─{_RESET} content: {_DIM}{config.content_root}{_RESET}",
    ]

    pages_label = "page" if page_count == 1 else "pages"
    timing = f" {_DIM}in {build_ms:.0f}ms{_RESET}" if build_ms > 0 else ""
    lines.append(f"  {_DIM}├─{_RESET} {page_count} {pages_label} built{timing}")
    lines.append(f"  {_DIM}└─{_RESET} output: {_DIM}{config.output_path}{_RESET}")

    if mode == "serve":
        url = f"http://{_display_host(config.host)}:{config.port}"
        lines.append("")
        lines.append(f"  {_clickable_url(url)}")

    if watching:
        lines.append("")
        lines.append(f"  {_DIM}Watching for changes...{_RESET}")

    lines.append("")
    print("\n".join(lines), file=sys.stderr)


def _display_host(host: str) -> str:
    return "localhost" if host in ("127.0.0.1", "0.0.0.0", "") else host
