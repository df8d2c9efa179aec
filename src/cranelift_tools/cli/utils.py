"""Shared utilities for CLI commands."""

from __future__ import annotations

import argparse
import sys
import traceback
from typing import TYPE_CHECKING

from cranelift_tools.exceptions import CraneliftToolsError

if TYPE_CHECKING:
    from rich.console import Console

__all__ = ["format_error", "print_error", "get_error_console", "get_console"]

# Module-level console for error output, created lazily
_error_console: Console | None = None


def get_error_console() -> Console:
    """
    Get or create the Rich console for error output.

    The console writes to stderr and is cached for reuse.
    """
    global _error_console
    if _error_console is None:
        from rich.console import Console

        _error_console = Console(stderr=True, force_terminal=None)
    return _error_console


def get_console(args: argparse.Namespace) -> Console:
    """Console for progress output, silenced by the global --quiet flag."""
    from rich.console import Console

    return Console(quiet=getattr(args, "global_quiet", False), highlight=False)


def print_error(
    e: Exception,
    verbose: bool = False,
    use_rich: bool | None = None,
) -> None:
    """
    Print an exception with Rich formatting when available.

    Uses Rich console for error output on TTY terminals,
    falls back to plain text for non-TTY (pipes, logs, etc.).

    Args:
        e: The exception to print
        verbose: If True, include full stack trace
        use_rich: Override automatic TTY detection (None = auto-detect)
    """
    console = get_error_console()

    if use_rich is None:
        use_rich = console.is_terminal

    if verbose:
        # Always use plain text for stack traces
        print(traceback.format_exc(), file=sys.stderr)
        return

    if use_rich and isinstance(e, CraneliftToolsError):
        from rich.text import Text

        # Text keeps "[patch.crates-io...]" and similar from being read as markup
        console.print(Text.assemble(("Error: ", "bold red"), str(e)))
    else:
        print(format_error(e, verbose=False), file=sys.stderr)


def format_error(e: Exception, verbose: bool = False) -> str:
    """
    Format an exception for user-friendly display (plain text).

    Args:
        e: The exception to format
        verbose: If True, include full stack trace

    Returns:
        Formatted error message string
    """
    if verbose:
        return traceback.format_exc()

    if isinstance(e, CraneliftToolsError):
        return f"Error: {e}"

    return f"Error: {type(e).__name__}: {e}"
