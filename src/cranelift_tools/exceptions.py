"""
Custom exception hierarchy for cranelift-tools.

Every error carries a message plus optional context and suggestions, so the
CLI can tell the user what went wrong and what to try next.

Example::

    from cranelift_tools.exceptions import InvalidPathError

    raise InvalidPathError(
        "Build directory does not exist",
        path="/tmp/obj-debug",
        suggestions=["Run ./mach build once to create the object directory"],
    )
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union


class CraneliftToolsError(Exception):
    """
    Base exception for all cranelift-tools errors.

    Attributes:
        context: Dictionary of contextual information (path, command, ...)
        suggestions: List of actionable suggestions for fixing the error
        exit_code: Process exit status the CLI reports for this error
    """

    exit_code = 1

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class InvalidPathError(CraneliftToolsError):
    """
    A path argument is missing or does not have the expected structure.

    Raised before any external command runs, e.g. when the source tree root
    is not a checkout or the build directory has no JS shell.

    Example::

        raise InvalidPathError(
            "Not a git or Mercurial repository",
            path="/home/me/gecko",
        )
    """

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.path = Path(path) if path is not None else None
        ctx = context or {}
        if path is not None and "path" not in ctx:
            ctx["path"] = str(path)
        super().__init__(message, ctx, suggestions)


class ProcessFailureError(CraneliftToolsError):
    """
    A delegated command exited non-zero or could not be started.

    The command's own exit status is kept in ``return_code`` and becomes the
    exit status of the CLI.

    Example::

        raise ProcessFailureError(
            "make failed",
            command=["make", "-sj8"],
            return_code=2,
        )
    """

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        return_code: int = 1,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.command = list(command) if command is not None else []
        self.return_code = return_code
        ctx = context or {}
        if self.command and "command" not in ctx:
            ctx["command"] = " ".join(self.command)
        ctx.setdefault("exit code", return_code)
        super().__init__(message, ctx, suggestions)

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        # Killed by signal N: report 128 + N, as a shell would
        if self.return_code < 0:
            return 128 - self.return_code
        return self.return_code if self.return_code != 0 else 1


class DirtyWorkingCopyError(CraneliftToolsError):
    """
    The source tree has uncommitted changes.

    bump and local commit on the user's behalf, so they refuse to start
    on top of local modifications.
    """

    pass


class UpstreamError(CraneliftToolsError):
    """
    Looking up the newest upstream release or commit failed.

    Example::

        raise UpstreamError(
            "crates.io request failed",
            context={"url": "https://crates.io/api/v1/crates/cranelift-codegen"},
            suggestions=["Check your network connection"],
        )
    """

    pass


class ConfigError(CraneliftToolsError):
    """Configuration file is unreadable or invalid."""

    pass


__all__ = [
    "CraneliftToolsError",
    "InvalidPathError",
    "ProcessFailureError",
    "DirtyWorkingCopyError",
    "UpstreamError",
    "ConfigError",
]
