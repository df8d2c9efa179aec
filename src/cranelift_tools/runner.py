"""External process runner.

Provides the single place where cranelift-tools spawns child processes:
version control, ``./mach``, ``make`` and the JIT test runner.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Union

from cranelift_tools.exceptions import ProcessFailureError

logger = logging.getLogger(__name__)

__all__ = ["ProcessResult", "run_command", "run_checked", "cpu_count", "SPAWN_FAILURE_CODE"]

# Exit status reported when a program could not be started at all
SPAWN_FAILURE_CODE = 127


@dataclass
class ProcessResult:
    """Result from running an external command."""

    command: list[str] = field(default_factory=list)
    return_code: int = 0
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.return_code == 0


def _display(command: Sequence[str]) -> str:
    return " ".join(shlex.quote(part) for part in command)


def run_command(
    command: Sequence[Union[str, Path]],
    cwd: Optional[Path] = None,
    capture: bool = False,
) -> ProcessResult:
    """
    Run a command and wait for it to finish.

    Args:
        command: Program and arguments
        cwd: Working directory for the child (default: inherit)
        capture: Capture stdout/stderr as text instead of streaming them
            to the user's terminal

    Returns:
        ProcessResult with the exit status (and output when captured)

    Raises:
        ProcessFailureError: If the program could not be started
    """
    argv = [str(part) for part in command]
    logger.debug("Running %s (cwd=%s)", _display(argv), cwd or os.getcwd())

    try:
        if capture:
            completed = subprocess.run(argv, cwd=cwd, capture_output=True, text=True)
        else:
            completed = subprocess.run(argv, cwd=cwd)
    except FileNotFoundError as e:
        raise ProcessFailureError(
            f"Could not start {argv[0]}: {e.strerror or e}",
            command=argv,
            return_code=SPAWN_FAILURE_CODE,
            suggestions=[f"Make sure {argv[0]} is installed and on your PATH"],
        ) from e
    except OSError as e:
        raise ProcessFailureError(
            f"Could not start {argv[0]}: {e}",
            command=argv,
            return_code=SPAWN_FAILURE_CODE,
        ) from e

    result = ProcessResult(
        command=argv,
        return_code=completed.returncode,
        stdout=(completed.stdout or "") if capture else "",
        stderr=(completed.stderr or "") if capture else "",
    )
    logger.debug("%s exited with %d", argv[0], result.return_code)
    return result


def run_checked(
    command: Sequence[Union[str, Path]],
    cwd: Optional[Path] = None,
    capture: bool = False,
    error: str | None = None,
) -> ProcessResult:
    """
    Run a command, raising if it exits non-zero.

    Args:
        command: Program and arguments
        cwd: Working directory for the child
        capture: Capture output instead of streaming it
        error: Message for the raised error (default: "<program> failed")

    Raises:
        ProcessFailureError: With the child's exit status
    """
    result = run_command(command, cwd=cwd, capture=capture)
    if not result.success:
        message = error or f"{Path(result.command[0]).name} failed"
        context = {}
        if result.stderr.strip():
            context["stderr"] = result.stderr.strip()
        raise ProcessFailureError(
            message,
            command=result.command,
            return_code=result.return_code,
            context=context,
        )
    return result


def cpu_count(default: int = 8) -> int:
    """Number of parallel jobs to use: one per CPU, or ``default`` if unknown."""
    return os.cpu_count() or default
