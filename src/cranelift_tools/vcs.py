"""
Version control helpers for Gecko working copies.

Gecko is developed in both Mercurial and git, so the source tree root may be
either. Only the handful of operations the workflows need are wrapped here:
detecting the kind of working copy, checking it is clean, and committing.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from cranelift_tools.exceptions import (
    DirtyWorkingCopyError,
    InvalidPathError,
    ProcessFailureError,
)
from cranelift_tools.runner import run_checked, run_command

logger = logging.getLogger(__name__)

__all__ = ["VCS", "Git", "Mercurial", "detect_vcs", "is_working_copy", "ensure_clean"]


class VCS(ABC):
    """A working copy managed by some version control system."""

    name: str = ""
    marker: str = ""
    # Output fragments meaning "commit had nothing to record"
    nothing_to_commit: tuple[str, ...] = ()

    def __init__(self, root: Path):
        self.root = root

    @classmethod
    def is_repo(cls, path: Path) -> bool:
        """Check whether ``path`` is the root of a working copy of this kind."""
        return (path / cls.marker).exists()

    @abstractmethod
    def status_command(self) -> list[str]:
        """Command listing modified tracked files, one per line."""
        ...

    @abstractmethod
    def commit_commands(self, message: str, paths: Sequence[Path] = ()) -> list[list[str]]:
        """Commands that record pending changes as one commit.

        Tracked modifications are always included. Untracked files are only
        picked up under ``paths`` (relative to the root).
        """
        ...

    def has_changes(self) -> bool:
        """Return True if tracked files have uncommitted modifications."""
        result = run_checked(
            self.status_command(),
            cwd=self.root,
            capture=True,
            error=f"Could not query {self.name} status",
        )
        return bool(result.stdout.strip())

    def commit(self, message: str, paths: Sequence[Path] = ()) -> bool:
        """
        Commit pending changes, adding new files found under ``paths``.

        Returns:
            True if a commit was created, False if there was nothing to commit

        Raises:
            ProcessFailureError: If the VCS reports any other failure
        """
        *prepare, commit = self.commit_commands(message, paths)
        for command in prepare:
            run_checked(command, cwd=self.root, capture=True)

        result = run_command(commit, cwd=self.root, capture=True)
        if result.success:
            logger.info("Committed: %s", message)
            return True

        output = f"{result.stdout}\n{result.stderr}"
        if any(marker in output for marker in self.nothing_to_commit):
            logger.info("Nothing to commit for: %s", message)
            return False

        raise ProcessFailureError(
            f"{self.name} commit failed",
            command=result.command,
            return_code=result.return_code,
            context={"output": output.strip()} if output.strip() else None,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.root)!r})"


class Mercurial(VCS):
    """Mercurial working copy."""

    name = "hg"
    marker = ".hg"
    nothing_to_commit = ("nothing changed",)

    @classmethod
    def is_repo(cls, path: Path) -> bool:
        return (path / cls.marker).is_dir()

    def status_command(self) -> list[str]:
        return ["hg", "status", "--modified", "--added", "--removed", "--deleted"]

    def commit_commands(self, message: str, paths: Sequence[Path] = ()) -> list[list[str]]:
        # mach vendor rust already runs addremove for hg trees
        return [["hg", "commit", "-m", message]]


class Git(VCS):
    """git working copy (including worktrees, where .git is a file)."""

    name = "git"
    marker = ".git"
    nothing_to_commit = ("nothing to commit", "nothing added to commit")

    def status_command(self) -> list[str]:
        return ["git", "status", "--porcelain", "--untracked-files=no"]

    def commit_commands(self, message: str, paths: Sequence[Path] = ()) -> list[list[str]]:
        commands = []
        # git add fails on a pathspec that matches nothing
        existing = [str(path) for path in paths if (self.root / path).exists()]
        if existing:
            commands.append(["git", "add", "--all", "--", *existing])
        commands.append(["git", "commit", "--all", "-m", message])
        return commands


def is_working_copy(path: Path) -> bool:
    """Return True if ``path`` is a git or Mercurial working copy root."""
    return Mercurial.is_repo(path) or Git.is_repo(path)


def detect_vcs(root: Path) -> VCS:
    """
    Pick the VCS for a working copy, preferring Mercurial.

    Raises:
        InvalidPathError: If ``root`` is neither a git nor a Mercurial repository
    """
    for vcs_class in (Mercurial, Git):
        if vcs_class.is_repo(root):
            logger.debug("Detected %s working copy at %s", vcs_class.name, root)
            return vcs_class(root)
    raise InvalidPathError(
        "Not a git or Mercurial repository",
        path=root,
        suggestions=["Pass the root of your Gecko checkout"],
    )


def ensure_clean(vcs: VCS) -> None:
    """
    Make sure the working copy has no uncommitted changes.

    Raises:
        DirtyWorkingCopyError: If tracked files are modified
    """
    if vcs.has_changes():
        raise DirtyWorkingCopyError(
            "Diff isn't empty, aborting",
            context={"repository": str(vcs.root), "vcs": vcs.name},
            suggestions=[
                "Commit or shelve your local changes before running this command",
            ],
        )
