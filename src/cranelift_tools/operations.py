"""
Cranelift development workflows.

Each function validates its path arguments before spawning anything, then
runs a fixed sequence of external commands, stopping at the first failure:

- bump:      newest upstream Cranelift into the vendored tree, as two commits
- local:     vendored tree built from a local wasmtime checkout, as two commits
- run_tests: jit_test.py against a prebuilt JS shell
- build:     make in an object directory
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console

from cranelift_tools.config import Config
from cranelift_tools.manifest import VersionSpec, replace_commit_sha, replace_cranelift_version
from cranelift_tools.paths import (
    JIT_TEST_RUNNER,
    JS_SHELL,
    MAKEFILE,
    TOPLEVEL_MANIFEST,
    VENDORED_MANIFEST,
    VENDOR_PATHS,
    canonicalize_dir,
    cranelift_dir,
    require_file,
)
from cranelift_tools.exceptions import InvalidPathError
from cranelift_tools.runner import ProcessResult, cpu_count, run_checked
from cranelift_tools.upstream import UpstreamClient
from cranelift_tools.vcs import VCS, detect_vcs, ensure_clean, is_working_copy

logger = logging.getLogger(__name__)

__all__ = ["bump", "local", "run_tests", "build", "mach_vendor_rust"]

PathLike = Union[str, Path]

LARGE_IMPORTS_FLAG = "--build-peers-said-large-imports-were-ok"


def _console(console: Optional[Console]) -> Console:
    return console if console is not None else Console()


def _check_source_tree(root: PathLike) -> tuple[Path, VCS]:
    """Canonicalize a Gecko root and make sure it is a clean working copy."""
    repo_path = canonicalize_dir(root, "source tree root")
    require_file(
        repo_path,
        VENDORED_MANIFEST,
        "vendored Cranelift manifest",
        "Pass the root of a Gecko checkout",
    )
    vcs = detect_vcs(repo_path)
    ensure_clean(vcs)
    return repo_path, vcs


def mach_vendor_rust(repo_path: Path, allow_large: bool = False) -> ProcessResult:
    """Run ``./mach vendor rust`` in the source tree."""
    command = [str(repo_path / "mach"), "vendor", "rust"]
    if allow_large:
        command.append(LARGE_IMPORTS_FLAG)
    return run_checked(command, cwd=repo_path, error="Error when running mach vendor rust")


def _commit(vcs: VCS, message: str, console: Console) -> None:
    if not vcs.commit(message, paths=VENDOR_PATHS):
        console.print(f"[yellow]Nothing to commit for:[/yellow] {message}")


def bump(
    source_tree: PathLike,
    allow_large: bool = False,
    config: Optional[Config] = None,
    client: Optional[UpstreamClient] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Bump the vendored Cranelift to the newest upstream version.

    Produces two commits in the source tree: the manifest bump, then the
    output of ``mach vendor rust``.

    Args:
        source_tree: Root of the Gecko checkout
        allow_large: Allow mach to vendor large files
        config: Configuration (default: loaded from the source tree)
        client: Upstream client (default: a new UpstreamClient)
        console: Console for progress output

    Raises:
        InvalidPathError: If the source tree is not a Gecko working copy
        DirtyWorkingCopyError: If the source tree has local changes
        UpstreamError: If the upstream version or commit cannot be determined
        ProcessFailureError: If a commit or mach fails
    """
    console = _console(console)
    repo_path, vcs = _check_source_tree(source_tree)
    config = config or Config.load(repo_path)
    allow_large = allow_large or config.bump.allow_large

    owns_client = client is None
    client = client or UpstreamClient(timeout=config.bump.timeout)
    try:
        version = client.newest_version(config.bump.crate)
        console.print(f"Found version {version}")
        sha = client.head_commit(config.bump.repository)
        console.print(f"Last commit {sha}")
    finally:
        if owns_client:
            client.close()

    console.print("Replacing Cranelift version in its cargo file...")
    replace_cranelift_version(repo_path / VENDORED_MANIFEST, VersionSpec.fixed(version))
    console.print("Replacing Cranelift commit hash in the top-level cargo file...")
    replace_commit_sha(repo_path / TOPLEVEL_MANIFEST, sha)

    console.print("Committing bump patch...")
    _commit(vcs, f"Bug XXX - Bump Cranelift to {sha}; r?", console)

    console.print("Running mach vendor rust...")
    mach_vendor_rust(repo_path, allow_large=allow_large)

    console.print("Committing vendor patch...")
    _commit(vcs, "Bug XXX - Output of mach vendor rust; r?", console)

    console.print("[green]Done, enjoy your day.[/green]")


def local(
    source_tree: PathLike,
    wasmtime_path: PathLike,
    console: Optional[Console] = None,
) -> None:
    """
    Make the source tree use Cranelift from a local wasmtime checkout.

    Produces two do-not-land commits: the manifest change, then the output
    of ``mach vendor rust``.

    Raises:
        InvalidPathError: If either path is not the expected working copy
        DirtyWorkingCopyError: If the source tree has local changes
        ProcessFailureError: If a commit or mach fails
    """
    console = _console(console)
    wasmtime_root = canonicalize_dir(wasmtime_path, "local dependency path")
    if not is_working_copy(wasmtime_root):
        raise InvalidPathError(
            "Local dependency is not a git or Mercurial working copy",
            path=wasmtime_root,
            suggestions=["Pass the root of a wasmtime clone"],
        )
    cranelift = cranelift_dir(wasmtime_root)

    repo_path, vcs = _check_source_tree(source_tree)

    console.print("Replacing Cranelift version in its cargo file...")
    replace_cranelift_version(repo_path / VENDORED_MANIFEST, VersionSpec.local(cranelift))

    console.print("Committing bump patch...")
    _commit(vcs, "No bug - do not check in - use local Cranelift", console)

    console.print("Running mach vendor rust...")
    mach_vendor_rust(repo_path)

    console.print("Committing vendor patch...")
    _commit(vcs, "No bug - do not check in - result of mach vendor rust", console)

    console.print("[green]Done, enjoy your day.[/green]")


def run_tests(
    source_tree: PathLike,
    build_dir: PathLike,
    test_filter: Optional[str] = None,
    config: Optional[Config] = None,
    console: Optional[Console] = None,
) -> ProcessResult:
    """
    Run JIT tests against the JS shell of a build directory.

    Args:
        source_tree: Root of the Gecko checkout
        build_dir: Object directory containing dist/bin/js
        test_filter: Test path prefix passed to jit_test.py (None: configured
            default, else the full suite)
        config: Configuration (default: loaded from the source tree)
        console: Console for progress output

    Raises:
        InvalidPathError: If the runner or the shell is missing
        ProcessFailureError: If any test fails, with the runner's exit status
    """
    console = _console(console)
    repo_path = canonicalize_dir(source_tree, "source tree root")
    runner = require_file(
        repo_path, JIT_TEST_RUNNER, "JIT test runner", "Pass the root of a Gecko checkout"
    )
    build_path = canonicalize_dir(build_dir, "build directory")
    shell = require_file(
        build_path, JS_SHELL, "JS shell", "Build the shell first with the build command"
    )
    config = config or Config.load(repo_path)

    command = [str(runner), str(shell), "--args", config.tests.shell_args]
    if test_filter is None:
        test_filter = config.tests.default_filter
    if test_filter:
        command.append(test_filter)

    console.print("Running tests...")
    return run_checked(command, cwd=repo_path, error="Test failures!")


def build(
    build_dir: PathLike,
    jobs: Optional[int] = None,
    config: Optional[Config] = None,
    console: Optional[Console] = None,
) -> ProcessResult:
    """
    Run make in a build directory.

    Args:
        build_dir: Configured object directory
        jobs: Parallel jobs (default: configured value, else one per CPU)
        config: Configuration (default: loaded from the build directory)
        console: Console for progress output

    Raises:
        InvalidPathError: If the directory does not exist or has no Makefile
        ProcessFailureError: If make fails, with make's exit status
    """
    console = _console(console)
    build_path = canonicalize_dir(build_dir, "build directory")
    require_file(
        build_path, MAKEFILE, "Makefile", "Configure the object directory with ./mach configure"
    )
    config = config or Config.load(build_path)

    jobs = jobs or config.build.jobs or cpu_count()
    console.print("Running make...")
    return run_checked(
        [config.build.make, f"-sj{jobs}"],
        cwd=build_path,
        error="Error when running make",
    )
