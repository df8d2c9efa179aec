"""Path canonicalization and validation for command arguments."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from cranelift_tools.exceptions import InvalidPathError

__all__ = [
    "VENDORED_MANIFEST",
    "TOPLEVEL_MANIFEST",
    "JIT_TEST_RUNNER",
    "JS_SHELL",
    "MAKEFILE",
    "VENDOR_PATHS",
    "canonicalize_dir",
    "require_file",
    "cranelift_dir",
]

# Layout of a Gecko source tree, relative to its root
VENDORED_MANIFEST = Path("js/src/wasm/cranelift/Cargo.toml")
TOPLEVEL_MANIFEST = Path("Cargo.toml")
JIT_TEST_RUNNER = Path("js/src/jit-test/jit_test.py")

# Where bump, local and mach vendor rust write; untracked files elsewhere are never committed
VENDOR_PATHS = (
    VENDORED_MANIFEST.parent,
    TOPLEVEL_MANIFEST,
    Path("Cargo.lock"),
    Path("third_party/rust"),
)

# Layout of an object directory, relative to its root
JS_SHELL = Path("dist/bin/js")
MAKEFILE = Path("Makefile")


def canonicalize_dir(path: Union[str, Path], role: str = "directory") -> Path:
    """
    Resolve a user-supplied directory argument to an absolute path.

    Expands ``~`` and resolves symlinks and relative components.

    Args:
        path: Path as given on the command line
        role: Human readable role used in error messages ("build directory", ...)

    Returns:
        Absolute path to an existing directory

    Raises:
        InvalidPathError: If the path does not exist or is not a directory
    """
    resolved = Path(path).expanduser().resolve()
    if not resolved.exists():
        raise InvalidPathError(f"{role.capitalize()} does not exist", path=path)
    if not resolved.is_dir():
        raise InvalidPathError(f"{role.capitalize()} is not a directory", path=path)
    return resolved


def require_file(root: Path, relative: Path, role: str, suggestion: str | None = None) -> Path:
    """
    Return ``root / relative``, failing if that file is missing.

    Raises:
        InvalidPathError: If the file does not exist
    """
    target = root / relative
    if not target.is_file():
        raise InvalidPathError(
            f"Missing {role}: expected {relative} under {root}",
            path=target,
            suggestions=[suggestion] if suggestion else None,
        )
    return target


def cranelift_dir(wasmtime_root: Path) -> Path:
    """Return the ``cranelift/`` directory of a wasmtime checkout."""
    target = wasmtime_root / "cranelift"
    if not target.is_dir():
        raise InvalidPathError(
            "Not a wasmtime checkout: no cranelift/ directory",
            path=wasmtime_root,
            suggestions=["Pass the root of a wasmtime clone, not the cranelift/ subdirectory"],
        )
    return target
