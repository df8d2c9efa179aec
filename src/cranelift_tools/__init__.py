"""
cranelift-tools: helpers for hacking on Cranelift inside a Gecko tree.

Wraps the version-control, vendoring, build and test commands needed to
iterate on the Cranelift backend that Gecko vendors under ``third_party/rust``.

Modules:
    operations: bump, local, tests and build as plain functions
    runner: external process invocation
    vcs: git / Mercurial working copy helpers
    manifest: Cargo.toml rewriting
    upstream: crates.io and GitHub lookups
    config: TOML configuration loading
    cli: command-line entry point

Quick Start::

    from cranelift_tools import build, run_tests

    build("~/gecko/obj-debug")
    run_tests("~/gecko", "~/gecko/obj-debug", test_filter="wasm/simd")
"""

__version__ = "0.3.0"

from cranelift_tools.exceptions import (
    CraneliftToolsError,
    DirtyWorkingCopyError,
    InvalidPathError,
    ProcessFailureError,
    UpstreamError,
)
from cranelift_tools.operations import build, bump, local, run_tests
from cranelift_tools.runner import ProcessResult

__all__ = [
    # Version
    "__version__",
    # Operations
    "bump",
    "local",
    "run_tests",
    "build",
    # Results
    "ProcessResult",
    # Errors
    "CraneliftToolsError",
    "InvalidPathError",
    "ProcessFailureError",
    "DirtyWorkingCopyError",
    "UpstreamError",
]
