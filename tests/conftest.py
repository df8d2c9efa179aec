"""Pytest fixtures for cranelift-tools tests."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

# Vendored Cranelift manifest as found in js/src/wasm/cranelift
VENDORED_CARGO_TOML = """[package]
name = "baldrdash"
version = "0.1.0"
edition = "2018"

[lib]
crate-type = ["rlib"]
name = "baldrdash"

[dependencies]
cranelift-codegen = { version = "0.59.0", default-features = false }
cranelift-wasm = { version = "0.59.0" }
log = { version = "0.4.6", default-features = false, features = ["release_max_level_info"] }
env_logger = "0.6"
smallvec = "1.0"

[build-dependencies]
bindgen = {version = "0.53", default-features = false} # disable `logging` to reduce code size

[features]
default = ["cranelift-codegen/std"]
"""

# Top-level Gecko manifest with the wasmtime patch sections
TOPLEVEL_CARGO_TOML = """[workspace]
members = ["js/src", "js/src/rust", "js/src/wasm/cranelift"]

[patch.crates-io]
libudev-sys = { path = "dom/webauthn/libudev-sys" }

[patch.crates-io.cranelift-codegen]
git = "https://github.com/bytecodealliance/wasmtime"
rev = "0123456789abcdef0123456789abcdef01234567"

[patch.crates-io.cranelift-wasm]
git = "https://github.com/bytecodealliance/wasmtime"
rev = "0123456789abcdef0123456789abcdef01234567"

[patch.crates-io.packed_simd]
git = "https://github.com/hsivonen/packed_simd"
rev = "3541e3818fdc7c2a24f87e3459151a4ce955a67a"
"""

# Stand-in for ./mach: "vendor rust" writes into third_party/rust
MACH_STUB = """#!/bin/sh
mkdir -p third_party/rust/cranelift-codegen
echo "$@" >> third_party/rust/cranelift-codegen/vendored.txt
"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep the user's own config files out of every test."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setattr("cranelift_tools.config.USER_CONFIG_PATH", home / "config.toml")
    return home


@pytest.fixture
def gecko_tree(tmp_path: Path) -> Path:
    """Minimal Gecko checkout: manifests, test runner, mach and a .hg marker."""
    root = tmp_path / "gecko"
    (root / ".hg").mkdir(parents=True)

    vendored = root / "js" / "src" / "wasm" / "cranelift" / "Cargo.toml"
    vendored.parent.mkdir(parents=True)
    vendored.write_text(VENDORED_CARGO_TOML)
    (root / "Cargo.toml").write_text(TOPLEVEL_CARGO_TOML)

    runner = root / "js" / "src" / "jit-test" / "jit_test.py"
    runner.parent.mkdir(parents=True)
    runner.write_text("#!/usr/bin/env python3\n")
    runner.chmod(0o755)

    mach = root / "mach"
    mach.write_text(MACH_STUB)
    mach.chmod(0o755)
    return root


@pytest.fixture
def build_dir(gecko_tree: Path) -> Path:
    """Object directory with a Makefile and a built JS shell."""
    objdir = gecko_tree / "obj-debug"
    shell = objdir / "dist" / "bin" / "js"
    shell.parent.mkdir(parents=True)
    shell.write_text("")
    (objdir / "Makefile").write_text("all:\n")
    return objdir


@pytest.fixture
def wasmtime_checkout(tmp_path: Path) -> Path:
    """Local wasmtime clone with a cranelift/ directory."""
    root = tmp_path / "wasmtime"
    (root / ".git").mkdir(parents=True)
    (root / "cranelift" / "codegen").mkdir(parents=True)
    (root / "cranelift" / "wasm").mkdir(parents=True)
    return root


def _completed(args=None, returncode: int = 0, stdout: str = "", stderr: str = ""):
    return subprocess.CompletedProcess(args or [], returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def make_completed():
    """Factory for CompletedProcess results as subprocess.run would return them."""
    return _completed


@pytest.fixture
def mock_run():
    """Patch subprocess.run in the runner; every command succeeds silently by default."""
    with patch("cranelift_tools.runner.subprocess.run") as run:
        run.side_effect = lambda argv, **kwargs: _completed(argv)
        yield run
