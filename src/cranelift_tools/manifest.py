"""
Cargo.toml rewriting.

Gecko pins Cranelift in two manifests:

- ``js/src/wasm/cranelift/Cargo.toml`` declares the ``cranelift-codegen`` and
  ``cranelift-wasm`` dependencies, either by version or by local path.
- The top-level ``Cargo.toml`` has ``[patch.crates-io.cranelift-*]`` sections
  pointing at a wasmtime git revision.

Edits are line based so comments and formatting elsewhere in the files are
left exactly as they were.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

__all__ = [
    "VersionSpec",
    "rewrite_cranelift_deps",
    "rewrite_patch_revs",
    "replace_cranelift_version",
    "replace_commit_sha",
]

PATCH_SECTION_PREFIX = "[patch.crates-io.cranelift-"


@dataclass(frozen=True)
class VersionSpec:
    """Where the Cranelift crates should come from: a version or a local path."""

    version: Optional[str] = None
    path: Optional[Path] = None

    def __post_init__(self):
        if (self.version is None) == (self.path is None):
            raise ValueError("VersionSpec needs exactly one of version or path")

    @classmethod
    def fixed(cls, version: str) -> "VersionSpec":
        return cls(version=version)

    @classmethod
    def local(cls, cranelift_dir: Path) -> "VersionSpec":
        return cls(path=cranelift_dir)

    def source_for(self, crate_dir: str) -> str:
        """TOML key/value selecting this source for the crate in ``crate_dir``."""
        if self.version is not None:
            return f'version = "{self.version}"'
        return f'path = "{(self.path / crate_dir).as_posix()}"'


def rewrite_cranelift_deps(content: str, spec: VersionSpec) -> str:
    """Point the cranelift-codegen and cranelift-wasm dependencies at ``spec``."""
    lines = []
    for line in content.split("\n"):
        if line.startswith("cranelift-codegen ="):
            line = f"cranelift-codegen = {{ {spec.source_for('codegen')}, default-features = false }}"
        elif line.startswith("cranelift-wasm"):
            line = f"cranelift-wasm = {{ {spec.source_for('wasm')} }}"
        lines.append(line)
    return "\n".join(lines)


def rewrite_patch_revs(content: str, sha: str) -> str:
    """Set ``rev`` in every ``[patch.crates-io.cranelift-*]`` section to ``sha``."""
    lines = []
    in_patch = False
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped.startswith("["):
            in_patch = stripped.startswith(PATCH_SECTION_PREFIX)
        elif in_patch and stripped.startswith("rev ="):
            line = f'rev = "{sha}"'
        lines.append(line)
    return "\n".join(lines)


def replace_cranelift_version(manifest: Path, spec: VersionSpec) -> bool:
    """
    Rewrite the vendored Cranelift manifest in place.

    Returns:
        True if the file content changed
    """
    logger.info("Replacing Cranelift version in %s", manifest)
    content = manifest.read_text(encoding="utf-8")
    updated = rewrite_cranelift_deps(content, spec)
    if updated != content:
        manifest.write_text(updated, encoding="utf-8")
        return True
    return False


def replace_commit_sha(manifest: Path, sha: str) -> bool:
    """
    Rewrite the wasmtime revision in the top-level manifest in place.

    Returns:
        True if the file content changed
    """
    logger.info("Replacing Cranelift commit hash in %s", manifest)
    content = manifest.read_text(encoding="utf-8")
    updated = rewrite_patch_revs(content, sha)
    if updated != content:
        manifest.write_text(updated, encoding="utf-8")
        return True
    return False
