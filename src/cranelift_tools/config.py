"""
Configuration file support for cranelift-tools.

Provides hierarchical configuration loading from:
1. Project config: .cranelift-tools.toml or cranelift-tools.toml in the tree
2. User config: ~/.config/cranelift-tools/config.toml

CLI arguments override config file values, and project config overrides user config.
"""

import sys
import warnings
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from cranelift_tools.exceptions import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

# Config file names to search for in project directories
CONFIG_FILENAMES = [".cranelift-tools.toml", "cranelift-tools.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "cranelift-tools" / "config.toml"

# Directories marking the root of a working copy; the search stops there
REPO_MARKERS = (".git", ".hg")

DEFAULT_SHELL_ARGS = "--no-wasm-simd --shared-memory=off --wasm-compiler=cranelift"


@dataclass
class DefaultsConfig:
    """Default options for all commands."""

    verbose: bool = False
    quiet: bool = False


@dataclass
class BumpConfig:
    """Where bump looks for the newest upstream Cranelift."""

    crate: str = "cranelift-codegen"
    repository: str = "bytecodealliance/wasmtime"
    allow_large: bool = False
    timeout: float = 30.0


@dataclass
class JitTestConfig:
    """JIT test runner configuration."""

    shell_args: str = DEFAULT_SHELL_ARGS
    default_filter: str | None = None


@dataclass
class BuildConfig:
    """Build tool configuration."""

    jobs: int | None = None
    make: str = "make"


# Section name -> dataclass, in display order
SECTIONS = {
    "defaults": DefaultsConfig,
    "bump": BumpConfig,
    "tests": JitTestConfig,
    "build": BuildConfig,
}

# All known config keys for validation
KNOWN_KEYS = {name: {f.name for f in fields(cls)} for name, cls in SECTIONS.items()}


@dataclass
class Config:
    """Merged configuration from all sources."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    bump: BumpConfig = field(default_factory=BumpConfig)
    tests: JitTestConfig = field(default_factory=JitTestConfig)
    build: BuildConfig = field(default_factory=BuildConfig)

    # Track which file each setting came from (for --show)
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        # Load user config first (lower precedence)
        if USER_CONFIG_PATH.exists():
            user_data = _load_toml_file(USER_CONFIG_PATH)
            _merge_config(config, user_data, str(USER_CONFIG_PATH), sources)

        # Load project config (higher precedence)
        project_config = _find_project_config(start_dir)
        if project_config:
            project_data = _load_toml_file(project_config)
            _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at a .git or .hg directory or at the filesystem root.

    Args:
        start_dir: Directory to start searching from

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        if any((current / marker).exists() for marker in REPO_MARKERS):
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """
    Load a TOML file.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info
    """
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    for section, known in KNOWN_KEYS.items():
        if section not in data:
            continue
        section_data = data[section]
        if not isinstance(section_data, dict):
            raise ConfigError(f"Config section [{section}] in {source} must be a table")
        _warn_unknown_keys(section_data, known, section, source)

        target = getattr(config, section)
        for key in sorted(known):
            if key in section_data:
                setattr(target, key, section_data[key])
                sources[f"{section}.{key}"] = source


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def generate_template() -> str:
    """
    Generate a template config file with all options documented.

    Returns:
        Template TOML string
    """
    return f"""# cranelift-tools configuration file
# Place as .cranelift-tools.toml in your Gecko tree or
# ~/.config/cranelift-tools/config.toml for user defaults

[defaults]
# Show full stack traces and debug logging
# verbose = false

# Suppress progress output
# quiet = false

[bump]
# Crate whose newest crates.io version is used
# crate = "cranelift-codegen"

# GitHub repository whose HEAD commit is pinned in the top-level Cargo.toml
# repository = "bytecodealliance/wasmtime"

# Pass --build-peers-said-large-imports-were-ok to mach vendor rust
# allow_large = false

# HTTP timeout in seconds
# timeout = 30.0

[tests]
# Arguments passed to the JS shell by jit_test.py
# shell_args = "{DEFAULT_SHELL_ARGS}"

# Filter used when none is given on the command line (unset: full suite)
# default_filter = "wasm"

[build]
# Parallel make jobs (unset: one per CPU)
# jobs = 8

# Build tool
# make = "make"
"""


def get_config_paths() -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }
