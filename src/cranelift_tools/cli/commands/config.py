"""
Config command for cranelift-tools CLI.

Usage:
    clt config --show          Show effective configuration with sources
    clt config --paths         Show config file paths
    clt config --init          Create template config file
"""

import argparse
from dataclasses import fields
from pathlib import Path

from cranelift_tools import config as config_files
from cranelift_tools.config import (
    CONFIG_FILENAMES,
    SECTIONS,
    Config,
    generate_template,
    get_config_paths,
)
from cranelift_tools.exceptions import ConfigError


class ConfigCommand:
    """View and manage cranelift-tools configuration."""

    name = "config"
    help = "View and manage configuration"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        action_group = parser.add_mutually_exclusive_group()
        action_group.add_argument(
            "--show",
            action="store_true",
            help="Show effective configuration with sources (default)",
        )
        action_group.add_argument(
            "--init",
            action="store_true",
            help="Create template config file in current directory",
        )
        action_group.add_argument(
            "--paths",
            action="store_true",
            help="Show config file paths",
        )
        parser.add_argument(
            "--user",
            action="store_true",
            help=f"Use user config ({config_files.USER_CONFIG_PATH}) for --init",
        )

    @staticmethod
    def run(args: argparse.Namespace) -> int:
        if args.init:
            return _init_config(args.user)
        elif args.paths:
            return _show_paths()
        return _show_config()


def _show_config() -> int:
    """Show effective configuration with sources."""
    config = Config.load()

    print("# Effective cranelift-tools configuration")
    for section in SECTIONS:
        print()
        print(f"[{section}]")
        values = getattr(config, section)
        for f in fields(values):
            key = f"{section}.{f.name}"
            _print_value(f.name, getattr(values, f.name), config.get_source(key))

    return 0


def _print_value(key: str, value, source: str) -> None:
    """Print a config value with its source."""
    if isinstance(value, str):
        formatted = f'"{value}"'
    elif isinstance(value, bool):
        formatted = "true" if value else "false"
    elif value is None:
        formatted = "# not set"
    else:
        formatted = str(value)

    source_display = Path(source).name if source != "default" else source
    print(f"{key} = {formatted}  # from: {source_display}")


def _show_paths() -> int:
    """Show config file paths."""
    paths = get_config_paths()

    print("Config file paths:")
    print()

    print(f"User config: {config_files.USER_CONFIG_PATH}")
    print("  Status: exists" if paths["user"] else "  Status: not found")
    print()

    print(f"Project config search: {', '.join(CONFIG_FILENAMES)}")
    if paths["project"]:
        print(f"  Found: {paths['project']}")
    else:
        print("  Status: not found")

    return 0


def _init_config(user: bool) -> int:
    """Write the template config file, refusing to overwrite."""
    target = config_files.USER_CONFIG_PATH if user else Path.cwd() / CONFIG_FILENAMES[0]
    if target.exists():
        raise ConfigError(
            f"Config file already exists: {target}",
            suggestions=["Edit the existing file, or delete it and run --init again"],
        )

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(generate_template(), encoding="utf-8")
    print(f"Created {target}")
    return 0
