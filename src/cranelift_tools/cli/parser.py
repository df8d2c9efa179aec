"""
Argument parser setup for cranelift-tools CLI.

Global options live here; each subcommand adds its own arguments through
the command registry.
"""

import argparse

from cranelift_tools import __version__
from cranelift_tools.cli.registry import discover_commands, register_commands

__all__ = ["create_parser"]

# Used as epilog in help
CLI_DOCSTRING = """
Commands:
    cranelift-tools bump GECKO_DIR                    bump to the latest available Cranelift in tree
    cranelift-tools local GECKO_DIR WASMTIME_DIR      use a local Cranelift in this Gecko tree
    cranelift-tools tests GECKO_DIR BUILD_DIR [PREFIX]  run JIT tests with Cranelift
    cranelift-tools build BUILD_DIR                   run make in the build directory
    cranelift-tools config                            view/manage configuration

Examples:
    clt bump ~/gecko --allow-large
    clt local ~/gecko ~/src/wasmtime
    clt tests ~/gecko ~/gecko/obj-debug wasm/simd
    clt build ~/gecko/obj-debug -j 16
"""


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="cranelift-tools",
        description="Helpers for hacking on Cranelift inside a Gecko tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=CLI_DOCSTRING,
    )
    parser.add_argument(
        "--version", action="version", version=f"cranelift-tools {__version__}"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging and full stack traces on errors",
        dest="global_verbose",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress progress output (for scripting)",
        dest="global_quiet",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    register_commands(subparsers, discover_commands())

    return parser
