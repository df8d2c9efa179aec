"""Command protocol for cranelift-tools CLI.

Defines the interface every CLI subcommand implements. Commands own their
argument parser configuration and execution logic.

Usage:
    from cranelift_tools.cli.command_protocol import Command

    class MyCommand:
        name = "my-command"
        help = "Description of my command"

        @staticmethod
        def add_arguments(parser: argparse.ArgumentParser) -> None:
            parser.add_argument("build_dir", help="Object directory")

        @staticmethod
        def run(args: argparse.Namespace) -> int:
            print(f"Processing {args.build_dir}")
            return 0
"""

import argparse
from typing import Protocol, runtime_checkable


@runtime_checkable
class Command(Protocol):
    """Protocol for CLI command classes.

    Attributes:
        name: The subcommand name (e.g., "bump", "build").
        help: Brief help text shown in the top-level --help output.

    Methods:
        add_arguments: Register arguments on the provided subparser.
        run: Execute the command with the parsed argument namespace.
    """

    name: str
    help: str

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Add command-specific arguments to the parser."""
        ...

    @staticmethod
    def run(args: argparse.Namespace) -> int:
        """Execute the command.

        Returns:
            Exit code (0 for success, non-zero for errors).
        """
        ...
