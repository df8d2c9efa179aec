"""Bump command: vendor the newest upstream Cranelift."""

import argparse

from cranelift_tools.cli.utils import get_console
from cranelift_tools.operations import bump


class BumpCommand:
    """Bump to the latest available version of Cranelift in tree.

    Looks up the newest cranelift-codegen release and wasmtime HEAD commit,
    updates the Cargo manifests, and runs mach vendor rust, committing
    the manifest change and the vendored sources separately.
    """

    name = "bump"
    help = "Bump to the latest available version of Cranelift in tree"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("source_tree", metavar="GECKO_DIR", help="Root of the Gecko checkout")
        parser.add_argument(
            "-a",
            "--allow-large",
            action="store_true",
            help="Allow mach vendor rust to import large files",
        )

    @staticmethod
    def run(args: argparse.Namespace) -> int:
        bump(args.source_tree, allow_large=args.allow_large, console=get_console(args))
        return 0
