"""Local command: vendor Cranelift from a local wasmtime checkout."""

import argparse

from cranelift_tools.cli.utils import get_console
from cranelift_tools.operations import local


class LocalCommand:
    """Use a local version of Cranelift in this Gecko tree.

    Points the Cranelift dependencies at the cranelift/ directory of a
    wasmtime checkout and re-vendors. The resulting commits are not meant
    to land.
    """

    name = "local"
    help = "Use the local version of Cranelift in this Gecko tree"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("source_tree", metavar="GECKO_DIR", help="Root of the Gecko checkout")
        parser.add_argument(
            "wasmtime_path", metavar="WASMTIME_DIR", help="Root of a local wasmtime checkout"
        )

    @staticmethod
    def run(args: argparse.Namespace) -> int:
        local(args.source_tree, args.wasmtime_path, console=get_console(args))
        return 0
