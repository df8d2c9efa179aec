"""Tests command: run JIT tests against a built JS shell."""

import argparse

from cranelift_tools.cli.utils import get_console
from cranelift_tools.operations import run_tests


class TestsCommand:
    """Run JIT tests with Cranelift.

    Runs js/src/jit-test/jit_test.py against BUILD_DIR/dist/bin/js with the
    shell configured to compile wasm with Cranelift. The exit status is the
    test runner's.
    """

    # Not a pytest test class
    __test__ = False

    name = "tests"
    help = "Run JIT tests with Cranelift"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("source_tree", metavar="GECKO_DIR", help="Root of the Gecko checkout")
        parser.add_argument("build_dir", metavar="BUILD_DIR", help="Object directory with a built shell")
        parser.add_argument(
            "test_filter",
            metavar="PREFIX",
            nargs="?",
            help="Only run tests whose path matches this prefix (default: all)",
        )

    @staticmethod
    def run(args: argparse.Namespace) -> int:
        result = run_tests(
            args.source_tree,
            args.build_dir,
            test_filter=args.test_filter,
            console=get_console(args),
        )
        return result.return_code
