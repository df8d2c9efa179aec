"""Build command: run make in an object directory."""

import argparse

from cranelift_tools.cli.utils import get_console
from cranelift_tools.operations import build


def _positive_int(value: str) -> int:
    jobs = int(value)
    if jobs < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return jobs


class BuildCommand:
    """Run make in the build directory."""

    name = "build"
    help = "Run make in the build directory"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("build_dir", metavar="BUILD_DIR", help="Configured object directory")
        parser.add_argument(
            "-j",
            "--jobs",
            type=_positive_int,
            help="Parallel make jobs (default: one per CPU)",
        )

    @staticmethod
    def run(args: argparse.Namespace) -> int:
        result = build(args.build_dir, jobs=args.jobs, console=get_console(args))
        return result.return_code
