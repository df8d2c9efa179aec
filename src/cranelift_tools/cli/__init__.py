"""
Command-line interface for cranelift-tools.

Available via the `cranelift-tools` or `clt` command:

    cranelift-tools bump <gecko>                 - Vendor the newest upstream Cranelift
    cranelift-tools local <gecko> <wasmtime>     - Vendor Cranelift from a local checkout
    cranelift-tools tests <gecko> <objdir> [p]   - Run JIT tests against a built shell
    cranelift-tools build <objdir>               - Run make in an object directory
    cranelift-tools config                       - View/manage configuration
"""

import logging
import sys
import warnings
from pathlib import Path
from typing import List, Optional

from cranelift_tools.cli.parser import create_parser
from cranelift_tools.cli.utils import print_error
from cranelift_tools.config import Config
from cranelift_tools.exceptions import CraneliftToolsError

__all__ = ["main"]

logger = logging.getLogger(__name__)

# Exit status after Ctrl-C, as a shell would report it
INTERRUPTED_EXIT_CODE = 130


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _config_dir(args) -> Optional[Path]:
    """Directory the command's own config is loaded from (None: current directory)."""
    for attr in ("source_tree", "build_dir"):
        value = getattr(args, attr, None)
        if value:
            path = Path(value).expanduser()
            # Bad paths are reported by the command itself
            if path.is_dir():
                return path
    return None


def _apply_config_defaults(args) -> None:
    """Let [defaults] in the config files turn on --verbose / --quiet."""
    with warnings.catch_warnings():
        # Unknown keys are reported when the command loads its own config
        warnings.simplefilter("ignore")
        defaults = Config.load(_config_dir(args)).defaults
    args.global_verbose = args.global_verbose or defaults.verbose
    args.global_quiet = args.global_quiet or defaults.quiet


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for cranelift-tools CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        _apply_config_defaults(args)
        _configure_logging(args.global_verbose)
        logger.debug("Dispatching %s", args.command)
        return args._command_class.run(args)
    except CraneliftToolsError as e:
        print_error(e, verbose=args.global_verbose)
        return e.exit_code
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return INTERRUPTED_EXIT_CODE


if __name__ == "__main__":
    sys.exit(main())
