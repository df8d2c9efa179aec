"""Command registry for cranelift-tools CLI.

Provides auto-discovery and registration of command classes implementing
the Command protocol.

Usage:
    from cranelift_tools.cli.registry import discover_commands, register_commands

    commands = discover_commands()
    register_commands(subparsers, commands)
"""

import argparse
import importlib
import logging
import pkgutil
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cranelift_tools.cli.command_protocol import Command

logger = logging.getLogger(__name__)

# Order of the subcommands in --help output; others follow alphabetically
PREFERRED_ORDER = ("bump", "local", "tests", "build")


def discover_commands() -> dict[str, type["Command"]]:
    """Discover command classes in the commands subpackage.

    Scans cranelift_tools.cli.commands for modules that export a class
    implementing the Command protocol (has name, help, add_arguments, run).

    Returns:
        Dict mapping command names to command classes.
    """
    from cranelift_tools.cli.command_protocol import Command
    import cranelift_tools.cli.commands as pkg

    commands: dict[str, type[Command]] = {}

    for _importer, modname, _ispkg in pkgutil.iter_modules(pkg.__path__):
        if modname.startswith("_"):
            continue
        module = importlib.import_module(f"cranelift_tools.cli.commands.{modname}")

        # Look for a class named *Command (e.g., BuildCommand)
        for attr_name in dir(module):
            obj = getattr(module, attr_name)
            if (
                isinstance(obj, type)
                and obj is not Command
                and attr_name.endswith("Command")
                and hasattr(obj, "name")
                and hasattr(obj, "help")
                and hasattr(obj, "add_arguments")
                and hasattr(obj, "run")
            ):
                commands[obj.name] = obj

    logger.debug("Discovered commands: %s", ", ".join(sorted(commands)))
    return commands


def _sort_key(name: str) -> tuple[int, str]:
    if name in PREFERRED_ORDER:
        return (PREFERRED_ORDER.index(name), name)
    return (len(PREFERRED_ORDER), name)


def register_commands(
    subparsers: argparse._SubParsersAction,
    commands: dict[str, type["Command"]],
) -> None:
    """Register commands on an argparse subparsers group.

    For each command, creates a subparser and calls the command's
    add_arguments() method to populate it. Sets a ``_command_class``
    default on the subparser so dispatch can find the right run() method.

    Args:
        subparsers: The _SubParsersAction from parser.add_subparsers().
        commands: Dict of command name -> command class.
    """
    for name in sorted(commands, key=_sort_key):
        cmd_class = commands[name]
        sub = subparsers.add_parser(
            name,
            help=cmd_class.help,
            description=cmd_class.__doc__,
        )
        cmd_class.add_arguments(sub)
        sub.set_defaults(_command_class=cmd_class)
