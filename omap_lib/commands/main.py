# -*- coding: utf-8 -*-
"""``omap`` console script.

Sub-commands are looked up in the ``omap_lib.actions`` entry-point group,
so installed plugins appear next to the built-in ``convert`` command. The
selected command receives the remaining arguments and its return value is
the process exit code.
"""

from __future__ import annotations

import argparse
from importlib.metadata import entry_points

import omap_lib

COMMAND_GROUP = "omap_lib.actions"


def main(argv: list[str] | None = None) -> int:
    """Dispatch to a registered sub-command.

    Args:
        argv: Command line without the program name, ``sys.argv[1:]`` if None

    Returns:
        Exit code of the sub-command, 0 when it returns nothing
    """
    registered_commands = entry_points(group=COMMAND_GROUP)

    parser = argparse.ArgumentParser(
        prog="omap",
        description="Build OpenOrienteering Mapper maps from vector features.",
        epilog="Commands: " + ", ".join(sorted(registered_commands.names)),
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s version: {omap_lib.__version__}",
    )
    parser.add_argument(
        "command",
        choices=sorted(registered_commands.names),
    )
    parser.add_argument(
        "args",
        help=argparse.SUPPRESS,
        nargs=argparse.REMAINDER,
    )

    args = parser.parse_args(argv)

    command_fn = registered_commands[args.command].load()
    code = command_fn(args.args)
    return 0 if code is None else int(code)
