from __future__ import annotations

"""
CLI Argument Definition.

Defines the subcommand schema of the tkeys command line: help texts,
aliases and the options shared by every configuration-driven command.
"""

import argparse
from typing import Dict, List, Tuple

from tkeys.domain.config import DEFAULT_CONFIG_FILE

# Command name -> (aliases, help text, steps executed in order)
COMMANDS: Dict[str, Tuple[List[str], str, List[str]]] = {
    "collect": (["c"], "Collect translation keys into per-language JSON files.", ["collect"]),
    "generate": (["g"], "Generate the compiled dictionary module.", ["generate"]),
    "clean": ([], "Remove keys no longer used by the sources.", ["clean"]),
    "cg": ([], "Collect + generate.", ["collect", "generate"]),
    "gc": ([], "Collect + generate + clean.", ["collect", "generate", "clean"]),
}

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the tkeys CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="tkeys",
        description="Translation key collector and generator.",
    )
    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # --- Scaffolding ---
    init = sub.add_parser("init", help="Create a starter configuration file.")
    init.add_argument(
        "-o", "--output",
        default=DEFAULT_CONFIG_FILE,
        help=f"Destination of the configuration file (default: {DEFAULT_CONFIG_FILE}).",
    )
    init.add_argument(
        "-f", "--force",
        action="store_true",
        help="Overwrite an existing configuration file.",
    )
    init.set_defaults(command_name="init")
    _add_logging_arguments(init)

    # --- Configuration-driven commands ---
    for name, (aliases, help_text, _) in COMMANDS.items():
        cmd = sub.add_parser(name, aliases=aliases, help=help_text)
        cmd.set_defaults(command_name=name)
        cmd.add_argument(
            "-c", "--config",
            default=DEFAULT_CONFIG_FILE,
            help=f"Path to the configuration file (default: {DEFAULT_CONFIG_FILE}).",
        )
        cmd.add_argument(
            "--json",
            dest="json_output",
            action="store_true",
            help="Print the run reports as JSON.",
        )
        _add_logging_arguments(cmd)

    return p


def steps_for(command: str) -> List[str]:
    """Ordered engine steps a configuration-driven command runs."""
    return list(COMMANDS[command][2])


# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log progress (workspaces scanned, files written).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    parser.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to a rotating file.",
    )
