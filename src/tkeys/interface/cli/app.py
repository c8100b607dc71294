from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: argument parsing, logging bootstrap,
configuration loading, execution of the requested engine steps, and
rendering of the run reports.
"""

import json
import sys
from dataclasses import asdict
from typing import Callable, Dict, List, Optional

from tkeys.core.analysis.config_evaluator import load_config
from tkeys.core.services.collector import run_collect
from tkeys.core.services.compiler import run_generate
from tkeys.core.services.initializer import generate_config_file
from tkeys.core.services.pruner import run_clean
from tkeys.domain.config import Config
from tkeys.domain.errors import TKeysError
from tkeys.domain.report_models import RunReport
from tkeys.infra.logging import LoggingConfig, configure_logging, get_logger
from tkeys.interface.cli import args as cli_args

logger = get_logger(__name__)

STEP_RUNNERS: Dict[str, Callable[[Config, str], RunReport]] = {
    "collect": run_collect,
    "generate": run_generate,
    "clean": run_clean,
}

_SUCCESS_MESSAGES: Dict[str, str] = {
    "collect": "Collected successfully",
    "generate": "Generated successfully",
    "clean": "Cleaned successfully",
    "cg": "Collected and generated successfully",
    "gc": "Collected, generated and cleaned successfully",
}

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 failure, 130 interrupted).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        LoggingConfig.from_flags(verbose=args.verbose, debug=args.debug, log_file=args.log_file),
        force=True,
    )

    try:
        if args.command_name == "init":
            return _run_init(args.output, args.force)
        return _run_commands(args.command_name, args.config, args.json_output)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return 130
    except (TKeysError, OSError) as e:
        logger.error(str(e), exc_info=args.debug)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


def run_steps(config: Config, steps: List[str], root: str = ".") -> List[RunReport]:
    """
    Run engine steps sequentially against one configuration.

    Args:
        config: Validated configuration.
        steps: Step names among 'collect', 'generate' and 'clean'.
        root: Project root the target includes are relative to.

    Returns:
        List[RunReport]: One report per step, in execution order.
    """
    reports: List[RunReport] = []
    for step in steps:
        logger.debug(f"Running step: {step}")
        reports.append(STEP_RUNNERS[step](config, root))
    return reports

# -----------------------------------------------------------------------------
# COMMAND HANDLERS
# -----------------------------------------------------------------------------

def _run_init(output: str, force: bool) -> int:
    if generate_config_file(output, force=force):
        print(f"Config file created at {output}")
    else:
        print(f"Config file {output} already exists, use --force to overwrite")
    return 0


def _run_commands(command: str, config_path: str, json_output: bool) -> int:
    logger.debug(f"Loading configuration from {config_path}")
    config = load_config(config_path)

    reports = run_steps(config, cli_args.steps_for(command))

    if json_output:
        print(json.dumps([asdict(r) for r in reports], ensure_ascii=False, indent=2))
    else:
        for report in reports:
            _print_human_summary(report)
        print(_SUCCESS_MESSAGES[command])
    return 0

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(report: RunReport) -> None:
    """Print one run report as a short terminal summary."""
    print(f"[{report.command}] workspaces: {report.workspaces}, keys found: {report.keys_found}")

    if report.command == "clean":
        print(f"  keys removed: {report.keys_removed}, values filled: {report.values_filled}")

    for path in report.written_files:
        print(f"  - written: {path}")
    if report.unchanged_files:
        print(f"  unchanged files: {len(report.unchanged_files)}")
    for path in report.skipped_files:
        print(f"  - skipped (invalid JSON): {path}")


if __name__ == "__main__":
    sys.exit(main())
