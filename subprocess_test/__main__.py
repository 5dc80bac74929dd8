#!/usr/bin/env python3
"""
subprocess-test command line

Usage:
    python -m subprocess_test run NODEID [options]
    python -m subprocess_test extract FILE [options]

Commands:
    run        Run one pytest test as a subprocess test and print its outcome and output
    extract    Print the payload between boundary markers of a saved capture

Exit codes:
    0 = child succeeded / payload extracted
    1 = child failed
    2 = harness error (setup or protocol failure)
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .boundary import effective_boundary, extract_payload
from .configuration import DEFAULT_ENV_VAR_NAME, RunnerConfig
from .exceptions import SubprocessTestError
from .launchers import PytestLauncher, TestIdentity
from .orchestrator import run_parent
from .utils import color_for, format_duration


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subprocess-test",
        description="Run a single test in subprocess mode and show what it printed",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="run one pytest test in a child process")
    run_parser.add_argument("nodeid", help="pytest node id, e.g. tests/test_x.py::test_y")
    run_parser.add_argument("--env-var-name", default=None,
                            help=f"marker environment variable (default: {DEFAULT_ENV_VAR_NAME})")
    run_parser.add_argument("--output-boundary", default=None,
                            help="boundary literal printed by the test (default: a line of '=')")
    run_parser.add_argument("--verbose", action="store_true",
                            help="show the child command line and timing")

    extract_parser = subparsers.add_parser("extract", help="extract the payload from a saved capture")
    extract_parser.add_argument("file", type=Path, help="file holding the captured child output")
    extract_parser.add_argument("--output-boundary", default=None,
                                help="boundary literal used by the test (default: a line of '=')")
    return parser


def _command_run(args: argparse.Namespace) -> int:
    config = RunnerConfig.from_environ().with_overrides(
        env_var_name=args.env_var_name,
        output_boundary=args.output_boundary,
        verbose=True if args.verbose else None,
    )
    identity = TestIdentity.from_nodeid(args.nodeid)
    marker = effective_boundary(config.output_boundary)

    child = run_parent(identity, config.env_var_name, launcher=PytestLauncher(), config=config)
    output = extract_payload(child.captured, marker)

    palette = color_for(sys.stdout)
    sys.stdout.write(output)
    if output and not output.endswith("\n"):
        sys.stdout.write("\n")
    if child.outcome:
        status = f"{palette.GREEN}PASS{palette.RESET}"
    else:
        status = f"{palette.RED}FAIL{palette.RESET} ({child.outcome.describe()})"
    sys.stdout.write(f"{palette.BOLD}{identity}{palette.RESET}: {status} in {format_duration(child.duration)}\n")
    return 0 if child.outcome else 1


def _command_extract(args: argparse.Namespace) -> int:
    captured = args.file.read_text(encoding="utf-8", errors="replace")
    sys.stdout.write(extract_payload(captured, effective_boundary(args.output_boundary)))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        if args.command == "run":
            return _command_run(args)
        return _command_extract(args)
    except (SubprocessTestError, OSError) as exc:
        palette = color_for(sys.stderr)
        sys.stderr.write(f"{palette.RED}Error: {exc}{palette.RESET}\n")
        return 2


if __name__ == "__main__":
    sys.exit(main())
