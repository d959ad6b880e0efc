from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn

from dincheck import __version__
from dincheck.config import DincheckConfig, load_config_from_env, resolve_log_level
from dincheck.errors import DincheckError
from dincheck.operations import EXIT_FATAL, OPERATIONS
from dincheck.report import format_outcome, write_report
from dincheck.walker import default_prune

PROG = "dincheck"

DESCRIPTION = """\
Detect silent corruption in a directory tree with a SHA-256 manifest.

  create  - create a new manifest at the directory root (fails if it exists)
  verify  - verify current files against the existing manifest, report differences
  update  - recompute hashes, report differences vs old manifest, then rewrite it

Exit codes: 0=success/clean, 1=fatal error, 2=differences detected (verify only).
"""


class _ArgumentParser(argparse.ArgumentParser):
    # Exit code 2 is reserved for "differences detected".
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_FATAL, f"{self.prog}: error: {message}\n")


def _build_parser() -> argparse.ArgumentParser:
    common = _ArgumentParser(add_help=False)
    common.add_argument("directory", type=str, help="Root directory to scan")
    common.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Also write a JSON report of the run to this path",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug diagnostics to stderr",
    )

    parser = _ArgumentParser(
        prog=PROG,
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-V", "--version", action="version", version=f"{PROG} {__version__}")

    sub = parser.add_subparsers(dest="command", metavar="{create,verify,update}")
    sub.required = True
    sub.add_parser("create", parents=[common], help="Create a new manifest")
    sub.add_parser("verify", parents=[common], help="Verify files against the manifest")
    sub.add_parser("update", parents=[common], help="Report differences, then rewrite")
    return parser


def _setup_logging(level: int) -> logging.Logger:
    logger = logging.getLogger("dincheck")
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)
    return logger


def run(
    command: str,
    directory: str,
    *,
    config: DincheckConfig,
    report_path: Path | None = None,
) -> int:
    logger = logging.getLogger("dincheck")

    try:
        outcome = OPERATIONS[command](directory, config=config, prune=default_prune())
    except DincheckError as exc:
        logger.error("%s", exc)
        return exc.exit_code

    for issue in outcome.issues:
        logger.warning("%s", issue.describe())

    for line in format_outcome(outcome):
        print(line)

    if report_path is not None:
        try:
            write_report(report_path, outcome)
        except OSError as exc:
            logger.error("Failed to write report %s: %s", report_path, exc)
            return EXIT_FATAL

    return outcome.exit_code


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        _setup_logging(resolve_log_level(verbose=args.verbose))
        config = load_config_from_env()
    except DincheckError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return exc.exit_code

    return run(args.command, args.directory, config=config, report_path=args.report)


if __name__ == "__main__":
    raise SystemExit(main())
