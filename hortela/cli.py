"""
Command line for hortela ledgers.

Usage:
    hortela check ledger.hta [--config hortela.yaml] [--all] [--log-level INFO]
    hortela balance ledger.hta [--as-of 2020-12-31]

``check`` compiles the file, reports every lexical/syntax error (exit 1), then
runs the validation checks, printing one status line per check and rendering
the traces of failing checks (exit 1 on any failure). By default it stops at
the first failing check; ``--all`` runs every check.

``balance`` prints per-account and per-kind totals.

Exit codes: 0 success, 1 invalid ledger, 2 usage or I/O error.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from datetime import date
from pathlib import Path
from typing import TextIO

import yaml

from hortela.config import HortelaConfig, default_config, load_config
from hortela.exceptions import ConfigError
from hortela.logging_config import configure_logging
from hortela.pipeline import Compilation, compile_source_lenient
from hortela.reporting.balance_sheet import build_balance_sheet, format_balance_sheet
from hortela.reporting.diagnostics import render
from hortela.validation.engine import resolve_checks, validate

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_USAGE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hortela",
        description="Compile and validate plain-text double-entry ledgers.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        help="Structured log level on stderr (default: from config, WARNING).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Validate a ledger file.")
    check.add_argument("file", type=Path, help="Ledger source file.")
    check.add_argument("--config", type=Path, default=None, help="YAML configuration file.")
    check.add_argument(
        "--all",
        action="store_true",
        help="Run every check even after one fails.",
    )

    balance = sub.add_parser("balance", help="Print account balances.")
    balance.add_argument("file", type=Path, help="Ledger source file.")
    balance.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Only count transactions dated on or before YYYY-MM-DD.",
    )
    return parser


def _read_source(path: Path, err: TextIO) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"ERROR: cannot read {path}: {e.strerror or e}", file=err)
        return None


def _compile(path: Path, source: str, err: TextIO) -> Compilation:
    compilation = compile_source_lenient(source, source_name=str(path))
    for diagnostic in compilation.diagnostics:
        print(render(source, diagnostic, source_name=str(path)), file=err)
        print(file=err)
    return compilation


def _run_check(args: argparse.Namespace, config: HortelaConfig, out: TextIO, err: TextIO) -> int:
    source = _read_source(args.file, err)
    if source is None:
        return EXIT_USAGE

    compilation = _compile(args.file, source, err)
    if not compilation.ok:
        print(f"{args.file}: {len(compilation.diagnostics)} error(s), not validated.", file=err)
        return EXIT_INVALID

    fail_fast = config.fail_fast and not args.all
    report = validate(compilation.ledger, checks=config.checks, fail_fast=fail_fast)

    for outcome in report:
        status = "OK" if outcome.ok else "ERROR"
        print(f"Running validator: {outcome.description}... {status}", file=out)
        for trace in outcome.traces:
            print(render(source, trace, source_name=str(args.file)), file=err)
            print(file=err)
    for check in resolve_checks(report.skipped):
        print(f"Skipped validator: {check.description}", file=out)

    if not report.ok:
        failure = report.first_failure
        print(f"Running validation `{failure.description}` failed.", file=err)
        return EXIT_INVALID
    return EXIT_OK


def _run_balance(args: argparse.Namespace, out: TextIO, err: TextIO) -> int:
    source = _read_source(args.file, err)
    if source is None:
        return EXIT_USAGE

    compilation = _compile(args.file, source, err)
    if not compilation.ok:
        return EXIT_INVALID

    sheet = build_balance_sheet(compilation.ledger, as_of=args.as_of)
    print(format_balance_sheet(sheet), file=out)
    return EXIT_OK


def main(
    argv: Sequence[str] | None = None,
    *,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    if out is None:
        out = sys.stdout
    if err is None:
        err = sys.stderr
    args = _build_parser().parse_args(argv)

    config = default_config()
    if getattr(args, "config", None) is not None:
        try:
            config = load_config(args.config)
        except FileNotFoundError:
            print(f"ERROR: config file not found: {args.config}", file=err)
            return EXIT_USAGE
        except ConfigError as e:
            print(f"ERROR: {e}", file=err)
            return EXIT_USAGE
        except (yaml.YAMLError, OSError) as e:
            print(f"ERROR: cannot load config {args.config}: {e}", file=err)
            return EXIT_USAGE

    configure_logging(level=args.log_level or config.log_level, stream=err)

    if args.command == "check":
        return _run_check(args, config, out, err)
    return _run_balance(args, out, err)


if __name__ == "__main__":
    sys.exit(main())
