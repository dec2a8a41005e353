"""CLI entry-point for codecheck.

Usage:
    python -m codecheck analyze <file|-> [--category C ...] [--json] [--strict]
                                [--no-warnings] [--no-hints] [--std PROFILE]
                                [--config FILE] [-v]
    python -m codecheck tools [--config FILE] [--json]
    python -m codecheck validate <report.json>
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import jsonschema
import pydantic

from codecheck import __version__
from codecheck.api import analyze_source
from codecheck.contracts.load import validate_file
from codecheck.core.config import EngineConfig
from codecheck.core.orchestrator import AnalysisEngine
from codecheck.core.tools import default_tool_specs, probe_tools
from codecheck.model import Category
from codecheck.model.report import AnalysisReport
from codecheck.model.request import SOURCE_FILENAME, STANDARD_PROFILES, AnalysisOptions
from codecheck.policy.thresholds import exit_code_for_report
from codecheck.utils.exit_codes import ExitCode
from codecheck.utils.json_norm import stable_json_dumps

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=_LOG_FORMAT, stream=sys.stderr)


def _load_config(path: Optional[Path]) -> Optional[EngineConfig]:
    try:
        return EngineConfig.load(path)
    except (OSError, ValueError) as e:
        print(f"error: cannot load config: {e}", file=sys.stderr)
        return None


def _split_categories(values: Optional[list[str]]) -> Optional[list[str]]:
    """``-c security,style -c syntax`` → ``["security", "style", "syntax"]``."""
    if values is None:
        return None
    out: list[str] = []
    for value in values:
        out.extend(v for v in (p.strip() for p in value.split(",")) if v)
    return out


def _print_human(report: AnalysisReport, display_name: str) -> None:
    """Compiler-style diagnostics plus a one-line summary, all on stderr."""
    if not report.success:
        print(f"error: {report.error_message}", file=sys.stderr)
        return
    for issue in report.issues:
        file = display_name if issue.file == SOURCE_FILENAME else issue.file
        print(
            f"{file}:{issue.line}:{issue.column}: {issue.severity.value}: "
            f"{issue.message} [{issue.rule}]",
            file=sys.stderr,
        )
    tier = report.quality_tier.value if report.quality_tier else "-"
    print(
        f"{report.error_count} error(s), {report.warning_count} warning(s), "
        f"{report.info_count} info; quality {report.quality_score}/100 ({tier}) "
        f"in {report.analysis_time_ms}ms",
        file=sys.stderr,
    )


# ── subcommand handlers ─────────────────────────────────────────────


def _handle_analyze(args: argparse.Namespace) -> int:
    config = _load_config(args.config)
    if config is None:
        return ExitCode.ERROR

    try:
        if args.source == "-":
            text, display_name = sys.stdin.read(), "<stdin>"
        else:
            text = Path(args.source).read_text(encoding="utf-8", errors="replace")
            display_name = args.source
    except OSError as e:
        print(f"error: cannot read {args.source}: {e}", file=sys.stderr)
        return ExitCode.ERROR

    options = AnalysisOptions(
        include_warnings=not args.no_warnings,
        include_hints=not args.no_hints,
        strict_mode=args.strict,
        standard_profile=args.std,
    )
    try:
        report, report_dict = analyze_source(
            text,
            _split_categories(args.categories),
            options,
            engine=AnalysisEngine.create(config),
        )
    except pydantic.ValidationError as e:
        print(f"error: invalid request: {e}", file=sys.stderr)
        return ExitCode.ERROR

    if args.json:
        sys.stdout.write(stable_json_dumps(report_dict))
        if not report.success:
            print(f"error: {report.error_message}", file=sys.stderr)
    else:
        _print_human(report, display_name)
    return exit_code_for_report(report)


def _handle_tools(args: argparse.Namespace) -> int:
    config = _load_config(args.config)
    if config is None:
        return ExitCode.ERROR
    tools = probe_tools(default_tool_specs(config), enabled=config.enable_external_tools)
    if args.json:
        sys.stdout.write(stable_json_dumps(tools.to_dict()))
        return ExitCode.SUCCESS
    for name, path in tools.to_dict().items():
        print(f"{name}: {path or 'not available'}")
    return ExitCode.SUCCESS


def _handle_validate(args: argparse.Namespace) -> int:
    # Exit code contract:
    #   1 = schema violation
    #   2 = unreadable / not JSON
    try:
        validate_file(Path(args.instance))
    except jsonschema.ValidationError as e:
        print(f"FAIL: {e.message}", file=sys.stderr)
        return ExitCode.VIOLATION
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return ExitCode.ERROR
    print("OK")
    return ExitCode.SUCCESS


# ── parser ──────────────────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-v info, -vv debug).",
    )

    p = argparse.ArgumentParser(
        prog="codecheck",
        description="Aggregate static analysis for C++ snippets.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(dest="command")

    an = sub.add_parser("analyze", parents=[common], help="Analyze one C++ source file.")
    an.add_argument("source", help="Source file, or '-' to read stdin.")
    an.add_argument(
        "-c", "--category",
        action="append",
        dest="categories",
        metavar="CATEGORY",
        help=(
            "Analysis category (repeatable or comma-separated): "
            + ", ".join(c.value for c in Category)
            + ". Default: all."
        ),
    )
    an.add_argument("--json", action="store_true", help="Print the JSON report to stdout.")
    an.add_argument("--strict", action="store_true", help="Promote warnings to errors.")
    an.add_argument("--no-warnings", action="store_true", help="Drop warning-level issues.")
    an.add_argument("--no-hints", action="store_true", help="Drop info-level issues and fix suggestions.")
    an.add_argument("--std", default="c++20", choices=STANDARD_PROFILES, help="Language standard (default: c++20).")
    an.add_argument("--config", type=Path, default=None, help="YAML engine config file.")

    tl = sub.add_parser("tools", parents=[common], help="Show which external tools are available.")
    tl.add_argument("--config", type=Path, default=None, help="YAML engine config file.")
    tl.add_argument("--json", action="store_true", help="Print the probe result as JSON.")

    val = sub.add_parser("validate", parents=[common], help="Validate a report JSON file against the bundled schema.")
    val.add_argument("instance", help="Path to a report JSON file.")

    return p


def main(argv: list[str] | None = None) -> int:
    """Entry-point: 0 = no errors, 1 = error issues found, 2 = fatal."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help(sys.stderr)
        return ExitCode.ERROR

    _configure_logging(args.verbose)

    if args.command == "analyze":
        return _handle_analyze(args)
    if args.command == "tools":
        return _handle_tools(args)
    return _handle_validate(args)


if __name__ == "__main__":
    sys.exit(main())
