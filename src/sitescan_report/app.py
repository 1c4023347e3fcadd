from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from sitescan_report.core.handlers.domains_handler import domains_help_text, handle_domains
from sitescan_report.core.handlers.report_handler import handle_report, report_help_text
from sitescan_report.core.handlers.source_options import add_source_arguments
from sitescan_report.core.managers.config_manager import config_manager
from sitescan_report.core.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitescan-report",
        description="Cohort statistics over the weekly federal site-scanning snapshot.",
        epilog="Commands:\n" + report_help_text + "\n" + domains_help_text,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", type=str, default=None,
                        help="Override debug.level from settings.json (e.g. DEBUG, WARNING).")
    subparsers = parser.add_subparsers(dest="subcommand")

    # 1. Subcommand: REPORT
    report_parser = subparsers.add_parser("report", help="Print the cohort comparison report")
    add_source_arguments(report_parser)
    report_parser.add_argument("--output", "-o", type=Path, default=None,
                               help="Write the report to this file instead of stdout.")
    report_parser.add_argument("--excel", type=Path, default=None,
                               help="Also save the tables to an Excel workbook.")

    # 2. Subcommand: DOMAINS
    domains_parser = subparsers.add_parser("domains", help="Inventory NCI final websites")
    add_source_arguments(domains_parser)
    domains_parser.add_argument("--verbose", "-v", action="store_true",
                                help="List every distinct final website.")

    return parser


GLOBAL_OPTIONS = ("--log-level",)


def _insert_default_subcommand(args: list[str]) -> list[str]:
    """'report' is the default subcommand; it goes after the leading global options."""
    i = 0
    while i < len(args):
        if args[i] in GLOBAL_OPTIONS:
            i += 2
        elif args[i].split("=", 1)[0] in GLOBAL_OPTIONS:
            i += 1
        else:
            break
    i = min(i, len(args))
    if i == len(args) or args[i].startswith("-") and args[i] not in ("-h", "--help"):
        args.insert(i, "report")
    return args


def apply_overrides(parsed_args: argparse.Namespace) -> None:
    """Copies the per-run CLI flags into the in-memory settings."""
    if parsed_args.log_level:
        config_manager.set_nested("debug.level", parsed_args.log_level)
    if getattr(parsed_args, "url", None):
        config_manager.set_nested("snapshot.url", parsed_args.url)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for running the report from the command line."""
    parser = build_parser()
    args = _insert_default_subcommand(list(sys.argv[1:] if argv is None else argv))
    parsed_args = parser.parse_args(args)
    if parsed_args.subcommand is None:
        parser.error("a command is required")
    apply_overrides(parsed_args)

    configure_logger(
        config_manager.get_nested("debug.level", "INFO"),
        silenced_loggers=config_manager.get_nested("logging.silenced_loggers"),
    )
    logger.debug("Running '%s'", parsed_args.subcommand)

    if parsed_args.subcommand == "domains":
        return handle_domains(parsed_args)
    return handle_report(parsed_args)


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
