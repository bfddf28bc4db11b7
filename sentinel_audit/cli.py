from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional, TextIO

from sentinel_audit.audits.engine import run_audit
from sentinel_audit.config_parser import load_sentinel_config
from sentinel_audit.errors import ConfigFileError
from sentinel_audit.prober import ConnectivityProber
from sentinel_audit.reporting.reports import audit_header
from sentinel_audit.reporting.runner import list_registered_reports, reports_require_audit, run_reports
from sentinel_audit.session import AuditSession
from sentinel_audit.settings import AuditSettings, load_settings, split_report_names

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_UNREADABLE = 2

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sentinel-audit",
        description="Audit a local sentinel configuration against its live peers.",
    )
    parser.add_argument(
        "--report",
        action="append",
        default=None,
        help="Comma-separated list of reports to run; repeatable (default: all).",
    )
    parser.add_argument(
        "--byerror",
        action="store_true",
        help="For each found error show all pods which have it.",
    )
    parser.add_argument("--config", default=None, help="Path to sentinel.conf.")
    parser.add_argument("--settings", default=None, help="Optional YAML settings file.")
    parser.add_argument("--timeout", type=float, default=None, help="Per-probe timeout in seconds.")
    parser.add_argument("--workers", type=int, default=None, help="Parallel probe workers (pods).")
    parser.add_argument("--log-level", default=None, help="Log level for stderr diagnostics.")
    parser.add_argument("--list-reports", action="store_true", help="List available reports and exit.")
    return parser


def configure_logging(level_name: str) -> None:
    level = logging.getLevelName(str(level_name or "WARNING").upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(stream=sys.stderr, level=level, format=LOG_FORMAT)


def _effective(settings: AuditSettings, args: argparse.Namespace) -> AuditSettings:
    config_path = args.config or settings.config_path
    timeout = args.timeout if args.timeout and args.timeout > 0 else settings.probe_timeout_seconds
    workers = args.workers if args.workers and args.workers > 0 else settings.max_workers
    reports = split_report_names(args.report or []) or list(settings.reports)
    return AuditSettings(
        config_path=config_path,
        probe_timeout_seconds=timeout,
        standard_port=settings.standard_port,
        max_workers=workers,
        reports=reports,
        log_level=args.log_level or settings.log_level,
    )


def _print_report_list(out: TextIO) -> None:
    for name, reg in list_registered_reports().items():
        print(f"{name:<16} {reg.help}", file=out)


def main(argv: Optional[List[str]] = None, *, out: Optional[TextIO] = None) -> int:
    out = out if out is not None else sys.stdout
    args = build_parser().parse_args(argv)
    if args.list_reports:
        _print_report_list(out)
        return EXIT_OK

    settings = _effective(load_settings(args.settings), args)
    configure_logging(settings.log_level)
    log.info("Reports to run: %s", settings.reports)
    log.info("Running sentinel config audit")

    session = AuditSession(prober=ConnectivityProber(timeout_seconds=settings.probe_timeout_seconds))
    try:
        load_sentinel_config(settings.config_path, session.local)
    except ConfigFileError as exc:
        log.error("%s", exc)
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_CONFIG_UNREADABLE

    audit_header(session, out, when=datetime.now().isoformat(sep=" ", timespec="seconds"))
    if reports_require_audit(settings.reports):
        run_audit(session, max_workers=settings.max_workers)
    run_reports(
        settings.reports,
        session,
        out,
        by_error=args.byerror,
        standard_port=settings.standard_port,
    )
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
