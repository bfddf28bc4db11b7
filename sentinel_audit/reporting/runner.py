from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Sequence, TextIO

from sentinel_audit.reporting.reports import (
    base_config_report,
    known_sentinels_report,
    live_pods_report,
    pod_report,
)
from sentinel_audit.session import AuditSession
from sentinel_audit.settings import STANDARD_SENTINEL_PORT

log = logging.getLogger(__name__)

ReportRunnerFn = Callable[..., None]


@dataclass(frozen=True)
class ReportRegistration:
    name: str
    help: str
    runner: ReportRunnerFn
    requires_audit: bool = True


def _run_baseconfig(session: AuditSession, out: TextIO, *, by_error: bool, standard_port: int) -> None:
    _ = by_error
    base_config_report(session, out, standard_port=standard_port)


def _run_known_sentinels(session: AuditSession, out: TextIO, *, by_error: bool, standard_port: int) -> None:
    _ = (by_error, standard_port)
    known_sentinels_report(session, out)


def _run_pods(session: AuditSession, out: TextIO, *, by_error: bool, standard_port: int) -> None:
    _ = standard_port
    pod_report(session, out, by_error=by_error)


def _run_live_pods(session: AuditSession, out: TextIO, *, by_error: bool, standard_port: int) -> None:
    _ = by_error
    live_pods_report(session, out, standard_port=standard_port)


ALL_REPORTS_ORDER = ("baseconfig", "known-sentinels", "pods")


def _run_all(session: AuditSession, out: TextIO, *, by_error: bool, standard_port: int) -> None:
    for name in ALL_REPORTS_ORDER:
        _REPORT_REGISTRY[name].runner(session, out, by_error=by_error, standard_port=standard_port)


_REPORT_REGISTRY: Dict[str, ReportRegistration] = {
    "baseconfig": ReportRegistration(
        name="baseconfig",
        help="Bind directive presence and non-standard port warning.",
        runner=_run_baseconfig,
        requires_audit=False,
    ),
    "known-sentinels": ReportRegistration(
        name="known-sentinels",
        help="Reachability of every peer sentinel declared in the config.",
        runner=_run_known_sentinels,
    ),
    "pods": ReportRegistration(
        name="pods",
        help="Per-pod audit findings, duplicate addresses and removal recommendations.",
        runner=_run_pods,
    ),
    "live-pods": ReportRegistration(
        name="live-pods",
        help="Live master state from the local sentinel compared with the config (read-only).",
        runner=_run_live_pods,
        requires_audit=False,
    ),
    "all": ReportRegistration(
        name="all",
        help="baseconfig, known-sentinels and pods, in that order.",
        runner=_run_all,
    ),
}


def list_registered_reports() -> Mapping[str, ReportRegistration]:
    return dict(_REPORT_REGISTRY)


def normalize_report_name(name: str) -> str:
    return str(name or "").strip().lower()


def reports_require_audit(names: Sequence[str]) -> bool:
    for name in names:
        reg = _REPORT_REGISTRY.get(normalize_report_name(name))
        if reg is not None and reg.requires_audit:
            return True
    return False


def run_named_report(
    *,
    name: str,
    session: AuditSession,
    out: TextIO,
    by_error: bool = False,
    standard_port: int = STANDARD_SENTINEL_PORT,
) -> None:
    report_name = normalize_report_name(name)
    reg = _REPORT_REGISTRY.get(report_name)
    if reg is None:
        raise ValueError(f"unknown_report:{report_name or 'empty'}")
    reg.runner(session, out, by_error=by_error, standard_port=standard_port)


def run_reports(
    names: Sequence[str],
    session: AuditSession,
    out: TextIO,
    *,
    by_error: bool = False,
    standard_port: int = STANDARD_SENTINEL_PORT,
) -> List[str]:
    """Run each requested report; returns the names that were not recognised."""
    unknown: List[str] = []
    for name in names:
        if normalize_report_name(name) not in _REPORT_REGISTRY:
            log.warning("Unknown report requested: %s", name)
            print(f"Unknown report '{name}'", file=out)
            unknown.append(name)
            continue
        run_named_report(
            name=name,
            session=session,
            out=out,
            by_error=by_error,
            standard_port=standard_port,
        )
    return unknown


__all__ = [
    "ALL_REPORTS_ORDER",
    "ReportRegistration",
    "list_registered_reports",
    "reports_require_audit",
    "run_named_report",
    "run_reports",
]
