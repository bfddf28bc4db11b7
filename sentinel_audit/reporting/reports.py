"""
Text reports over an audited session.

Reports only read the session: probe results, findings and removal
recommendations are all produced by the audit engine beforehand. The live
pod report is the one exception that talks to the network, and it still
leaves the model untouched.
"""

from __future__ import annotations

import logging
from typing import List, Optional, TextIO

from sentinel_audit.client import SentinelClient
from sentinel_audit.errors import ConnectivityError, SentinelProtocolError
from sentinel_audit.prober import NodeInfo
from sentinel_audit.session import AuditSession
from sentinel_audit.settings import STANDARD_SENTINEL_PORT
from sentinel_audit.types.topology import format_endpoint

log = logging.getLogger(__name__)

RULE = "============================="


def base_config_report(
    session: AuditSession,
    out: TextIO,
    *,
    standard_port: int = STANDARD_SENTINEL_PORT,
) -> None:
    local = session.local
    if not local.host:
        log.warning("MISSING BIND DIRECTIVE!")
        print("Bind Statement Present: False", file=out)
    else:
        print("Bind Statement Present: True", file=out)
    if local.port != standard_port:
        print(f"WARNING: Sentinel is running on non-standard port: {local.port}.", file=out)
    print(file=out)


def known_sentinels_report(session: AuditSession, out: TextIO) -> None:
    known = sorted(session.local.known_sentinels)
    print(f"Known Sentinels ({len(known)}):", file=out)
    print("=====================", file=out)
    for sentinel in known:
        result = session.probe_status(sentinel)
        if result is None:
            print(f"{sentinel} (NOT PROBED)", file=out)
        elif result.reachable:
            print(f"{sentinel} (Available)", file=out)
        else:
            print(f"{sentinel} (MISSING - err: '{result.error_text}')", file=out)
    print(file=out)


def pod_report(session: AuditSession, out: TextIO, *, by_error: bool = False) -> None:
    pods = session.pods
    flagged = session.pods_with_issues()
    print(f"Locally Configured Pods: {len(pods)}", file=out)
    print(f"{len(flagged)} of {len(pods)} Pods have configuration issues", file=out)
    for name in flagged:
        issues = session.issues_for(name)
        print(f"{name} has {len(issues)} configuration issues", file=out)
        if not by_error:
            for issue in issues:
                print(f"  - {issue.description}", file=out)
    if by_error and flagged:
        for issue, pod_names in session.issues.items():
            print(file=out)
            print(f"Config Issue: '{issue.description}'", file=out)
            print(f"Pods with issue {len(pod_names)}", file=out)
            print(RULE, file=out)
            for pod_name in pod_names:
                print(f"  {pod_name}", file=out)
    if session.removal_candidates:
        print(file=out)
        print("Recommended removals (master unreachable or auth failed):", file=out)
        for rec in session.removal_candidates:
            print(f"  {rec.pod} ({rec.master_address}): {rec.reason}", file=out)
    print(file=out)


def _local_sentinel_endpoint(session: AuditSession, standard_port: int) -> str:
    local = session.local
    if local.name:
        return local.name
    return format_endpoint("127.0.0.1", local.port or standard_port)


def _max_memory_text(session: AuditSession, address: str, auth_token: str) -> str:
    try:
        return str(NodeInfo(address, auth_token).max_memory(session.prober))
    except ConnectivityError as exc:
        log.info("maxmemory unavailable for %s: %s", address, exc)
        return "unavailable"


def live_pods_report(
    session: AuditSession,
    out: TextIO,
    *,
    standard_port: int = STANDARD_SENTINEL_PORT,
) -> None:
    endpoint = _local_sentinel_endpoint(session, standard_port)
    print(f"Live Pod State from {endpoint}", file=out)
    print(RULE, file=out)
    try:
        client = SentinelClient.connect(session.prober, endpoint)
    except ValueError as exc:
        print(f"Local sentinel unavailable: {exc}", file=out)
        print(file=out)
        return
    with client:
        for pod in session.pods.values():
            try:
                live = client.master(pod.name)
            except SentinelProtocolError as exc:
                print(f"{pod.name}: unavailable ({exc})", file=out)
                continue
            notes: List[str] = []
            if pod.monitored and live.address != pod.master_address:
                notes.append(f"master moved from configured {pod.master_address}")
            if pod.monitored and live.quorum != pod.quorum:
                notes.append(f"quorum {live.quorum} differs from configured {pod.quorum}")
            print(
                f"{pod.name}: master={live.address} flags={live.flags or '-'} "
                f"slaves={live.num_slaves} other-sentinels={live.num_other_sentinels} "
                f"quorum={live.quorum} maxmemory={_max_memory_text(session, live.address, pod.auth_token)}",
                file=out,
            )
            for note in notes:
                print(f"  WARNING: {note}", file=out)
    print(file=out)


def audit_header(session: AuditSession, out: TextIO, *, when: Optional[str] = None) -> None:
    stamp = f" at {when}" if when else ""
    print(f"Configuration Audit Run for Sentinel '{session.local.name}'{stamp}", file=out)
    print(file=out)


__all__ = [
    "audit_header",
    "base_config_report",
    "known_sentinels_report",
    "live_pods_report",
    "pod_report",
]
