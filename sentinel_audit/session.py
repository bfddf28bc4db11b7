from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sentinel_audit.prober import ConnectivityProber, ProbeResult
from sentinel_audit.types.issues import ConfigIssue
from sentinel_audit.types.topology import LocalSentinelConfig, PodConfig


@dataclass(frozen=True)
class RemovalRecommendation:
    pod: str
    master_address: str
    reason: str


@dataclass
class AuditSession:
    """
    State shared by the parser, audit engine and reports for one invocation.

    The engine owns every write; reports only read. ``sentinel_status`` may be
    written from probe workers and goes through ``record_probe``.
    """

    local: LocalSentinelConfig = field(default_factory=LocalSentinelConfig)
    prober: ConnectivityProber = field(default_factory=ConnectivityProber)
    issues: Dict[ConfigIssue, List[str]] = field(default_factory=dict)
    sentinel_status: Dict[str, ProbeResult] = field(default_factory=dict)
    removal_candidates: List[RemovalRecommendation] = field(default_factory=list)
    audited: bool = False
    _status_lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def pods(self) -> Dict[str, PodConfig]:
        return self.local.pods

    def reset_findings(self) -> None:
        self.issues = {}
        self.removal_candidates = []
        self.audited = False

    def record_probe(self, result: ProbeResult) -> None:
        # The first uncached observation wins; cached hits carry no error detail.
        with self._status_lock:
            existing = self.sentinel_status.get(result.endpoint)
            if existing is None or (existing.cached and not result.cached):
                self.sentinel_status[result.endpoint] = result

    def probe_status(self, endpoint: str) -> Optional[ProbeResult]:
        with self._status_lock:
            return self.sentinel_status.get(endpoint)

    def add_issue(self, issue: ConfigIssue, pod_name: str) -> None:
        pods = self.issues.setdefault(issue, [])
        if pod_name not in pods:
            pods.append(pod_name)

    def issues_for(self, pod_name: str) -> List[ConfigIssue]:
        return [issue for issue, pods in self.issues.items() if pod_name in pods]

    def pods_with_issues(self) -> List[str]:
        return [name for name in self.local.pods if self.issues_for(name)]
