"""
Sentinel topology audit.

One pass over the parsed configuration:

1. every pod's declared sentinels are probed and sorted into confirmed and
   invalid sets (pods are independent and may be validated in parallel);
2. per-pod findings: invalid sentinels, and too few confirmed sentinels for
   the pod's quorum;
3. topology-wide duplicate detection for master IPs and replica addresses,
   run only once every pod has been validated.

The engine never stops at the first failure; probe errors become findings.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Tuple

from sentinel_audit.session import AuditSession, RemovalRecommendation
from sentinel_audit.types.issues import ConfigIssue
from sentinel_audit.types.topology import PodConfig

log = logging.getLogger(__name__)


def pod_config_issues(pod: PodConfig) -> List[ConfigIssue]:
    issues: List[ConfigIssue] = []
    if pod.invalid_sentinels:
        issues.append(ConfigIssue.HAS_INVALID_SENTINELS)
    if len(pod.confirmed_sentinels) < pod.quorum:
        issues.append(ConfigIssue.NO_QUORUM)
        issues.append(ConfigIssue.NOT_ENOUGH_SENTINELS)
    return issues


class AuditEngine:
    def __init__(self, session: AuditSession, *, max_workers: int = 1) -> None:
        self.session = session
        self.max_workers = max(1, int(max_workers or 1))

    def validate_pod_sentinels(self, pod: PodConfig) -> PodConfig:
        prober = self.session.prober
        pod.reset_validation()
        for sentinel in sorted(pod.sentinels):
            result = prober.probe(sentinel)
            self.session.record_probe(result)
            if result.reachable:
                pod.confirmed_sentinels.add(sentinel)
            else:
                pod.invalid_sentinels.add(sentinel)
                log.debug("pod %s: sentinel %s invalid (%s)", pod.name, sentinel, result.error_text)
        return pod

    def _validate_all(self, pods: List[PodConfig]) -> None:
        if self.max_workers == 1 or len(pods) < 2:
            for pod in pods:
                self.validate_pod_sentinels(pod)
            return
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="sentinel-probe") as pool:
            # list() drains the iterator so worker exceptions surface here.
            list(pool.map(self.validate_pod_sentinels, pods))

    def find_dupe_master_ips(self) -> List[Tuple[str, str]]:
        log.info("Looking for duplicated master IPs")
        session = self.session
        owners: Dict[str, PodConfig] = {}
        collisions: List[Tuple[str, str]] = []
        for pod in session.pods.values():
            if not pod.monitored:
                continue
            other = owners.get(pod.ip)
            if other is None:
                owners[pod.ip] = pod
                continue
            log.warning("Found duplicate master! %s and %s share master IP %s", other.name, pod.name, pod.ip)
            session.add_issue(ConfigIssue.DUPLICATE_MASTER_IP, pod.name)
            session.add_issue(ConfigIssue.DUPLICATE_MASTER_IP, other.name)
            collisions.append((other.name, pod.name))
            for candidate in (pod, other):
                self._check_master_auth(candidate)
        return collisions

    def _check_master_auth(self, pod: PodConfig) -> None:
        session = self.session
        if any(rec.pod == pod.name for rec in session.removal_candidates):
            return
        result = session.prober.probe(pod.master_address, pod.auth_token or None)
        if result.reachable:
            return
        log.warning("Pod %s could not auth to %s, recommend deleting this one.", pod.name, pod.master_address)
        session.removal_candidates.append(
            RemovalRecommendation(pod=pod.name, master_address=pod.master_address, reason=result.error_text)
        )

    def find_dupe_slave_ips(self) -> List[Tuple[str, str, str]]:
        log.info("Looking for duplicated slave IPs")
        session = self.session
        monitored = [pod for pod in session.pods.values() if pod.monitored]
        master_owner = {pod.master_address: pod for pod in monitored}
        slave_owner: Dict[str, PodConfig] = {}
        conflicts: List[Tuple[str, str, str]] = []
        for pod in session.pods.values():
            for slave in pod.slaves:
                other = slave_owner.setdefault(slave, pod)
                if other is not pod:
                    log.warning("Found duplicate slave! %s and %s share slave IP %s", other.name, pod.name, slave)
                    session.add_issue(ConfigIssue.DUPLICATE_SLAVE_IP, pod.name)
                    session.add_issue(ConfigIssue.DUPLICATE_SLAVE_IP, other.name)
                    conflicts.append((other.name, pod.name, slave))
                master = master_owner.get(slave)
                if master is not None:
                    log.warning(
                        "Found duplicate slave/master! %s is master for %s and slave for %s",
                        slave,
                        master.name,
                        pod.name,
                    )
                    session.add_issue(ConfigIssue.DUPLICATE_SLAVE_IP, pod.name)
                    session.add_issue(ConfigIssue.DUPLICATE_SLAVE_IP, master.name)
                    conflicts.append((master.name, pod.name, slave))
        return conflicts

    def run(self) -> AuditSession:
        session = self.session
        session.reset_findings()
        pods = list(session.pods.values())
        log.info("Auditing %d pod(s) with %d probe worker(s)", len(pods), self.max_workers)
        self._validate_all(pods)
        for pod in pods:
            issues = pod_config_issues(pod)
            if issues:
                log.info("%s has %d configuration issues", pod.name, len(issues))
            for issue in issues:
                session.add_issue(issue, pod.name)
        self.find_dupe_master_ips()
        self.find_dupe_slave_ips()
        session.audited = True
        return session


def run_audit(session: AuditSession, *, max_workers: int = 1) -> AuditSession:
    return AuditEngine(session, max_workers=max_workers).run()


__all__ = ["AuditEngine", "pod_config_issues", "run_audit"]
