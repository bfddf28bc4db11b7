"""
sentinel_audit - Read-only audit of a Redis Sentinel configuration.

Parses the local ``sentinel.conf``, probes every declared peer sentinel and
reports quorum problems, unreachable peers and address collisions between
monitored pods.
"""

from sentinel_audit.audits.engine import AuditEngine, run_audit
from sentinel_audit.config_parser import load_sentinel_config, parse_sentinel_config
from sentinel_audit.prober import ConnectivityProber, ProbeResult
from sentinel_audit.session import AuditSession

__version__ = "0.1.0"

__all__ = [
    "AuditEngine",
    "AuditSession",
    "ConnectivityProber",
    "ProbeResult",
    "load_sentinel_config",
    "parse_sentinel_config",
    "run_audit",
]
