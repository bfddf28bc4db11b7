"""
sentinel_audit.types - Topology model and records decoded from Sentinel replies.
"""

from .issues import ConfigIssue
from .records import (
    FieldKind,
    FieldSpec,
    MasterAddress,
    MasterInfo,
    SentinelInfo,
    SlaveInfo,
)
from .topology import (
    LocalSentinelConfig,
    PodConfig,
    format_endpoint,
    split_endpoint,
)

__all__ = [
    # Topology
    "LocalSentinelConfig",
    "PodConfig",
    "format_endpoint",
    "split_endpoint",
    # Findings
    "ConfigIssue",
    # Reply records
    "FieldKind",
    "FieldSpec",
    "MasterAddress",
    "MasterInfo",
    "SentinelInfo",
    "SlaveInfo",
]
