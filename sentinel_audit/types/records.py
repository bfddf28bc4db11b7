"""
Typed records decoded from Sentinel replies.

Each record declares a static ``FIELDS`` table mapping the reply key to the
attribute it fills and how the raw string is coerced. Sentinel adds keys over
time, so the tables only list what the audit reads; unknown keys are ignored
and missing ones leave the attribute at its zero value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Tuple


class FieldKind(str, Enum):
    INTEGER = "integer"
    STRING = "string"
    BOOLEAN = "boolean"

    def zero(self) -> object:
        if self is FieldKind.INTEGER:
            return 0
        if self is FieldKind.BOOLEAN:
            return False
        return ""


@dataclass(frozen=True)
class FieldSpec:
    name: str
    key: str
    kind: FieldKind


def _int(name: str, key: str) -> FieldSpec:
    return FieldSpec(name, key, FieldKind.INTEGER)


def _str(name: str, key: str) -> FieldSpec:
    return FieldSpec(name, key, FieldKind.STRING)


def _bool(name: str, key: str) -> FieldSpec:
    return FieldSpec(name, key, FieldKind.BOOLEAN)


@dataclass
class MasterInfo:
    """Entry of ``SENTINEL MASTERS`` / ``SENTINEL MASTER <pod>``."""

    name: str = ""
    port: int = 0
    num_slaves: int = 0
    quorum: int = 0
    num_other_sentinels: int = 0
    parallel_syncs: int = 0
    runid: str = ""
    ip: str = ""
    down_after_milliseconds: int = 0
    is_master_down: bool = False
    last_ok_ping_reply: int = 0
    role_reported_time: int = 0
    info_refresh: int = 0
    role_reported: str = ""
    last_ping_reply: int = 0
    last_ping_sent: int = 0
    failover_timeout: int = 0
    config_epoch: int = 0
    flags: str = ""

    FIELDS: ClassVar[Tuple[FieldSpec, ...]] = (
        _str("name", "name"),
        _int("port", "port"),
        _int("num_slaves", "num-slaves"),
        _int("quorum", "quorum"),
        _int("num_other_sentinels", "num-other-sentinels"),
        _int("parallel_syncs", "parallel-syncs"),
        _str("runid", "runid"),
        _str("ip", "ip"),
        _int("down_after_milliseconds", "down-after-milliseconds"),
        _bool("is_master_down", "is-master-down"),
        _int("last_ok_ping_reply", "last-ok-ping-reply"),
        _int("role_reported_time", "role-reported-time"),
        _int("info_refresh", "info-refresh"),
        _str("role_reported", "role-reported"),
        _int("last_ping_reply", "last-ping-reply"),
        _int("last_ping_sent", "last-ping-sent"),
        _int("failover_timeout", "failover-timeout"),
        _int("config_epoch", "config-epoch"),
        _str("flags", "flags"),
    )

    @property
    def address(self) -> str:
        return f"{self.ip}:{self.port}"


@dataclass
class SlaveInfo:
    """Entry of ``SENTINEL SLAVES <pod>``."""

    name: str = ""
    host: str = ""
    port: int = 0
    runid: str = ""
    flags: str = ""
    pending_commands: int = 0
    is_master_down: bool = False
    last_ok_ping_reply: int = 0
    role_reported_time: int = 0
    last_ping_reply: int = 0
    last_ping_sent: int = 0
    info_refresh: int = 0
    role_reported: str = ""
    master_link_down_time: int = 0
    master_link_status: str = ""
    master_host: str = ""
    master_port: int = 0
    slave_priority: int = 0
    slave_repl_offset: int = 0

    FIELDS: ClassVar[Tuple[FieldSpec, ...]] = (
        _str("name", "name"),
        _str("host", "ip"),
        _int("port", "port"),
        _str("runid", "runid"),
        _str("flags", "flags"),
        _int("pending_commands", "pending-commands"),
        _bool("is_master_down", "is-master-down"),
        _int("last_ok_ping_reply", "last-ok-ping-reply"),
        _int("role_reported_time", "role-reported-time"),
        _int("last_ping_reply", "last-ping-reply"),
        _int("last_ping_sent", "last-ping-sent"),
        _int("info_refresh", "info-refresh"),
        _str("role_reported", "role-reported"),
        _int("master_link_down_time", "master-link-down-time"),
        _str("master_link_status", "master-link-status"),
        _str("master_host", "master-host"),
        _int("master_port", "master-port"),
        _int("slave_priority", "slave-priority"),
        _int("slave_repl_offset", "slave-repl-offset"),
    )

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass
class SentinelInfo:
    """Entry of ``SENTINEL SENTINELS <pod>``."""

    name: str = ""
    ip: str = ""
    port: int = 0
    runid: str = ""
    flags: str = ""
    pending_commands: int = 0
    last_ping_reply: int = 0
    last_ping_sent: int = 0
    last_ok_ping_reply: int = 0
    down_after_milliseconds: int = 0
    last_hello_message: int = 0
    voted_leader: str = ""
    voted_leader_epoch: int = 0

    FIELDS: ClassVar[Tuple[FieldSpec, ...]] = (
        _str("name", "name"),
        _str("ip", "ip"),
        _int("port", "port"),
        _str("runid", "runid"),
        _str("flags", "flags"),
        _int("pending_commands", "pending-commands"),
        _int("last_ping_reply", "last-ping-reply"),
        _int("last_ping_sent", "last-ping-sent"),
        _int("last_ok_ping_reply", "last-ok-ping-reply"),
        _int("down_after_milliseconds", "down-after-milliseconds"),
        _int("last_hello_message", "last-hello-message"),
        _str("voted_leader", "voted-leader"),
        _int("voted_leader_epoch", "voted-leader-epoch"),
    )

    @property
    def address(self) -> str:
        return f"{self.ip}:{self.port}"


@dataclass(frozen=True)
class MasterAddress:
    """Reply of ``SENTINEL get-master-addr-by-name``."""

    host: str = ""
    port: int = 0

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"
