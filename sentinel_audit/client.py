"""
Read-only Sentinel queries over ``redis.Redis``.

Commands are sent as split arguments (``"SENTINEL", "MASTERS"``) so redis-py
hands back the raw reply instead of its own parsed form; the typed accessors
below turn those raw shapes into what the decoder consumes.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import redis

from sentinel_audit.decoder import decode_record, decode_records, pair_flat_reply, parse_int
from sentinel_audit.errors import SentinelProtocolError
from sentinel_audit.prober import ConnectivityProber
from sentinel_audit.types.records import MasterAddress, MasterInfo, SentinelInfo, SlaveInfo

log = logging.getLogger(__name__)


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def as_bool(reply: Any) -> bool:
    if isinstance(reply, bool):
        return reply
    if isinstance(reply, int):
        return reply > 0
    text = _text(reply).strip().upper()
    if text in {"OK", "PONG"}:
        return True
    value = parse_int(text)
    return value is not None and value > 0


def as_list(reply: Any) -> List[str]:
    if reply is None:
        return []
    if not isinstance(reply, (list, tuple)):
        raise SentinelProtocolError(f"expected a list reply, got {type(reply).__name__}")
    return [_text(item) for item in reply]


def as_hash(reply: Any) -> Dict[str, str]:
    if isinstance(reply, dict):
        return {_text(k): _text(v) for k, v in reply.items()}
    if not isinstance(reply, (list, tuple)):
        raise SentinelProtocolError(f"expected a flat key/value reply, got {type(reply).__name__}")
    return pair_flat_reply(reply)


def as_hash_list(reply: Any) -> List[Dict[str, str]]:
    if reply is None:
        return []
    if not isinstance(reply, (list, tuple)):
        raise SentinelProtocolError(f"expected a list of key/value replies, got {type(reply).__name__}")
    out: List[Dict[str, str]] = []
    for item in reply:
        try:
            out.append(as_hash(item))
        except SentinelProtocolError as exc:
            log.warning("skipping malformed entry in sentinel reply: %s", exc)
    return out


class SentinelClient:
    def __init__(self, conn: Any, *, endpoint: str = "") -> None:
        self._conn = conn
        self.endpoint = endpoint

    @classmethod
    def connect(
        cls,
        prober: ConnectivityProber,
        endpoint: str,
        secret: Optional[str] = None,
    ) -> "SentinelClient":
        return cls(prober.connect(endpoint, secret), endpoint=endpoint)

    def close(self) -> None:
        try:
            self._conn.close()
        except (redis.RedisError, OSError) as exc:
            log.debug("error closing sentinel connection %s: %s", self.endpoint, exc)

    def __enter__(self) -> "SentinelClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _execute(self, *args: Any) -> Any:
        try:
            return self._conn.execute_command(*args)
        except (redis.RedisError, OSError) as exc:
            command = " ".join(str(a) for a in args)
            raise SentinelProtocolError(f"{self.endpoint}: '{command}' failed: {exc}") from exc

    def ping(self) -> bool:
        return as_bool(self._execute("PING"))

    def masters(self) -> List[MasterInfo]:
        return decode_records(MasterInfo, as_hash_list(self._execute("SENTINEL", "MASTERS")))

    def master(self, pod_name: str) -> MasterInfo:
        return decode_record(MasterInfo, as_hash(self._execute("SENTINEL", "MASTER", pod_name)))

    def slaves(self, pod_name: str) -> List[SlaveInfo]:
        return decode_records(SlaveInfo, as_hash_list(self._execute("SENTINEL", "SLAVES", pod_name)))

    def sentinels(self, pod_name: str) -> List[SentinelInfo]:
        return decode_records(SentinelInfo, as_hash_list(self._execute("SENTINEL", "SENTINELS", pod_name)))

    def get_master_address(self, pod_name: str) -> MasterAddress:
        info = as_list(self._execute("SENTINEL", "get-master-addr-by-name", pod_name))
        if not info:
            return MasterAddress()
        port = parse_int(info[1]) if len(info) > 1 else None
        if port is None:
            log.warning("bad port in master address reply for %s: %r", pod_name, info)
        return MasterAddress(host=info[0], port=port or 0)

    def config_get(self, key: str) -> str:
        reply = as_hash(self._execute("CONFIG", "GET", key))
        return reply.get(key, "")


__all__ = [
    "SentinelClient",
    "as_bool",
    "as_hash",
    "as_hash_list",
    "as_list",
]
