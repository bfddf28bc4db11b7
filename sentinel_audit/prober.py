"""
Connectivity probes against sentinels and data nodes.

A probe opens a session with a bounded timeout and issues ``PING``. Endpoints
that fail are remembered for the rest of the audit pass so an address shared
by several pods only costs one timeout.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Set

import redis

from sentinel_audit.decoder import parse_int
from sentinel_audit.errors import ConnectivityError, KnownInvalidEndpoint
from sentinel_audit.types.topology import split_endpoint

log = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT_SECONDS = 2.0

ClientFactory = Callable[..., Any]


@dataclass(frozen=True)
class ProbeResult:
    endpoint: str
    reachable: bool
    error: Optional[Exception] = None
    cached: bool = False

    @property
    def error_text(self) -> str:
        return "" if self.error is None else str(self.error)


class ConnectivityProber:
    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
        client_factory: ClientFactory = redis.Redis,
    ) -> None:
        self.timeout_seconds = float(timeout_seconds)
        self._client_factory = client_factory
        self._invalid: Set[str] = set()
        self._in_flight: Dict[str, threading.Event] = {}
        self._lock = threading.Lock()

    def connect(self, endpoint: str, secret: Optional[str] = None) -> Any:
        host, port = split_endpoint(endpoint)
        return self._client_factory(
            host=host,
            port=port,
            password=secret or None,
            socket_timeout=self.timeout_seconds,
            socket_connect_timeout=self.timeout_seconds,
            decode_responses=True,
        )

    def is_known_invalid(self, endpoint: str) -> bool:
        with self._lock:
            return endpoint in self._invalid

    def invalid_endpoints(self) -> Set[str]:
        with self._lock:
            return set(self._invalid)

    def _mark_invalid(self, endpoint: str) -> None:
        with self._lock:
            self._invalid.add(endpoint)

    def probe(self, endpoint: str, secret: Optional[str] = None) -> ProbeResult:
        """PING ``endpoint``; concurrent callers for one endpoint wait on a single dial."""
        while True:
            with self._lock:
                if endpoint in self._invalid:
                    return ProbeResult(endpoint, False, KnownInvalidEndpoint(endpoint), cached=True)
                pending = self._in_flight.get(endpoint)
                if pending is None:
                    pending = threading.Event()
                    self._in_flight[endpoint] = pending
                    break
            pending.wait()
        try:
            return self._dial(endpoint, secret)
        finally:
            with self._lock:
                self._in_flight.pop(endpoint, None)
            pending.set()

    def _dial(self, endpoint: str, secret: Optional[str]) -> ProbeResult:
        conn = None
        try:
            conn = self.connect(endpoint, secret)
            conn.ping()
        except (redis.RedisError, OSError, ValueError) as exc:
            log.debug("probe failed for %s: %s", endpoint, exc)
            self._mark_invalid(endpoint)
            return ProbeResult(endpoint, False, exc)
        finally:
            if conn is not None:
                _close_quietly(conn)
        return ProbeResult(endpoint, True)

    def get_config_value(self, endpoint: str, key: str, secret: Optional[str] = None) -> str:
        """``CONFIG GET <key>`` on a node; used for reporting, never for pass/fail."""
        conn = None
        try:
            conn = self.connect(endpoint, secret)
            reply = conn.config_get(key)
        except (redis.RedisError, OSError, ValueError) as exc:
            raise ConnectivityError(endpoint, f"config get {key} failed: {exc}") from exc
        finally:
            if conn is not None:
                _close_quietly(conn)
        if not isinstance(reply, dict) or key not in reply:
            raise ConnectivityError(endpoint, f"config key '{key}' not returned")
        return str(reply[key])


def _close_quietly(conn: Any) -> None:
    try:
        conn.close()
    except (redis.RedisError, OSError) as exc:
        log.debug("error closing connection: %s", exc)


@dataclass
class NodeInfo:
    """A data node (master or replica) addressed by ``host:port``."""

    name: str
    auth_token: str = ""

    def max_memory(self, prober: ConnectivityProber) -> int:
        raw = prober.get_config_value(self.name, "maxmemory", self.auth_token)
        value = parse_int(raw)
        if value is None:
            raise ConnectivityError(self.name, f"maxmemory is not an integer: '{raw}'")
        return value


__all__ = [
    "DEFAULT_PROBE_TIMEOUT_SECONDS",
    "ConnectivityProber",
    "NodeInfo",
    "ProbeResult",
]
