from __future__ import annotations

import textwrap
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest
import redis

from sentinel_audit.prober import ConnectivityProber
from sentinel_audit.session import AuditSession


class FakeConnection:
    def __init__(self, factory: "FakeRedisFactory", host: str, port: int, password: Optional[str]) -> None:
        self.factory = factory
        self.endpoint = f"{host}:{port}"
        self.password = password
        self.closed = False

    def _check(self) -> None:
        if self.endpoint not in self.factory.reachable:
            raise redis.ConnectionError(f"Error connecting to {self.endpoint}. Connection refused.")
        expected = self.factory.passwords.get(self.endpoint)
        if expected is not None and self.password != expected:
            raise redis.AuthenticationError("invalid password")

    def ping(self) -> bool:
        self.factory.pings.append(self.endpoint)
        if self.factory.ping_delay:
            time.sleep(self.factory.ping_delay)
        self._check()
        return True

    def config_get(self, key: str) -> Dict[str, str]:
        self._check()
        values = self.factory.config.get(self.endpoint, {})
        return {key: values[key]} if key in values else {}

    def execute_command(self, *args: Any) -> Any:
        self._check()
        key = tuple(str(a) for a in args)
        if key not in self.factory.replies:
            raise redis.ResponseError(f"ERR no such master '{key[-1]}'")
        return self.factory.replies[key]

    def close(self) -> None:
        self.closed = True


class FakeRedisFactory:
    """Stands in for ``redis.Redis``; records every connection it hands out."""

    def __init__(self, reachable: Optional[Set[str]] = None) -> None:
        self.reachable: Set[str] = set(reachable or ())
        self.passwords: Dict[str, str] = {}
        self.config: Dict[str, Dict[str, str]] = {}
        self.replies: Dict[Tuple[str, ...], Any] = {}
        self.pings: List[str] = []
        self.ping_delay = 0.0
        self.connections: List[FakeConnection] = []
        self.kwargs: List[Dict[str, Any]] = []

    def __call__(self, **kwargs: Any) -> FakeConnection:
        self.kwargs.append(dict(kwargs))
        conn = FakeConnection(self, kwargs["host"], kwargs["port"], kwargs.get("password"))
        self.connections.append(conn)
        return conn


@pytest.fixture
def fake_redis() -> FakeRedisFactory:
    return FakeRedisFactory()


@pytest.fixture
def session(fake_redis: FakeRedisFactory) -> AuditSession:
    return AuditSession(prober=ConnectivityProber(timeout_seconds=0.5, client_factory=fake_redis))


@pytest.fixture
def write_config(tmp_path: Path):
    def _write(body: str, name: str = "sentinel.conf") -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(body).strip() + "\n", encoding="utf-8")
        return path

    return _write
