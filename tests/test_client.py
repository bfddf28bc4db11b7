from __future__ import annotations

import pytest

from sentinel_audit.client import SentinelClient, as_bool, as_hash, as_hash_list, as_list
from sentinel_audit.errors import SentinelProtocolError
from sentinel_audit.prober import ConnectivityProber

SENTINEL = "10.0.0.11:26379"


def _client(fake_redis) -> SentinelClient:
    fake_redis.reachable.add(SENTINEL)
    prober = ConnectivityProber(timeout_seconds=1.0, client_factory=fake_redis)
    return SentinelClient.connect(prober, SENTINEL)


def test_accessors_coerce_raw_shapes() -> None:
    assert as_bool("OK") is True
    assert as_bool(b"PONG") is True
    assert as_bool(1) is True
    assert as_bool("0") is False
    assert as_bool("nope") is False
    assert as_list(None) == []
    assert as_list([b"10.0.0.1", "6379"]) == ["10.0.0.1", "6379"]
    assert as_hash({b"ip": b"10.0.0.1"}) == {"ip": "10.0.0.1"}
    assert as_hash(["ip", "10.0.0.1", "port", "6379"]) == {"ip": "10.0.0.1", "port": "6379"}


def test_accessors_reject_wrong_shapes() -> None:
    with pytest.raises(SentinelProtocolError):
        as_list("not-a-list")
    with pytest.raises(SentinelProtocolError):
        as_hash(42)
    with pytest.raises(SentinelProtocolError):
        as_hash_list("x")


def test_hash_list_skips_malformed_entries() -> None:
    assert as_hash_list([["name", "a"], 7, {"name": "b"}]) == [{"name": "a"}, {"name": "b"}]


def test_masters_and_master(fake_redis) -> None:
    fake_redis.replies[("SENTINEL", "MASTERS")] = [
        ["name", "pod1", "ip", "10.0.0.1", "port", "6379", "quorum", "2"],
        ["name", "pod2", "ip", "10.0.0.2", "port", "6380", "quorum", "3"],
    ]
    fake_redis.replies[("SENTINEL", "MASTER", "pod1")] = ["name", "pod1", "ip", "10.0.0.1", "port", "6379"]

    with _client(fake_redis) as client:
        masters = client.masters()
        master = client.master("pod1")

    assert [(m.name, m.quorum) for m in masters] == [("pod1", 2), ("pod2", 3)]
    assert master.address == "10.0.0.1:6379"
    assert all(conn.closed for conn in fake_redis.connections)


def test_slaves_and_sentinels(fake_redis) -> None:
    fake_redis.replies[("SENTINEL", "SLAVES", "pod1")] = [["ip", "10.0.0.5", "port", "6379"]]
    fake_redis.replies[("SENTINEL", "SENTINELS", "pod1")] = [
        {"name": "s1", "ip": "10.0.0.12", "port": "26379"},
    ]

    with _client(fake_redis) as client:
        slaves = client.slaves("pod1")
        sentinels = client.sentinels("pod1")

    assert [s.address for s in slaves] == ["10.0.0.5:6379"]
    assert sentinels[0].ip == "10.0.0.12"
    assert sentinels[0].port == 26379


def test_get_master_address(fake_redis) -> None:
    fake_redis.replies[("SENTINEL", "get-master-addr-by-name", "pod1")] = ["10.0.0.1", "6379"]
    fake_redis.replies[("SENTINEL", "get-master-addr-by-name", "gone")] = None

    with _client(fake_redis) as client:
        found = client.get_master_address("pod1")
        missing = client.get_master_address("gone")

    assert str(found) == "10.0.0.1:6379"
    assert missing.host == ""
    assert missing.port == 0


def test_command_failure_is_wrapped(fake_redis) -> None:
    with _client(fake_redis) as client:
        with pytest.raises(SentinelProtocolError) as excinfo:
            client.master("unknown-pod")

    assert SENTINEL in str(excinfo.value)
    assert "SENTINEL MASTER unknown-pod" in str(excinfo.value)
