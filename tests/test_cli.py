from __future__ import annotations

import io
from pathlib import Path

import pytest

from sentinel_audit import cli
from sentinel_audit.prober import ConnectivityProber


@pytest.fixture
def patched_prober(monkeypatch, fake_redis):
    for name in ("SENTINEL_AUDIT_SETTINGS", "SENTINEL_AUDIT_CONFIG", "SENTINEL_AUDIT_TIMEOUT", "SENTINEL_AUDIT_WORKERS"):
        monkeypatch.delenv(name, raising=False)

    def _factory(*, timeout_seconds: float) -> ConnectivityProber:
        return ConnectivityProber(timeout_seconds=timeout_seconds, client_factory=fake_redis)

    monkeypatch.setattr(cli, "ConnectivityProber", _factory)
    return fake_redis


def _run(argv) -> tuple:
    out = io.StringIO()
    code = cli.main(argv, out=out)
    return code, out.getvalue()


def test_missing_config_exits_two(patched_prober, tmp_path: Path, capsys) -> None:
    code, text = _run(["--config", str(tmp_path / "nope.conf")])

    assert code == cli.EXIT_CONFIG_UNREADABLE
    assert text == ""
    assert "ERROR:" in capsys.readouterr().err


def test_findings_still_exit_zero(patched_prober, write_config) -> None:
    path = write_config(
        """
        port 26379
        bind 10.0.0.10
        sentinel monitor pod1 10.0.0.1 6379 2
        sentinel known-sentinel pod1 10.0.0.11 26379
        """
    )

    code, text = _run(["--config", str(path)])

    assert code == cli.EXIT_OK
    assert text.startswith("Configuration Audit Run for Sentinel '10.0.0.10:26379' at ")
    assert "Bind Statement Present: True" in text
    assert "10.0.0.11:26379 (MISSING - err: '" in text
    assert "pod1 has 3 configuration issues" in text


def test_report_selection_comma_and_repeat(patched_prober, write_config) -> None:
    path = write_config("port 26380\nsentinel monitor pod1 10.0.0.1 6379 0\n")

    code, text = _run(["--config", str(path), "--report", "baseconfig,bogus", "--report", "pods"])

    assert code == cli.EXIT_OK
    assert "non-standard port: 26380" in text
    assert "Unknown report 'bogus'" in text
    assert "Locally Configured Pods: 1" in text
    assert "Known Sentinels" not in text


def test_baseconfig_only_skips_probing(patched_prober, write_config) -> None:
    path = write_config("sentinel monitor pod1 10.0.0.1 6379 1\nsentinel known-sentinel pod1 10.0.0.11 26379\n")

    code, _ = _run(["--config", str(path), "--report", "baseconfig"])

    assert code == cli.EXIT_OK
    assert patched_prober.pings == []


def test_byerror_groups_pods(patched_prober, write_config) -> None:
    path = write_config("sentinel monitor pod1 10.0.0.1 6379 1\nsentinel known-sentinel pod1 10.0.0.11 26379\n")

    _, text = _run(["--config", str(path), "--report", "pods", "--byerror"])

    assert "Config Issue: 'NO Quorum Possible'" in text
    assert "  pod1" in text


def test_timeout_flag_reaches_prober(patched_prober, write_config) -> None:
    path = write_config("sentinel monitor pod1 10.0.0.1 6379 1\nsentinel known-sentinel pod1 10.0.0.11 26379\n")

    _run(["--config", str(path), "--timeout", "0.25", "--report", "known-sentinels"])

    assert patched_prober.kwargs[0]["socket_connect_timeout"] == 0.25


def test_list_reports(patched_prober) -> None:
    code, text = _run(["--list-reports"])

    assert code == cli.EXIT_OK
    names = [line.split()[0] for line in text.splitlines()]
    assert names == ["baseconfig", "known-sentinels", "pods", "live-pods", "all"]
