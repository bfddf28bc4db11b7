"""
Line-oriented reader for ``sentinel.conf``.

Only the directives the audit needs are interpreted: the local bind address
and port, and the ``sentinel`` sub-directives describing monitored pods, their
peer sentinels and replicas. Anything else is logged and skipped; a single bad
line never stops the load. Only failing to open the file is fatal.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Set

from sentinel_audit.decoder import parse_int
from sentinel_audit.errors import ConfigFileError
from sentinel_audit.types.topology import LocalSentinelConfig, format_endpoint

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "/etc/redis/sentinel.conf"

IGNORED_DIRECTIVES = {"maxclients"}
IGNORED_SENTINEL_DIRECTIVES = {
    "config-epoch",
    "leader-epoch",
    "current-epoch",
    "down-after-milliseconds",
    "maxclients",
    "failover-timeout",
    "parallel-syncs",
    "myid",
}


class MisshapenDirective(ValueError):
    """A directive line with missing or non-numeric arguments."""


def _require(args: List[str], count: int, directive: str) -> None:
    if len(args) < count:
        raise MisshapenDirective(f"{directive} expects {count} argument(s), got {len(args)}")


def _require_int(raw: str, what: str) -> int:
    value = parse_int(raw)
    if value is None:
        raise MisshapenDirective(f"{what} is not an integer: '{raw}'")
    return value


def _is_dropped(pod_name: str, dropped: Set[str], directive: str) -> bool:
    if pod_name in dropped:
        log.debug("Skipping %s for dropped pod %s", directive, pod_name)
        return True
    return False


def _monitor(local: LocalSentinelConfig, args: List[str], dropped: Set[str]) -> None:
    _require(args, 4, "monitor")
    pod_name, ip = args[0], args[1]
    port = _require_int(args[2], "port")
    quorum = _require_int(args[3], "quorum")
    address = format_endpoint(ip, port)
    owner = local.pod_by_master_address(address)
    if owner is not None:
        log.debug("Dropping monitor for %s: %s already monitored by %s", pod_name, address, owner.name)
        if owner.name != pod_name:
            dropped.add(pod_name)
            placeholder = local.pods.get(pod_name)
            if placeholder is not None and not placeholder.monitored:
                del local.pods[pod_name]
        return
    entry = local.pod(pod_name)
    if entry.monitored:
        log.warning("Pod %s is already monitored at %s; ignoring %s", pod_name, entry.master_address, address)
        return
    entry.ip = ip
    entry.port = port
    entry.quorum = quorum
    entry.monitored = True


def _auth_pass(local: LocalSentinelConfig, args: List[str], dropped: Set[str]) -> None:
    _require(args, 2, "auth-pass")
    if _is_dropped(args[0], dropped, "auth-pass"):
        return
    local.pod(args[0]).auth_token = args[1]


def _known_sentinel(local: LocalSentinelConfig, args: List[str], dropped: Set[str]) -> None:
    _require(args, 3, "known-sentinel")
    port = _require_int(args[2], "port")
    if _is_dropped(args[0], dropped, "known-sentinel"):
        return
    local.pod(args[0]).sentinels.add(format_endpoint(args[1], port))


def _known_slave(local: LocalSentinelConfig, args: List[str], dropped: Set[str]) -> None:
    _require(args, 3, "known-slave")
    port = _require_int(args[2], "port")
    if _is_dropped(args[0], dropped, "known-slave"):
        return
    local.pod(args[0]).slaves.append(format_endpoint(args[1], port))


_SENTINEL_HANDLERS: Dict[str, Callable[[LocalSentinelConfig, List[str], Set[str]], None]] = {
    "monitor": _monitor,
    "auth-pass": _auth_pass,
    "known-sentinel": _known_sentinel,
    "known-slave": _known_slave,
    "known-replica": _known_slave,
}


def _sentinel_directive(local: LocalSentinelConfig, args: List[str], dropped: Set[str]) -> None:
    _require(args, 1, "sentinel")
    sub = args[0].lower()
    handler = _SENTINEL_HANDLERS.get(sub)
    if handler is not None:
        handler(local, args[1:], dropped)
        return
    if sub in IGNORED_SENTINEL_DIRECTIVES:
        return
    log.info("Unhandled sentinel directive: %s", " ".join(args))


def _apply_line(local: LocalSentinelConfig, line: str, dropped: Set[str]) -> None:
    tokens = line.split()
    directive, args = tokens[0].lower(), tokens[1:]
    if directive == "sentinel":
        _sentinel_directive(local, args, dropped)
    elif directive == "port":
        _require(args, 1, "port")
        local.set_port(_require_int(args[0], "port"))
    elif directive == "bind":
        _require(args, 1, "bind")
        local.set_host(args[0])
        log.info("Local sentinel is listening on IP %s", local.host)
    elif directive == "dir":
        _require(args, 1, "dir")
        local.dir = args[0]
    elif directive in IGNORED_DIRECTIVES:
        return
    else:
        log.info("Unhandled config directive: %s", line)


def parse_sentinel_config(
    lines: Iterable[str],
    local: Optional[LocalSentinelConfig] = None,
) -> LocalSentinelConfig:
    local = local if local is not None else LocalSentinelConfig()
    # pods whose monitor lost to an earlier pod on the same address
    dropped: Set[str] = set()
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or "#" in line:
            continue
        try:
            _apply_line(local, line, dropped)
        except MisshapenDirective as exc:
            log.warning("Misshapen directive on line %d: '%s' (%s)", lineno, line, exc)
    local.rebuild_known_sentinels()
    return local


def load_sentinel_config(
    path: str | Path = DEFAULT_CONFIG_PATH,
    local: Optional[LocalSentinelConfig] = None,
) -> LocalSentinelConfig:
    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise ConfigFileError(str(config_path), exc.strerror or str(exc)) from exc
    local = parse_sentinel_config(text.splitlines(), local)
    log.info("Loaded %d pod(s) from %s", len(local.pods), config_path)
    return local


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "MisshapenDirective",
    "load_sentinel_config",
    "parse_sentinel_config",
]
