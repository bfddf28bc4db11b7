from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple


def format_endpoint(host: str, port: int | str) -> str:
    return f"{host}:{port}"


def split_endpoint(endpoint: str) -> Tuple[str, int]:
    """Split ``host:port`` on the last colon; raises ValueError when malformed."""
    host, sep, raw_port = str(endpoint or "").rpartition(":")
    if not sep or not host or not raw_port.isdigit():
        raise ValueError(f"malformed endpoint '{endpoint}'")
    return host, int(raw_port)


@dataclass
class PodConfig:
    name: str
    ip: str = ""
    port: int = 0
    quorum: int = 0
    auth_token: str = ""
    monitored: bool = False
    sentinels: Set[str] = field(default_factory=set)
    slaves: List[str] = field(default_factory=list)
    confirmed_sentinels: Set[str] = field(default_factory=set)
    invalid_sentinels: Set[str] = field(default_factory=set)

    @property
    def master_address(self) -> str:
        return format_endpoint(self.ip, self.port)

    def reset_validation(self) -> None:
        self.confirmed_sentinels = set()
        self.invalid_sentinels = set()


@dataclass
class LocalSentinelConfig:
    """Local sentinel identity plus every pod its config file declares."""

    host: str = ""
    port: int = 0
    name: str = ""
    dir: str = ""
    pods: Dict[str, PodConfig] = field(default_factory=dict)
    known_sentinels: Set[str] = field(default_factory=set)

    def set_host(self, host: str) -> None:
        self.host = host
        self._refresh_name()

    def set_port(self, port: int) -> None:
        self.port = port
        self._refresh_name()

    def _refresh_name(self) -> None:
        if self.host and self.port > 0:
            self.name = format_endpoint(self.host, self.port)

    def pod(self, name: str) -> PodConfig:
        """Return the pod entry, creating a placeholder for out-of-order directives."""
        entry = self.pods.get(name)
        if entry is None:
            entry = PodConfig(name=name)
            self.pods[name] = entry
        return entry

    def pod_by_master_address(self, address: str) -> PodConfig | None:
        for entry in self.pods.values():
            if entry.monitored and entry.master_address == address:
                return entry
        return None

    def rebuild_known_sentinels(self) -> Set[str]:
        known: Set[str] = set()
        for entry in self.pods.values():
            known.update(entry.sentinels)
        known.discard(self.name)
        self.known_sentinels = known
        return known
