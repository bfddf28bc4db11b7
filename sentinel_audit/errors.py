from __future__ import annotations


class SentinelAuditError(RuntimeError):
    """Base error for the sentinel configuration audit."""


class ConfigFileError(SentinelAuditError):
    """The sentinel configuration file could not be read at all."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"unable to read sentinel config '{path}': {reason}")
        self.path = path
        self.reason = reason


class ConnectivityError(SentinelAuditError):
    """A node or sentinel endpoint could not be reached or queried."""

    def __init__(self, endpoint: str, reason: str) -> None:
        super().__init__(f"{endpoint}: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class KnownInvalidEndpoint(ConnectivityError):
    """Endpoint already failed a probe during this audit pass."""

    def __init__(self, endpoint: str) -> None:
        super().__init__(endpoint, "Known Invalid Sentinel")


class SentinelProtocolError(SentinelAuditError):
    """A sentinel command failed or returned an unexpected reply shape."""


__all__ = [
    "ConfigFileError",
    "ConnectivityError",
    "KnownInvalidEndpoint",
    "SentinelAuditError",
    "SentinelProtocolError",
]
