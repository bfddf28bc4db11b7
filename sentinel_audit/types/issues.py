from __future__ import annotations

from enum import Enum
from typing import Dict


class ConfigIssue(str, Enum):
    NOT_ENOUGH_SENTINELS = "NOT_ENOUGH_SENTINELS"
    NO_QUORUM = "NO_QUORUM"
    HAS_INVALID_SENTINELS = "HAS_INVALID_SENTINELS"
    DUPLICATE_MASTER_IP = "DUPLICATE_MASTER_IP"
    DUPLICATE_SLAVE_IP = "DUPLICATE_SLAVE_IP"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS: Dict[ConfigIssue, str] = {
    ConfigIssue.NOT_ENOUGH_SENTINELS: "Not Enough Sentinels",
    ConfigIssue.NO_QUORUM: "NO Quorum Possible",
    ConfigIssue.HAS_INVALID_SENTINELS: "Has Sentinels Configured which do not exist or are unreachable",
    ConfigIssue.DUPLICATE_MASTER_IP: "Shares a master IP with another pod.",
    ConfigIssue.DUPLICATE_SLAVE_IP: "Shares a slave IP with another pod.",
}
