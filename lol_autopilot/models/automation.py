"""
Data models exchanged between the front-end and the client automations
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class StatusKind(Enum):
    """Severity of a status event shown to the user"""
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class StatusEvent:
    """Progress or result event emitted by every automation"""
    step: str
    message: str
    kind: StatusKind = StatusKind.INFO
    account_id: Optional[Any] = None
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        payload = {
            "step": self.step,
            "kind": self.kind.value,
            "message": self.message,
            "timestamp": int(self.timestamp * 1000),
        }
        if self.account_id is not None:
            payload["accountId"] = self.account_id
        return payload


@dataclass(frozen=True)
class AutomationSettings:
    """Pick/ban configuration, replaced wholesale between ticks"""
    enabled: bool = False
    pick_champion_id: Optional[int] = None
    ban_champion_id: Optional[int] = None

    @classmethod
    def from_values(cls, enabled: Any, pick_champion_id: Any = None, ban_champion_id: Any = None) -> "AutomationSettings":
        """Normalize loosely typed front-end values; 0 and empty mean "not set" """
        return cls(
            enabled=bool(enabled),
            pick_champion_id=int(pick_champion_id) if pick_champion_id else None,
            ban_champion_id=int(ban_champion_id) if ban_champion_id else None,
        )


@dataclass(frozen=True)
class LoginRequest:
    """Credentials and client location for one login automation"""
    account_id: Any
    username: str
    password: str = field(repr=False)
    client_path: str = ""

    def missing_field(self) -> Optional[str]:
        """Name of the first required field that is empty, if any"""
        if not self.account_id:
            return "account_id"
        if not self.username or not self.password:
            return "credentials"
        if not self.client_path or not self.client_path.strip():
            return "client_path"
        return None
