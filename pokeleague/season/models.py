"""Data models for the season blueprint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pokeleague.core.constants import SEASON_STATUS_ACTIVE, SEASON_STATUS_COMPLETED


@dataclass
class Season:
    """A season groups matches and scopes every derived standing."""

    id: str
    name: str = ""
    status: str = SEASON_STATUS_ACTIVE

    @property
    def is_closed(self) -> bool:
        return self.status == SEASON_STATUS_COMPLETED

    @classmethod
    def from_dict(cls, season_id: str, data: dict[str, Any]) -> Season:
        return cls(
            id=season_id,
            name=data.get("name", ""),
            status=data.get("status", SEASON_STATUS_ACTIVE),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "status": self.status}
