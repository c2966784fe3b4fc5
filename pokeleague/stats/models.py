"""Data models for deck type statistics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class DeckTypeStat:
    """Per-season win/loss counters of one player with one deck type."""

    user_id: str
    deck_type: str
    season_id: str
    wins: int = 0
    losses: int = 0
    total_games: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeckTypeStat:
        return cls(
            user_id=data.get("userId", ""),
            deck_type=data.get("deckType", ""),
            season_id=data.get("seasonId", ""),
            wins=data.get("wins", 0),
            losses=data.get("losses", 0),
            total_games=data.get("totalGames", 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "deckType": self.deck_type,
            "seasonId": self.season_id,
            "wins": self.wins,
            "losses": self.losses,
            "totalGames": self.total_games,
        }
