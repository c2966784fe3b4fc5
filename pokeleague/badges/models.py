"""Gym badge definitions for the pokeleague application."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

# One gym badge per deck type.
DECK_TYPES = {
    "fire": {"name": "Fire", "icon": "🔥"},
    "water": {"name": "Water", "icon": "💧"},
    "electric": {"name": "Electric", "icon": "⚡"},
    "grass": {"name": "Grass", "icon": "🌿"},
    "ice": {"name": "Ice", "icon": "❄️"},
    "fighting": {"name": "Fighting", "icon": "👊"},
    "poison": {"name": "Poison", "icon": "☠️"},
    "ground": {"name": "Ground", "icon": "🌍"},
    "flying": {"name": "Flying", "icon": "🪽"},
    "psychic": {"name": "Psychic", "icon": "🔮"},
    "bug": {"name": "Bug", "icon": "🐛"},
    "rock": {"name": "Rock", "icon": "🪨"},
    "ghost": {"name": "Ghost", "icon": "👻"},
    "dragon": {"name": "Dragon", "icon": "🐉"},
    "dark": {"name": "Dark", "icon": "🌑"},
    "steel": {"name": "Steel", "icon": "⚙️"},
    "fairy": {"name": "Fairy", "icon": "✨"},
    "normal": {"name": "Normal", "icon": "⚪"},
}


def normalize_deck_type(deck_type: Optional[str]) -> Optional[str]:
    """Lower-case and trim a deck type tag; blank tags become ``None``."""
    if deck_type is None:
        return None
    value = deck_type.strip().lower()
    return value or None


@dataclass(frozen=True)
class GymBadge:
    """A catalog badge awarded to the leader of one deck type."""

    id: str
    badge_type: str
    name: str = ""
    icon: str = ""

    @classmethod
    def from_dict(cls, badge_id: str, data: dict[str, Any]) -> GymBadge:
        return cls(
            id=badge_id,
            badge_type=data.get("badgeType", ""),
            name=data.get("name", ""),
            icon=data.get("icon", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"badgeType": self.badge_type, "name": self.name, "icon": self.icon}


@dataclass
class BadgeHolder:
    """The single holder of a gym badge within a season."""

    user_id: str
    badge_id: str
    season_id: str
    earned_at: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BadgeHolder:
        return cls(
            user_id=data.get("userId", ""),
            badge_id=data.get("badgeId", ""),
            season_id=data.get("seasonId", ""),
            earned_at=data.get("earnedAt"),
        )


def default_badges() -> list[GymBadge]:
    """Build the default catalog, one badge per deck type."""
    return [
        GymBadge(
            id=f"{deck_type}_badge",
            badge_type=deck_type,
            name=f"{info['name']} Badge",
            icon=info["icon"],
        )
        for deck_type, info in DECK_TYPES.items()
    ]
