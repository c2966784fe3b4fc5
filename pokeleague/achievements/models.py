"""Pokeball achievement definitions for the pokeleague application."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from pokeleague.core.constants import TOP_PLAYER_MIN_WINS, TOP_TIER_KIND

REQUIREMENT_TOTAL_WINS = "total_wins"
REQUIREMENT_TOTAL_GAMES = "total_games"
REQUIREMENT_WIN_STREAK = "win_streak"
REQUIREMENT_TYPE_WINS = "type_wins"
REQUIREMENT_TOP_PLAYER = "top_player"


@dataclass(frozen=True)
class AchievementDefinition:
    """One rung of the pokeball ladder."""

    id: str
    name: str
    achievement_kind: str
    requirement_type: str
    requirement_value: int
    priority: int

    @property
    def is_top_tier(self) -> bool:
        return self.achievement_kind == TOP_TIER_KIND

    @classmethod
    def from_dict(cls, achievement_id: str, data: dict[str, Any]) -> AchievementDefinition:
        return cls(
            id=achievement_id,
            name=data.get("name", ""),
            achievement_kind=data.get("achievementKind", ""),
            requirement_type=data.get("requirementType", ""),
            requirement_value=data.get("requirementValue") or 0,
            priority=data.get("priority", 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "achievementKind": self.achievement_kind,
            "requirementType": self.requirement_type,
            "requirementValue": self.requirement_value,
            "priority": self.priority,
        }


@dataclass
class PlayerAchievement:
    """An achievement a player earned in a season."""

    user_id: str
    achievement_id: str
    season_id: str
    earned_at: Any = None
    is_current: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlayerAchievement:
        return cls(
            user_id=data.get("userId", ""),
            achievement_id=data.get("achievementId", ""),
            season_id=data.get("seasonId", ""),
            earned_at=data.get("earnedAt"),
            is_current=bool(data.get("isCurrent", False)),
        )


@dataclass
class PlayerMetrics:
    """Derived numbers the ladder is evaluated against."""

    total_wins: int = 0
    total_games: int = 0
    max_type_wins: int = 0
    win_streak: int = 0
    league_wins: int = 0
    is_top_player: bool = False


@dataclass
class AchievementReport:
    """Result of recomputing one player's achievements."""

    user_id: str
    season_id: str
    metrics: PlayerMetrics = field(default_factory=PlayerMetrics)
    qualified_ids: list[str] = field(default_factory=list)
    current_id: Optional[str] = None


DEFAULT_POKEBALLS = [
    AchievementDefinition(
        id="pokeball",
        name="Poké Ball",
        achievement_kind="pokeball",
        requirement_type=REQUIREMENT_TOTAL_GAMES,
        requirement_value=1,
        priority=10,
    ),
    AchievementDefinition(
        id="net_ball",
        name="Net Ball",
        achievement_kind="net_ball",
        requirement_type=REQUIREMENT_TYPE_WINS,
        requirement_value=5,
        priority=20,
    ),
    AchievementDefinition(
        id="dive_ball",
        name="Dive Ball",
        achievement_kind="dive_ball",
        requirement_type=REQUIREMENT_WIN_STREAK,
        requirement_value=3,
        priority=30,
    ),
    AchievementDefinition(
        id="great_ball",
        name="Great Ball",
        achievement_kind="great_ball",
        requirement_type=REQUIREMENT_TOTAL_WINS,
        requirement_value=10,
        priority=40,
    ),
    AchievementDefinition(
        id="safari_ball",
        name="Safari Ball",
        achievement_kind="safari_ball",
        requirement_type=REQUIREMENT_TOTAL_GAMES,
        requirement_value=30,
        priority=50,
    ),
    AchievementDefinition(
        id="ultra_ball",
        name="Ultra Ball",
        achievement_kind="ultra_ball",
        requirement_type=REQUIREMENT_TOTAL_WINS,
        requirement_value=50,
        priority=60,
    ),
    AchievementDefinition(
        id=TOP_TIER_KIND,
        name="Master Ball",
        achievement_kind=TOP_TIER_KIND,
        requirement_type=REQUIREMENT_TOP_PLAYER,
        requirement_value=TOP_PLAYER_MIN_WINS,
        priority=100,
    ),
]
