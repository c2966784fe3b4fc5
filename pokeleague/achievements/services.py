"""Service for pokeball achievement evaluation and awarding."""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING, Optional

from pokeleague.core.constants import STREAK_LOOKBACK, TOP_PLAYER_MIN_WINS

from .models import (
    DEFAULT_POKEBALLS,
    REQUIREMENT_TOP_PLAYER,
    REQUIREMENT_TOTAL_GAMES,
    REQUIREMENT_TOTAL_WINS,
    REQUIREMENT_TYPE_WINS,
    REQUIREMENT_WIN_STREAK,
    AchievementDefinition,
    AchievementReport,
    PlayerMetrics,
)

if TYPE_CHECKING:
    from pokeleague.match.models import Match
    from pokeleague.store import MatchRecordStore

logger = logging.getLogger(__name__)


def compute_win_streak(recent_matches: list[Match], user_id: str) -> int:
    """Count consecutive wins, walking from the most recent match."""
    streak = 0
    for match in recent_matches:
        if match.winner_id != user_id:
            break
        streak += 1
    return streak


def count_league_wins(matches: list[Match]) -> Counter[str]:
    """Wins per player across completed matches."""
    return Counter(m.winner_id for m in matches if m.winner_id)


def find_top_player(wins_by_user: Counter[str]) -> Optional[str]:
    """Return the player with strictly the most wins, or None on a tie."""
    ranked = wins_by_user.most_common(2)
    if not ranked or ranked[0][1] <= 0:
        return None
    if len(ranked) > 1 and ranked[1][1] == ranked[0][1]:
        return None
    return ranked[0][0]


def qualifies(definition: AchievementDefinition, metrics: PlayerMetrics) -> bool:
    """Check one ladder rung against a player's metrics."""
    required = definition.requirement_value
    if definition.requirement_type == REQUIREMENT_TOTAL_WINS:
        return metrics.total_wins >= required
    if definition.requirement_type == REQUIREMENT_TOTAL_GAMES:
        return metrics.total_games >= required
    if definition.requirement_type == REQUIREMENT_WIN_STREAK:
        return metrics.win_streak >= required
    if definition.requirement_type == REQUIREMENT_TYPE_WINS:
        return metrics.max_type_wins >= required
    if definition.requirement_type == REQUIREMENT_TOP_PLAYER:
        return (
            definition.is_top_tier
            and metrics.is_top_player
            and metrics.league_wins >= TOP_PLAYER_MIN_WINS
        )
    return False


def select_current(
    definitions: dict[str, AchievementDefinition],
    earned_ids: list[str],
    is_top_player: bool,
) -> Optional[str]:
    """Pick the most prestigious earned achievement to display.

    The top-tier rung only counts while the player still leads the league.
    """
    candidates = [
        definitions[achievement_id]
        for achievement_id in earned_ids
        if achievement_id in definitions
    ]
    if not is_top_player:
        candidates = [d for d in candidates if not d.is_top_tier]
    if not candidates:
        return None
    return max(candidates, key=lambda d: d.priority).id


class AchievementService:
    """Service class for pokeball achievements."""

    @staticmethod
    def collect_metrics(
        store: MatchRecordStore, user_id: str, season_id: str
    ) -> Optional[PlayerMetrics]:
        """Gather the numbers the ladder is evaluated against.

        Returns None for a player without any deck type record this season.
        """
        deck_stats = store.list_deck_type_stats(season_id, user_id=user_id)
        if not deck_stats:
            return None

        league_wins = count_league_wins(store.list_completed_matches(season_id))
        top_player_id = find_top_player(league_wins)

        recent = store.list_completed_matches(
            season_id, user_id=user_id, limit=STREAK_LOOKBACK
        )

        return PlayerMetrics(
            total_wins=sum(s.wins for s in deck_stats),
            total_games=sum(s.total_games for s in deck_stats),
            max_type_wins=max((s.wins for s in deck_stats), default=0),
            win_streak=compute_win_streak(recent, user_id),
            league_wins=league_wins.get(user_id, 0),
            is_top_player=top_player_id == user_id,
        )

    @staticmethod
    def recompute_achievements(
        store: MatchRecordStore, user_id: str, season_id: str
    ) -> AchievementReport:
        """Grant every rung the player now qualifies for and pick the current one.

        Earned rungs are never revoked. Only this player's rows are touched, so
        a former league leader keeps the top tier flagged as current until
        their own next recomputation.
        """
        report = AchievementReport(user_id=user_id, season_id=season_id)
        metrics = AchievementService.collect_metrics(store, user_id, season_id)
        if metrics is None:
            return report
        report.metrics = metrics

        definitions = store.list_achievement_definitions()
        for definition in definitions:
            if not qualifies(definition, metrics):
                continue
            report.qualified_ids.append(definition.id)
            if store.upsert_player_achievement(user_id, definition.id, season_id):
                logger.info(
                    f"{user_id} earned {definition.name} in season {season_id}"
                )

        earned_ids = [
            a.achievement_id
            for a in store.list_player_achievements(user_id, season_id)
        ]
        if earned_ids:
            report.current_id = select_current(
                {d.id: d for d in definitions}, earned_ids, metrics.is_top_player
            )
            store.set_current_achievement_flags(user_id, season_id, report.current_id)

        return report

    @staticmethod
    def seed_definitions(store: MatchRecordStore) -> int:
        """Write the default pokeball ladder."""
        for definition in DEFAULT_POKEBALLS:
            store.put_achievement_definition(definition)
        return len(DEFAULT_POKEBALLS)
