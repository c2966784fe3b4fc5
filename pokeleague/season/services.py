"""Service for season standings and other read-side views."""

from __future__ import annotations

import operator
from typing import TYPE_CHECKING, Any

from pokeleague.core.constants import SEASON_STATUS_COMPLETED
from pokeleague.errors import AuthorizationError, NotFoundError

from .models import Season

if TYPE_CHECKING:
    from pokeleague.match.models import Match
    from pokeleague.store import MatchRecordStore


def _calculate_standings(matches: list[Match]) -> list[dict[str, Any]]:
    """Tally wins and losses per player from completed matches."""
    stats: dict[str, dict[str, Any]] = {}
    for match in matches:
        if not match.winner_id:
            continue
        for player_id in match.participants:
            s = stats.setdefault(
                player_id, {"id": player_id, "wins": 0, "losses": 0, "games_played": 0}
            )
            s["games_played"] += 1
            if player_id == match.winner_id:
                s["wins"] += 1
            else:
                s["losses"] += 1

    for s in stats.values():
        s["win_rate"] = s["wins"] / s["games_played"] * 100 if s["games_played"] else 0.0

    standings = sorted(
        stats.values(),
        key=operator.itemgetter("wins", "win_rate", "games_played"),
        reverse=True,
    )
    for rank, entry in enumerate(standings, start=1):
        entry["rank"] = rank
    return standings


class SeasonService:
    """Handles season-level views and administration."""

    @staticmethod
    def get_season(store: MatchRecordStore, season_id: str) -> Season:
        season = store.get_season(season_id)
        if season is None:
            raise NotFoundError("Season not found.")
        return season

    @staticmethod
    def get_standings(store: MatchRecordStore, season_id: str) -> list[dict[str, Any]]:
        """Season ranking by wins, then win rate."""
        SeasonService.get_season(store, season_id)
        return _calculate_standings(store.list_completed_matches(season_id))

    @staticmethod
    def get_gym_leaders(store: MatchRecordStore, season_id: str) -> list[dict[str, Any]]:
        """Current gym badge holders with their record for that deck type."""
        badges = {badge.id: badge for badge in store.list_gym_badges()}
        stats = {
            (s.user_id, s.deck_type): s for s in store.list_deck_type_stats(season_id)
        }

        leaders = []
        for holder in store.list_category_holders(season_id):
            badge = badges.get(holder.badge_id)
            if badge is None:
                continue
            stat = stats.get((holder.user_id, badge.badge_type))
            leaders.append(
                {
                    "userId": holder.user_id,
                    "badgeId": badge.id,
                    "badgeName": badge.name,
                    "icon": badge.icon,
                    "deckType": badge.badge_type,
                    "wins": stat.wins if stat else 0,
                    "losses": stat.losses if stat else 0,
                }
            )
        leaders.sort(key=lambda entry: entry["wins"], reverse=True)
        return leaders

    @staticmethod
    def get_player_achievements(
        store: MatchRecordStore, user_id: str, season_id: str
    ) -> list[dict[str, Any]]:
        """A player's pokeballs for a season, most prestigious first."""
        definitions = {d.id: d for d in store.list_achievement_definitions()}
        achievements = []
        for earned in store.list_player_achievements(user_id, season_id):
            definition = definitions.get(earned.achievement_id)
            if definition is None:
                continue
            achievements.append(
                {
                    "achievementId": definition.id,
                    "name": definition.name,
                    "kind": definition.achievement_kind,
                    "priority": definition.priority,
                    "earnedAt": earned.earned_at,
                    "isCurrent": earned.is_current,
                }
            )
        achievements.sort(key=operator.itemgetter("priority"), reverse=True)
        return achievements

    @staticmethod
    def get_pending_matches(store: MatchRecordStore, user_id: str) -> list[Match]:
        """Scheduled matches still waiting for this user's complete submission."""
        return [
            match
            for match in store.list_scheduled_matches(user_id)
            if not match.slot_for(user_id).is_complete
        ]

    @staticmethod
    def close_season(
        store: MatchRecordStore, season_id: str, is_admin: bool = False
    ) -> Season:
        """Close a season, freezing all of its matches."""
        if not is_admin:
            raise AuthorizationError("Only an administrator can close a season.")
        season = SeasonService.get_season(store, season_id)
        store.set_season_status(season.id, SEASON_STATUS_COMPLETED)
        season.status = SEASON_STATUS_COMPLETED
        return season
