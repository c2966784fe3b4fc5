"""Service for gym badge leadership."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .models import default_badges

if TYPE_CHECKING:
    from pokeleague.stats.models import DeckTypeStat
    from pokeleague.store import MatchRecordStore

logger = logging.getLogger(__name__)


def find_category_leaders(stats: list[DeckTypeStat]) -> dict[str, DeckTypeStat]:
    """Pick the aggregate with the most wins for every deck type.

    Aggregates without wins never lead. On a tie the aggregate seen first
    keeps the lead, so the winner depends on input order.
    """
    leaders: dict[str, DeckTypeStat] = {}
    for stat in stats:
        if stat.wins <= 0:
            continue
        current = leaders.get(stat.deck_type)
        if current is None or stat.wins > current.wins:
            leaders[stat.deck_type] = stat
    return leaders


class GymBadgeService:
    """Service class for gym badge operations."""

    @staticmethod
    def reassign_leaders(store: MatchRecordStore, season_id: str) -> dict[str, str]:
        """Recompute every gym badge holder of a season.

        Returns a mapping of deck type to the user now holding its badge.
        """
        stats = store.list_deck_type_stats(season_id)
        # Most wins first, so the earliest aggregate in a tie is the one kept.
        stats.sort(key=lambda s: s.wins, reverse=True)
        leaders = find_category_leaders(stats)
        if not leaders:
            return {}

        badges_by_type = {badge.badge_type: badge for badge in store.list_gym_badges()}

        assigned: dict[str, str] = {}
        for deck_type, leader in leaders.items():
            badge = badges_by_type.get(deck_type)
            if badge is None:
                logger.warning(f"No gym badge defined for deck type '{deck_type}'")
                continue
            store.reassign_category_holder(badge.id, season_id, leader.user_id)
            assigned[deck_type] = leader.user_id

        return assigned

    @staticmethod
    def seed_badges(store: MatchRecordStore) -> int:
        """Write the default gym badge catalog."""
        badges = default_badges()
        for badge in badges:
            store.put_gym_badge(badge)
        return len(badges)
