"""Service for per-deck-type win/loss aggregates."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pokeleague.badges.models import normalize_deck_type
from pokeleague.errors import ValidationError

from .models import DeckTypeStat

if TYPE_CHECKING:
    from pokeleague.store import MatchRecordStore

logger = logging.getLogger(__name__)


class DeckStatsService:
    """Service class for deck type statistics."""

    @staticmethod
    def record_outcome(
        store: MatchRecordStore,
        user_id: str,
        deck_type: str,
        season_id: str,
        won: bool,
    ) -> DeckTypeStat:
        """Add one win or one loss to a player's deck type record.

        There is no undo, so callers must invoke this at most once per
        participant per completed match.
        """
        normalized = normalize_deck_type(deck_type)
        if not normalized:
            raise ValidationError("A deck type is required to record an outcome.")

        stat = store.upsert_deck_type_stat(
            user_id,
            normalized,
            season_id,
            wins=1 if won else 0,
            losses=0 if won else 1,
        )
        logger.debug(
            f"Recorded {'win' if won else 'loss'} for {user_id} with {normalized} "
            f"in season {season_id}: {stat.wins}-{stat.losses}"
        )
        return stat
