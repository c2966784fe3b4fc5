"""Recomputation pipeline that runs once a match is completed."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Callable, Optional

from pokeleague.achievements.services import AchievementService
from pokeleague.badges.services import GymBadgeService
from pokeleague.errors import AppError
from pokeleague.stats.services import DeckStatsService

from .models import StepResult

if TYPE_CHECKING:
    from pokeleague.store import MatchRecordStore

logger = logging.getLogger(__name__)


def _run_step(
    steps: list[StepResult],
    name: str,
    context: str,
    func: Callable[..., Any],
    *args: Any,
) -> None:
    """Run one pipeline step, recording its outcome instead of raising."""
    try:
        func(*args)
    except AppError as e:
        logger.error(f"{context}: step '{name}' failed: {e.message}")
        steps.append(StepResult(name=name, ok=False, error=e.message))
    except Exception as e:  # noqa: BLE001
        logger.exception(f"{context}: step '{name}' failed unexpectedly")
        steps.append(StepResult(name=name, ok=False, error=str(e)))
    else:
        steps.append(StepResult(name=name))


class CompletionService:
    """Sequences the derived-data updates of a completed match.

    Steps run strictly in order and each one is attempted even when an
    earlier one failed. Nothing is rolled back; failed steps are reported in
    the returned list so they can be retried.
    """

    @staticmethod
    def on_match_completed(  # noqa: PLR0913
        store: MatchRecordStore,
        match_id: str,
        winner_id: str,
        player1_id: str,
        player2_id: str,
        player1_deck_type: Optional[str],
        player2_deck_type: Optional[str],
        season_id: str,
    ) -> list[StepResult]:
        context = f"Match {match_id}"
        steps: list[StepResult] = []

        if player1_deck_type:
            _run_step(
                steps,
                "deck_stats_player1",
                context,
                DeckStatsService.record_outcome,
                store,
                player1_id,
                player1_deck_type,
                season_id,
                winner_id == player1_id,
            )
        if player2_deck_type:
            _run_step(
                steps,
                "deck_stats_player2",
                context,
                DeckStatsService.record_outcome,
                store,
                player2_id,
                player2_deck_type,
                season_id,
                winner_id == player2_id,
            )

        _run_step(
            steps, "gym_badges", context, GymBadgeService.reassign_leaders, store, season_id
        )
        _run_step(
            steps,
            "achievements_player1",
            context,
            AchievementService.recompute_achievements,
            store,
            player1_id,
            season_id,
        )
        _run_step(
            steps,
            "achievements_player2",
            context,
            AchievementService.recompute_achievements,
            store,
            player2_id,
            season_id,
        )
        return steps

    @staticmethod
    def retry_recomputation(
        store: MatchRecordStore, season_id: str, user_ids: Iterable[str]
    ) -> list[StepResult]:
        """Re-run the idempotent steps (badges, achievements) for a season.

        Deck type counters are not part of the retry because they have no
        undo and would be counted twice.
        """
        context = f"Season {season_id}"
        steps: list[StepResult] = []
        _run_step(
            steps, "gym_badges", context, GymBadgeService.reassign_leaders, store, season_id
        )
        for user_id in dict.fromkeys(user_ids):
            _run_step(
                steps,
                f"achievements_{user_id}",
                context,
                AchievementService.recompute_achievements,
                store,
                user_id,
                season_id,
            )
        return steps
