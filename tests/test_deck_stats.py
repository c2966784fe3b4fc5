"""Tests for per-deck-type win/loss aggregates."""

from __future__ import annotations

import pytest

from pokeleague.errors import ValidationError
from pokeleague.stats.services import DeckStatsService
from tests.conftest import ASH, MISTY, SEASON_ID


def test_first_outcome_creates_record(store):
    stat = DeckStatsService.record_outcome(store, ASH, "fire", SEASON_ID, True)

    assert (stat.wins, stat.losses, stat.total_games) == (1, 0, 1)  # nosec B101
    stored = store.list_deck_type_stats(SEASON_ID, user_id=ASH)
    assert len(stored) == 1  # nosec B101
    assert stored[0].deck_type == "fire"  # nosec B101


def test_outcomes_accumulate(store):
    DeckStatsService.record_outcome(store, ASH, "fire", SEASON_ID, True)
    DeckStatsService.record_outcome(store, ASH, "fire", SEASON_ID, False)
    stat = DeckStatsService.record_outcome(store, ASH, "fire", SEASON_ID, True)

    assert (stat.wins, stat.losses, stat.total_games) == (2, 1, 3)  # nosec B101
    assert stat.total_games == stat.wins + stat.losses  # nosec B101


def test_deck_type_is_normalized(store):
    DeckStatsService.record_outcome(store, ASH, "  Fire ", SEASON_ID, True)
    DeckStatsService.record_outcome(store, ASH, "FIRE", SEASON_ID, True)

    stats = store.list_deck_type_stats(SEASON_ID, user_id=ASH)
    assert [(s.deck_type, s.wins) for s in stats] == [("fire", 2)]  # nosec B101


def test_blank_deck_type_rejected(store):
    with pytest.raises(ValidationError):
        DeckStatsService.record_outcome(store, ASH, "   ", SEASON_ID, True)
    assert store.list_deck_type_stats(SEASON_ID) == []  # nosec B101


def test_records_are_scoped_by_player_and_season(store):
    DeckStatsService.record_outcome(store, ASH, "water", SEASON_ID, True)
    DeckStatsService.record_outcome(store, MISTY, "water", SEASON_ID, False)
    DeckStatsService.record_outcome(store, ASH, "water", "season2", False)

    season_one = {s.user_id: s for s in store.list_deck_type_stats(SEASON_ID)}
    assert season_one[ASH].wins == 1  # nosec B101
    assert season_one[MISTY].losses == 1  # nosec B101
    season_two = store.list_deck_type_stats("season2")
    assert [(s.user_id, s.losses) for s in season_two] == [(ASH, 1)]  # nosec B101
