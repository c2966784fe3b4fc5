"""Tests for gym badge leadership."""

from __future__ import annotations

from unittest.mock import patch

from pokeleague.badges.models import DECK_TYPES, GymBadge, default_badges
from pokeleague.badges.services import GymBadgeService, find_category_leaders
from pokeleague.stats.models import DeckTypeStat
from tests.conftest import ASH, BROCK, MISTY, SEASON_ID, make_store


def _stat(user_id, deck_type, wins, losses=0):
    return DeckTypeStat(
        user_id=user_id,
        deck_type=deck_type,
        season_id=SEASON_ID,
        wins=wins,
        losses=losses,
        total_games=wins + losses,
    )


def _holders(store):
    return {h.badge_id: h.user_id for h in store.list_category_holders(SEASON_ID)}


def test_default_catalog_has_one_badge_per_deck_type():
    badges = default_badges()
    assert len(badges) == len(DECK_TYPES) == 18  # nosec B101
    assert {b.badge_type for b in badges} == set(DECK_TYPES)  # nosec B101
    fire = next(b for b in badges if b.badge_type == "fire")
    assert fire.id == "fire_badge"  # nosec B101


def test_find_category_leaders_skips_winless_and_keeps_first_on_tie():
    stats = [
        _stat(ASH, "fire", 4),
        _stat(MISTY, "fire", 4),
        _stat(BROCK, "rock", 0, 3),
        _stat(MISTY, "water", 2),
    ]

    leaders = find_category_leaders(stats)

    assert leaders["fire"].user_id == ASH  # nosec B101
    assert leaders["water"].user_id == MISTY  # nosec B101
    assert "rock" not in leaders  # nosec B101


def test_leader_takes_over_badge():
    store = make_store()
    store.upsert_deck_type_stat(ASH, "fire", SEASON_ID, wins=3)
    store.upsert_deck_type_stat(MISTY, "fire", SEASON_ID, wins=5)

    assigned = GymBadgeService.reassign_leaders(store, SEASON_ID)

    assert assigned == {"fire": MISTY}  # nosec B101
    assert _holders(store) == {"fire_badge": MISTY}  # nosec B101

    store.upsert_deck_type_stat(ASH, "fire", SEASON_ID, wins=3)
    GymBadgeService.reassign_leaders(store, SEASON_ID)

    holders = store.list_category_holders(SEASON_ID)
    assert len(holders) == 1  # nosec B101
    assert holders[0].user_id == ASH  # nosec B101


def test_no_wins_means_no_holder():
    store = make_store()
    store.upsert_deck_type_stat(BROCK, "rock", SEASON_ID, losses=2)

    assert GymBadgeService.reassign_leaders(store, SEASON_ID) == {}  # nosec B101
    assert _holders(store) == {}  # nosec B101


def test_holders_are_per_season():
    store = make_store()
    store.upsert_deck_type_stat(ASH, "fire", SEASON_ID, wins=1)
    store.upsert_deck_type_stat(MISTY, "fire", "season2", wins=1)

    GymBadgeService.reassign_leaders(store, SEASON_ID)
    GymBadgeService.reassign_leaders(store, "season2")

    assert _holders(store) == {"fire_badge": ASH}  # nosec B101
    assert [h.user_id for h in store.list_category_holders("season2")] == [
        MISTY
    ]  # nosec B101


def test_deck_type_without_badge_is_skipped():
    store = make_store(seed_catalog=False)
    store.put_gym_badge(GymBadge(id="fire_badge", badge_type="fire", name="Fire Badge"))
    store.upsert_deck_type_stat(ASH, "fire", SEASON_ID, wins=1)
    store.upsert_deck_type_stat(ASH, "shadow", SEASON_ID, wins=9)

    with patch("pokeleague.badges.services.logger") as mock_logger:
        assigned = GymBadgeService.reassign_leaders(store, SEASON_ID)

    assert assigned == {"fire": ASH}  # nosec B101
    mock_logger.warning.assert_called_once()


def test_stale_reassignment_is_last_write_wins():
    store = make_store()
    store.reassign_category_holder("fire_badge", SEASON_ID, MISTY)
    # A writer that read stale aggregates lands after the fresh one.
    store.reassign_category_holder("fire_badge", SEASON_ID, ASH)

    assert _holders(store) == {"fire_badge": ASH}  # nosec B101


def test_most_fire_wins_takes_fire_badge():
    store = make_store()
    store.upsert_deck_type_stat(MISTY, "fire", SEASON_ID, wins=3)
    store.upsert_deck_type_stat(ASH, "fire", SEASON_ID, wins=5)
    store.upsert_deck_type_stat(BROCK, "fire", SEASON_ID, wins=3)

    GymBadgeService.reassign_leaders(store, SEASON_ID)

    assert _holders(store) == {"fire_badge": ASH}  # nosec B101
