"""Tests for the Firestore-backed match record store."""

from __future__ import annotations

import unittest
from unittest.mock import MagicMock

from google.api_core.exceptions import ServiceUnavailable

from pokeleague.errors import MatchStateError, NotFoundError, PersistenceError
from pokeleague.store import MatchRecordStore
from tests.conftest import ASH, BROCK, MISTY, SEASON_ID, make_store, seed_completed_match


class TestMatchQueries(unittest.TestCase):
    def setUp(self) -> None:
        self.store = make_store(seed_catalog=False)

    def test_completed_matches_newest_first_with_limit(self) -> None:
        seed_completed_match(self.store, "m1", ASH, MISTY, "2024-05-01", "10:00")
        seed_completed_match(self.store, "m2", MISTY, ASH, "2024-05-03")
        seed_completed_match(self.store, "m3", ASH, BROCK, "2024-05-01", "21:00")
        seed_completed_match(self.store, "m4", MISTY, BROCK, "2024-05-04")

        matches = self.store.list_completed_matches(SEASON_ID)
        self.assertEqual([m.id for m in matches], ["m4", "m2", "m3", "m1"])

        mine = self.store.list_completed_matches(SEASON_ID, user_id=ASH, limit=2)
        self.assertEqual([m.id for m in mine], ["m2", "m3"])

    def test_completed_matches_ignore_other_states_and_seasons(self) -> None:
        seed_completed_match(self.store, "m1", ASH, MISTY, "2024-05-01")
        seed_completed_match(self.store, "m2", ASH, MISTY, "2024-05-01", season_id="s2")
        self.store.create_match(SEASON_ID, ASH, MISTY, "2024-05-02")
        # Looking up a missing id must not surface as a match.
        self.store.get_match("ghost")

        matches = self.store.list_completed_matches(SEASON_ID)
        self.assertEqual([m.id for m in matches], ["m1"])

    def test_transition_only_from_scheduled(self) -> None:
        match = self.store.create_match(SEASON_ID, ASH, MISTY, "2024-05-02")

        self.store.transition_match_to_completed(match.id, MISTY, (0, 1))
        stored = self.store.get_match(match.id)
        self.assertEqual(stored.status, "completed")
        self.assertEqual(stored.winner_id, MISTY)
        self.assertEqual((stored.player1_score, stored.player2_score), (0, 1))

        with self.assertRaises(MatchStateError):
            self.store.transition_match_to_completed(match.id, ASH, (1, 0))
        self.assertEqual(self.store.get_match(match.id).winner_id, MISTY)

        with self.assertRaises(NotFoundError):
            self.store.transition_match_to_completed("missing", ASH, (1, 0))

    def test_set_season_status_unknown(self) -> None:
        with self.assertRaises(NotFoundError):
            self.store.set_season_status("missing", "completed")


class TestAchievementRows(unittest.TestCase):
    def setUp(self) -> None:
        self.store = make_store(seed_catalog=False)

    def test_upsert_is_insert_once(self) -> None:
        self.assertTrue(self.store.upsert_player_achievement(ASH, "pokeball", SEASON_ID))
        self.assertFalse(
            self.store.upsert_player_achievement(ASH, "pokeball", SEASON_ID)
        )
        rows = self.store.list_player_achievements(ASH, SEASON_ID)
        self.assertEqual(len(rows), 1)
        self.assertFalse(rows[0].is_current)

    def test_current_flags_only_touch_one_player_and_season(self) -> None:
        for achievement_id in ("pokeball", "great_ball"):
            self.store.upsert_player_achievement(ASH, achievement_id, SEASON_ID)
        self.store.upsert_player_achievement(ASH, "pokeball", "s2")
        self.store.upsert_player_achievement(MISTY, "pokeball", SEASON_ID)
        self.store.set_current_achievement_flags(MISTY, SEASON_ID, "pokeball")

        self.store.set_current_achievement_flags(ASH, SEASON_ID, "great_ball")

        flags = {
            a.achievement_id: a.is_current
            for a in self.store.list_player_achievements(ASH, SEASON_ID)
        }
        self.assertEqual(flags, {"pokeball": False, "great_ball": True})
        self.assertFalse(self.store.list_player_achievements(ASH, "s2")[0].is_current)
        self.assertTrue(
            self.store.list_player_achievements(MISTY, SEASON_ID)[0].is_current
        )


class TestPersistenceErrors(unittest.TestCase):
    def test_firestore_failures_become_persistence_errors(self) -> None:
        db = MagicMock()
        db.collection.return_value.document.return_value.get.side_effect = (
            ServiceUnavailable("firestore is down")
        )
        store = MatchRecordStore(db)

        with self.assertRaises(PersistenceError) as ctx:
            store.get_match("m1")
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertNotIn("firestore is down", ctx.exception.message)
