"""Common utilities for tests."""

from __future__ import annotations

from typing import Any, Optional
from unittest.mock import MagicMock, patch

import pytest
from mockfirestore import CollectionReference, MockFirestore, Query
from mockfirestore.document import DocumentReference

from pokeleague import create_app
from pokeleague.achievements.services import AchievementService
from pokeleague.badges.services import GymBadgeService
from pokeleague.season.models import Season
from pokeleague.store import MatchRecordStore

SEASON_ID = "season1"
ASH = "ash"
MISTY = "misty"
BROCK = "brock"


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore to support FieldFilter and equality."""

    def collection_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(CollectionReference, "_where"):
        CollectionReference._where = CollectionReference.where
        CollectionReference.where = collection_where

    def query_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(Query, "_where"):
        Query._where = Query.where
        Query.where = query_where

    def doc_ref_eq(self: Any, other: Any) -> bool:
        if not isinstance(other, DocumentReference):
            return False
        return self._path == other._path

    if not hasattr(DocumentReference, "_orig_eq"):
        DocumentReference._orig_eq = DocumentReference.__eq__
        DocumentReference.__eq__ = doc_ref_eq
        DocumentReference.__hash__ = lambda self: hash(tuple(self._path))


def make_store(seed_catalog: bool = True) -> MatchRecordStore:
    """Build a store over an in-memory Firestore with an open season."""
    patch_mockfirestore()
    store = MatchRecordStore(MockFirestore())
    store.put_season(Season(id=SEASON_ID, name="Season One"))
    if seed_catalog:
        GymBadgeService.seed_badges(store)
        AchievementService.seed_definitions(store)
    return store


def seed_completed_match(  # noqa: PLR0913
    store: MatchRecordStore,
    match_id: str,
    winner_id: str,
    loser_id: str,
    match_date: str,
    match_time: Optional[str] = None,
    season_id: str = SEASON_ID,
) -> None:
    """Write a completed match directly, bypassing the completion pipeline."""
    store.db.collection("matches").document(match_id).set(
        {
            "seasonId": season_id,
            "player1Id": winner_id,
            "player2Id": loser_id,
            "participants": [winner_id, loser_id],
            "matchDate": match_date,
            "matchTime": match_time,
            "status": "completed",
            "winnerId": winner_id,
            "player1Score": 1,
            "player2Score": 0,
        }
    )


@pytest.fixture
def store() -> MatchRecordStore:
    return make_store()


@pytest.fixture
def app(store):
    """App wired to the in-memory store."""
    mock_firestore = MagicMock()
    mock_firestore.client.return_value = store.db
    with patch("pokeleague.db.firestore", new=mock_firestore):
        app = create_app(
            {"TESTING": True, "WTF_CSRF_ENABLED": False, "SECRET_KEY": "test"}
        )
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


def login(client: Any, user_id: str, is_admin: bool = False) -> None:
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["is_admin"] = is_admin
