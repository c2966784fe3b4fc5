"""Per-request access to the match record store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from firebase_admin import firestore
from flask import g

if TYPE_CHECKING:
    from flask import Flask

    from .store import MatchRecordStore


def get_store() -> MatchRecordStore:
    """Return the store for the current request, creating it on first use."""
    if "store" not in g:
        # Imported here since the store depends on the blueprint packages' models.
        from .store import MatchRecordStore

        g.store = MatchRecordStore(firestore.client())
    return g.store


def close_store(e=None):
    g.pop("store", None)


def init_app(app: Flask) -> None:
    app.teardown_appcontext(close_store)
