"""
Seed the gym badge catalog and the pokeball ladder, optionally opening a season.

Usage: KEY_PATH=/path/to/key.json python scripts/seed_catalog.py [SEASON_ID [NAME]]
"""

from __future__ import annotations

import os
import sys

import firebase_admin
from firebase_admin import credentials, firestore

from pokeleague.achievements.services import AchievementService
from pokeleague.badges.services import GymBadgeService
from pokeleague.core.constants import SEASON_STATUS_ACTIVE
from pokeleague.season.models import Season
from pokeleague.store import MatchRecordStore


def initialize_app() -> firebase_admin.App:
    """Initializes Firebase from KEY_PATH, or application default credentials."""
    key_path = os.environ.get("KEY_PATH")
    if key_path:
        cred = credentials.Certificate(key_path)
    else:
        cred = credentials.ApplicationDefault()
    return firebase_admin.initialize_app(cred)


def main(argv: list[str]) -> None:
    """Main entry point for the seed script."""
    try:
        app = initialize_app()
        store = MatchRecordStore(firestore.client(app=app))

        print(f"Seeded {GymBadgeService.seed_badges(store)} gym badges.")
        print(f"Seeded {AchievementService.seed_definitions(store)} pokeballs.")

        if argv:
            season_id = argv[0]
            name = argv[1] if len(argv) > 1 else season_id
            if store.get_season(season_id) is None:
                store.put_season(
                    Season(id=season_id, name=name, status=SEASON_STATUS_ACTIVE)
                )
                print(f"Created season '{season_id}'.")
            else:
                print(f"Season '{season_id}' already exists, left unchanged.")
    except Exception as e:
        print(f"\nAn error occurred during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main(sys.argv[1:])
