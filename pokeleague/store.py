"""Firestore-backed repository for matches and everything derived from them."""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError

from pokeleague.achievements.models import AchievementDefinition, PlayerAchievement
from pokeleague.badges.models import BadgeHolder, GymBadge
from pokeleague.core.constants import (
    ACHIEVEMENTS_COLLECTION,
    DECK_TYPE_STATS_COLLECTION,
    GYM_BADGES_COLLECTION,
    MATCH_STATUS_COMPLETED,
    MATCH_STATUS_SCHEDULED,
    MATCHES_COLLECTION,
    PLAYER_ACHIEVEMENTS_COLLECTION,
    PLAYER_BADGES_COLLECTION,
    SEASONS_COLLECTION,
)
from pokeleague.errors import MatchStateError, NotFoundError, PersistenceError
from pokeleague.match.models import Match, ParticipantSlot
from pokeleague.season.models import Season
from pokeleague.stats.models import DeckTypeStat

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class MatchRecordStore:
    """Repository over the Firestore collections used by the league.

    Every read returns plain dataclasses and every Firestore failure is
    re-raised as :class:`PersistenceError`.
    """

    def __init__(self, db: Client) -> None:
        self.db = db

    @contextmanager
    def _persistence(self, action: str) -> Iterator[None]:
        try:
            yield
        except GoogleAPIError as e:
            logger.error(f"Firestore error while trying to {action}: {e}")
            raise PersistenceError(f"Could not {action}.") from e

    @staticmethod
    def _existing(snapshots: Any) -> Iterator[tuple[str, dict[str, Any]]]:
        """Yield (id, data) pairs for snapshots that actually exist."""
        for snap in snapshots:
            if not snap.exists:
                continue
            yield snap.id, snap.to_dict() or {}

    def _where(self, collection: str, **equals: Any) -> Any:
        query = self.db.collection(collection)
        for field_name, value in equals.items():
            query = query.where(filter=firestore.FieldFilter(field_name, "==", value))
        return query

    # Seasons

    def get_season(self, season_id: str) -> Optional[Season]:
        with self._persistence("load the season"):
            snap = self.db.collection(SEASONS_COLLECTION).document(season_id).get()
        if not snap.exists:
            return None
        return Season.from_dict(season_id, snap.to_dict() or {})

    def put_season(self, season: Season) -> None:
        data = {"name": season.name, "status": season.status}
        with self._persistence("save the season"):
            self.db.collection(SEASONS_COLLECTION).document(season.id).set(data)

    def set_season_status(self, season_id: str, status: str) -> None:
        with self._persistence("update the season"):
            ref = self.db.collection(SEASONS_COLLECTION).document(season_id)
            if not ref.get().exists:
                raise NotFoundError("Season not found.")
            ref.update({"status": status, "updatedAt": _now()})

    # Matches

    def create_match(  # noqa: PLR0913
        self,
        season_id: str,
        player1_id: str,
        player2_id: str,
        match_date: str,
        match_time: Optional[str] = None,
        player1_deck_type: Optional[str] = None,
        player2_deck_type: Optional[str] = None,
    ) -> Match:
        with self._persistence("schedule the match"):
            ref = self.db.collection(MATCHES_COLLECTION).document()
            match = Match(
                id=ref.id,
                season_id=season_id,
                player1_id=player1_id,
                player2_id=player2_id,
                match_date=match_date,
                match_time=match_time,
                player1_deck_type=player1_deck_type,
                player2_deck_type=player2_deck_type,
            )
            data = dict(match.to_dict())
            data.pop("id")
            data["createdAt"] = _now()
            ref.set(data)
        return match

    def get_match(self, match_id: str) -> Optional[Match]:
        with self._persistence("load the match"):
            snap = self.db.collection(MATCHES_COLLECTION).document(match_id).get()
        if not snap.exists:
            return None
        return Match.from_dict(match_id, snap.to_dict() or {})

    def update_match_slot(
        self,
        match_id: str,
        slot_prefix: str,
        slot: ParticipantSlot,
        deck_type: Optional[str] = None,
    ) -> None:
        """Overwrite one participant slot, and its deck type when given."""
        updates: dict[str, Any] = {
            f"{slot_prefix}Slot": slot.to_dict(),
            "updatedAt": _now(),
        }
        if deck_type is not None:
            updates[f"{slot_prefix}DeckType"] = deck_type
        with self._persistence("save the submission"):
            self.db.collection(MATCHES_COLLECTION).document(match_id).update(updates)

    def transition_match_to_completed(
        self, match_id: str, winner_id: str, scores: tuple[int, int]
    ) -> None:
        """Mark a scheduled match completed; refuses any other starting state."""
        with self._persistence("complete the match"):
            ref = self.db.collection(MATCHES_COLLECTION).document(match_id)
            snap = ref.get()
            if not snap.exists:
                raise NotFoundError("Match not found.")
            status = (snap.to_dict() or {}).get("status")
            if status != MATCH_STATUS_SCHEDULED:
                raise MatchStateError(f"Match is already {status}.")
            ref.update(
                {
                    "status": MATCH_STATUS_COMPLETED,
                    "winnerId": winner_id,
                    "player1Score": scores[0],
                    "player2Score": scores[1],
                    "completedAt": _now(),
                }
            )

    def set_match_status(self, match_id: str, status: str) -> None:
        with self._persistence("update the match"):
            self.db.collection(MATCHES_COLLECTION).document(match_id).update(
                {"status": status, "updatedAt": _now()}
            )

    def list_completed_matches(
        self,
        season_id: str,
        user_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Match]:
        """Completed matches of a season, most recent first (date, then time)."""
        query = self._where(
            MATCHES_COLLECTION, seasonId=season_id, status=MATCH_STATUS_COMPLETED
        )
        with self._persistence("load completed matches"):
            matches = [
                Match.from_dict(doc_id, data)
                for doc_id, data in self._existing(query.stream())
            ]
        if user_id is not None:
            matches = [m for m in matches if m.is_participant(user_id)]
        matches.sort(key=Match.sort_key, reverse=True)
        if limit is not None:
            matches = matches[:limit]
        return matches

    def list_scheduled_matches(self, user_id: str) -> list[Match]:
        query = self._where(MATCHES_COLLECTION, status=MATCH_STATUS_SCHEDULED)
        with self._persistence("load scheduled matches"):
            matches = [
                Match.from_dict(doc_id, data)
                for doc_id, data in self._existing(query.stream())
            ]
        matches = [m for m in matches if m.is_participant(user_id)]
        matches.sort(key=Match.sort_key)
        return matches

    # Deck type statistics

    def upsert_deck_type_stat(
        self,
        user_id: str,
        deck_type: str,
        season_id: str,
        wins: int = 0,
        losses: int = 0,
    ) -> DeckTypeStat:
        """Add a win/loss delta to an aggregate, creating it on first use."""
        doc_id = f"{season_id}_{user_id}_{deck_type}"
        with self._persistence("update deck type statistics"):
            ref = self.db.collection(DECK_TYPE_STATS_COLLECTION).document(doc_id)
            snap = ref.get()
            if snap.exists:
                stat = DeckTypeStat.from_dict(snap.to_dict() or {})
                stat.wins += wins
                stat.losses += losses
                stat.total_games += wins + losses
                ref.update(
                    {
                        "wins": stat.wins,
                        "losses": stat.losses,
                        "totalGames": stat.total_games,
                        "updatedAt": _now(),
                    }
                )
            else:
                stat = DeckTypeStat(
                    user_id=user_id,
                    deck_type=deck_type,
                    season_id=season_id,
                    wins=wins,
                    losses=losses,
                    total_games=wins + losses,
                )
                ref.set({**stat.to_dict(), "updatedAt": _now()})
        return stat

    def list_deck_type_stats(
        self, season_id: str, user_id: Optional[str] = None
    ) -> list[DeckTypeStat]:
        filters: dict[str, Any] = {"seasonId": season_id}
        if user_id is not None:
            filters["userId"] = user_id
        query = self._where(DECK_TYPE_STATS_COLLECTION, **filters)
        with self._persistence("load deck type statistics"):
            return [
                DeckTypeStat.from_dict(data)
                for _, data in self._existing(query.stream())
            ]

    # Gym badges

    def put_gym_badge(self, badge: GymBadge) -> None:
        with self._persistence("save the gym badge"):
            self.db.collection(GYM_BADGES_COLLECTION).document(badge.id).set(
                badge.to_dict()
            )

    def list_gym_badges(self) -> list[GymBadge]:
        with self._persistence("load gym badges"):
            snapshots = self.db.collection(GYM_BADGES_COLLECTION).stream()
            return [
                GymBadge.from_dict(doc_id, data)
                for doc_id, data in self._existing(snapshots)
            ]

    def reassign_category_holder(
        self, badge_id: str, season_id: str, new_user_id: str
    ) -> None:
        """Replace the season's holder of a badge (delete, then insert)."""
        ref = self.db.collection(PLAYER_BADGES_COLLECTION).document(
            f"{badge_id}_{season_id}"
        )
        with self._persistence("reassign the gym badge"):
            ref.delete()
            ref.set(
                {
                    "userId": new_user_id,
                    "badgeId": badge_id,
                    "seasonId": season_id,
                    "earnedAt": _now(),
                }
            )

    def list_category_holders(self, season_id: str) -> list[BadgeHolder]:
        query = self._where(PLAYER_BADGES_COLLECTION, seasonId=season_id)
        with self._persistence("load gym badge holders"):
            return [
                BadgeHolder.from_dict(data)
                for _, data in self._existing(query.stream())
            ]

    # Achievements

    def put_achievement_definition(self, definition: AchievementDefinition) -> None:
        with self._persistence("save the achievement"):
            self.db.collection(ACHIEVEMENTS_COLLECTION).document(definition.id).set(
                definition.to_dict()
            )

    def list_achievement_definitions(self) -> list[AchievementDefinition]:
        """The achievement catalog, highest priority first."""
        with self._persistence("load achievements"):
            snapshots = self.db.collection(ACHIEVEMENTS_COLLECTION).stream()
            definitions = [
                AchievementDefinition.from_dict(doc_id, data)
                for doc_id, data in self._existing(snapshots)
            ]
        definitions.sort(key=lambda d: d.priority, reverse=True)
        return definitions

    def upsert_player_achievement(
        self,
        user_id: str,
        achievement_id: str,
        season_id: str,
        earned_at: Optional[datetime.datetime] = None,
    ) -> bool:
        """Record an earned achievement; returns True when it is new."""
        ref = self.db.collection(PLAYER_ACHIEVEMENTS_COLLECTION).document(
            f"{user_id}_{achievement_id}_{season_id}"
        )
        with self._persistence("save the achievement"):
            if ref.get().exists:
                return False
            ref.set(
                {
                    "userId": user_id,
                    "achievementId": achievement_id,
                    "seasonId": season_id,
                    "earnedAt": earned_at or _now(),
                    "isCurrent": False,
                }
            )
        return True

    def set_current_achievement_flags(
        self, user_id: str, season_id: str, current_achievement_id: Optional[str]
    ) -> None:
        """Flag one achievement as current and clear every other one."""
        query = self._where(
            PLAYER_ACHIEVEMENTS_COLLECTION, userId=user_id, seasonId=season_id
        )
        collection = self.db.collection(PLAYER_ACHIEVEMENTS_COLLECTION)
        with self._persistence("update the current achievement"):
            for doc_id, data in list(self._existing(query.stream())):
                is_current = data.get("achievementId") == current_achievement_id
                if bool(data.get("isCurrent")) != is_current:
                    collection.document(doc_id).update({"isCurrent": is_current})

    def list_player_achievements(
        self, user_id: str, season_id: str
    ) -> list[PlayerAchievement]:
        query = self._where(
            PLAYER_ACHIEVEMENTS_COLLECTION, userId=user_id, seasonId=season_id
        )
        with self._persistence("load player achievements"):
            return [
                PlayerAchievement.from_dict(data)
                for _, data in self._existing(query.stream())
            ]
