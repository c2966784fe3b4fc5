"""Data models for the match blueprint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from pokeleague.core.constants import MATCH_STATUS_SCHEDULED
from pokeleague.core.types import FirestoreDocument, SlotDocument


class MatchDocument(FirestoreDocument, total=False):
    """A match document in Firestore."""

    seasonId: str
    player1Id: str
    player2Id: str
    participants: list[str]
    matchDate: str
    matchTime: Optional[str]
    status: str
    player1Slot: SlotDocument
    player2Slot: SlotDocument
    player1DeckType: Optional[str]
    player2DeckType: Optional[str]
    winnerId: Optional[str]
    player1Score: int
    player2Score: int
    completedAt: Any


class ConsensusState:
    """Where a scheduled match stands in the two-party agreement."""

    AWAITING_BOTH = "awaiting_both"
    ONE_SUBMITTED = "one_submitted"
    BOTH_SUBMITTED_INCOMPLETE = "both_submitted_incomplete"
    AGREED = "agreed"
    WINNER_MISMATCH = "winner_mismatch"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class ParticipantSlot:
    """Evidence submitted by one participant."""

    image_url: Optional[str] = None
    damage_points: Optional[int] = None
    winner_selection: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return (
            not self.image_url
            and self.damage_points is None
            and not self.winner_selection
        )

    @property
    def is_complete(self) -> bool:
        """All three fields are populated."""
        return (
            bool(self.image_url)
            and self.damage_points is not None
            and bool(self.winner_selection)
        )

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> ParticipantSlot:
        data = data or {}
        return cls(
            image_url=data.get("imageUrl"),
            damage_points=data.get("damagePoints"),
            winner_selection=data.get("winnerSelection"),
        )

    def to_dict(self) -> SlotDocument:
        return {
            "imageUrl": self.image_url,
            "damagePoints": self.damage_points,
            "winnerSelection": self.winner_selection,
        }


@dataclass
class Match:
    """A head-to-head match between two players within a season."""

    id: str
    season_id: str
    player1_id: str
    player2_id: str
    match_date: str
    match_time: Optional[str] = None
    status: str = MATCH_STATUS_SCHEDULED
    player1_slot: ParticipantSlot = field(default_factory=ParticipantSlot)
    player2_slot: ParticipantSlot = field(default_factory=ParticipantSlot)
    player1_deck_type: Optional[str] = None
    player2_deck_type: Optional[str] = None
    winner_id: Optional[str] = None
    player1_score: int = 0
    player2_score: int = 0

    @property
    def participants(self) -> tuple[str, str]:
        return (self.player1_id, self.player2_id)

    def is_participant(self, user_id: Optional[str]) -> bool:
        return user_id in self.participants

    def slot_prefix(self, participant_id: str) -> str:
        """Return the document field prefix ("player1"/"player2") of a participant."""
        if participant_id == self.player1_id:
            return "player1"
        if participant_id == self.player2_id:
            return "player2"
        raise ValueError(f"{participant_id} is not a participant of match {self.id}")

    def slot_for(self, participant_id: str) -> ParticipantSlot:
        if self.slot_prefix(participant_id) == "player1":
            return self.player1_slot
        return self.player2_slot

    def sort_key(self) -> tuple[str, str]:
        """Chronological key; a missing time sorts before any time on that date."""
        return (self.match_date or "", self.match_time or "")

    @classmethod
    def from_dict(cls, match_id: str, data: dict[str, Any]) -> Match:
        return cls(
            id=match_id,
            season_id=data.get("seasonId", ""),
            player1_id=data.get("player1Id", ""),
            player2_id=data.get("player2Id", ""),
            match_date=data.get("matchDate", ""),
            match_time=data.get("matchTime"),
            status=data.get("status", MATCH_STATUS_SCHEDULED),
            player1_slot=ParticipantSlot.from_dict(data.get("player1Slot")),
            player2_slot=ParticipantSlot.from_dict(data.get("player2Slot")),
            player1_deck_type=data.get("player1DeckType"),
            player2_deck_type=data.get("player2DeckType"),
            winner_id=data.get("winnerId"),
            player1_score=data.get("player1Score", 0),
            player2_score=data.get("player2Score", 0),
        )

    def to_dict(self) -> MatchDocument:
        return {
            "id": self.id,
            "seasonId": self.season_id,
            "player1Id": self.player1_id,
            "player2Id": self.player2_id,
            "participants": list(self.participants),
            "matchDate": self.match_date,
            "matchTime": self.match_time,
            "status": self.status,
            "player1Slot": self.player1_slot.to_dict(),
            "player2Slot": self.player2_slot.to_dict(),
            "player1DeckType": self.player1_deck_type,
            "player2DeckType": self.player2_deck_type,
            "winnerId": self.winner_id,
            "player1Score": self.player1_score,
            "player2Score": self.player2_score,
        }


@dataclass
class SlotSubmission:
    """Dataclass for one participant's evidence submission.

    Fields left as ``None`` keep whatever the slot already holds.
    ``participant_id`` names the slot being written and defaults to the
    acting user.
    """

    participant_id: Optional[str] = None
    image_url: Optional[str] = None
    damage_points: Optional[int] = None
    winner_selection: Optional[str] = None
    deck_type: Optional[str] = None


@dataclass
class StepResult:
    """Outcome of one step of the completion pipeline."""

    name: str
    ok: bool = True
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "ok": self.ok, "error": self.error}


@dataclass
class CompletionOutcome:
    """Dataclass representing a completed match and its recomputation steps."""

    match_id: str
    winner_id: str
    player1_score: int
    player2_score: int
    steps: list[StepResult] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(step.ok for step in self.steps)

    @property
    def failed_steps(self) -> list[StepResult]:
        return [step for step in self.steps if not step.ok]

    def to_dict(self) -> dict[str, Any]:
        return {
            "matchId": self.match_id,
            "winnerId": self.winner_id,
            "player1Score": self.player1_score,
            "player2Score": self.player2_score,
            "succeeded": self.succeeded,
            "steps": [step.to_dict() for step in self.steps],
        }


@dataclass
class SubmissionResult:
    """What a slot submission led to."""

    match: Match
    state: str
    outcome: Optional[CompletionOutcome] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "match": self.match.to_dict(),
            "state": self.state,
            "outcome": self.outcome.to_dict() if self.outcome else None,
        }
