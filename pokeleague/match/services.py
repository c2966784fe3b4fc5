"""Service layer for match evidence, consensus and completion."""

from __future__ import annotations

import datetime
import logging
import threading
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Optional

from pokeleague.badges.models import normalize_deck_type
from pokeleague.core.constants import (
    LOSER_SCORE,
    MATCH_STATUS_CANCELLED,
    MATCH_STATUS_COMPLETED,
    MATCH_STATUS_SCHEDULED,
    WINNER_SCORE,
)
from pokeleague.errors import (
    AuthorizationError,
    IncompleteEvidenceError,
    MatchStateError,
    NotFoundError,
    ValidationError,
    WinnerMismatchError,
)

from .completion import CompletionService
from .models import (
    CompletionOutcome,
    ConsensusState,
    Match,
    ParticipantSlot,
    SlotSubmission,
    SubmissionResult,
)

if TYPE_CHECKING:
    from pokeleague.store import MatchRecordStore

logger = logging.getLogger(__name__)

_match_locks: dict[str, threading.RLock] = {}
_match_locks_guard = threading.Lock()


def _match_lock(match_id: str) -> threading.RLock:
    """Return the lock serialising slot writes and completion of one match."""
    with _match_locks_guard:
        lock = _match_locks.get(match_id)
        if lock is None:
            lock = _match_locks[match_id] = threading.RLock()
        return lock


def _release_match_lock(match_id: str) -> None:
    """Forget the lock of a match that can no longer change."""
    with _match_locks_guard:
        _match_locks.pop(match_id, None)


def evaluate_consensus(match: Match) -> str:
    """Classify a match by the evidence both players submitted so far."""
    if match.status == MATCH_STATUS_COMPLETED:
        return ConsensusState.COMPLETED
    if match.status == MATCH_STATUS_CANCELLED:
        return ConsensusState.CANCELLED

    slot1, slot2 = match.player1_slot, match.player2_slot
    if slot1.is_complete and slot2.is_complete:
        if slot1.winner_selection == slot2.winner_selection:
            return ConsensusState.AGREED
        return ConsensusState.WINNER_MISMATCH

    submitted = sum(1 for slot in (slot1, slot2) if not slot.is_empty)
    if submitted == 2:
        return ConsensusState.BOTH_SUBMITTED_INCOMPLETE
    if submitted == 1:
        return ConsensusState.ONE_SUBMITTED
    return ConsensusState.AWAITING_BOTH


class MatchService:
    """Service class for match-related operations."""

    @staticmethod
    def get_match(store: MatchRecordStore, match_id: str) -> Match:
        """Fetch a single match or raise NotFoundError."""
        match = store.get_match(match_id)
        if match is None:
            _release_match_lock(match_id)
            raise NotFoundError("Match not found.")
        return match

    @staticmethod
    def _ensure_open(store: MatchRecordStore, match: Match) -> None:
        """Refuse changes to finished matches and to matches of closed seasons."""
        if match.status != MATCH_STATUS_SCHEDULED:
            _release_match_lock(match.id)
            raise MatchStateError(f"This match is already {match.status}.")
        season = store.get_season(match.season_id)
        if season is not None and season.is_closed:
            raise MatchStateError("This season is closed; its matches are final.")

    @staticmethod
    def _validate_submission(match: Match, submission: SlotSubmission) -> None:
        """Reject malformed evidence before anything is written."""
        damage = submission.damage_points
        if damage is not None:
            if isinstance(damage, bool) or not isinstance(damage, int):
                raise ValidationError("Damage points must be a whole number.")
            if damage < 0:
                raise ValidationError("Damage points cannot be negative.")

        winner = submission.winner_selection
        if winner is not None and not match.is_participant(winner):
            raise ValidationError("The winner must be one of the two players.")

        image_url = submission.image_url
        if image_url is not None and (
            not isinstance(image_url, str) or not image_url.strip()
        ):
            raise ValidationError("The result screenshot link is invalid.")

        deck_type = submission.deck_type
        if deck_type is not None and not isinstance(deck_type, str):
            raise ValidationError("Deck type must be text.")

    @staticmethod
    def _authorize(
        match: Match, acting_user_id: str, participant_id: str, is_admin: bool
    ) -> None:
        if is_admin:
            if not match.is_participant(participant_id):
                raise ValidationError("Choose which player's result to save.")
            return
        if not match.is_participant(acting_user_id):
            raise AuthorizationError("Only the players of this match can submit results.")
        if participant_id != acting_user_id:
            raise AuthorizationError("You can only submit your own result.")

    @staticmethod
    def submit_evidence(
        store: MatchRecordStore,
        match_id: str,
        acting_user_id: str,
        submission: SlotSubmission,
        is_admin: bool = False,
    ) -> SubmissionResult:
        """Save one participant's evidence and complete the match on agreement.

        Only the fields present on the submission are written. When both
        slots are complete and name the same winner the match is completed
        and the recomputation pipeline runs before this returns.
        """
        participant_id = submission.participant_id or acting_user_id

        with _match_lock(match_id):
            match = MatchService.get_match(store, match_id)
            MatchService._authorize(match, acting_user_id, participant_id, is_admin)
            MatchService._validate_submission(match, submission)
            MatchService._ensure_open(store, match)

            prefix = match.slot_prefix(participant_id)
            current = match.slot_for(participant_id)
            slot = ParticipantSlot(
                image_url=(
                    submission.image_url.strip()
                    if submission.image_url is not None
                    else current.image_url
                ),
                damage_points=(
                    submission.damage_points
                    if submission.damage_points is not None
                    else current.damage_points
                ),
                winner_selection=(
                    submission.winner_selection
                    if submission.winner_selection is not None
                    else current.winner_selection
                ),
            )
            deck_type = normalize_deck_type(submission.deck_type)
            store.update_match_slot(match.id, prefix, slot, deck_type)

            changes: dict[str, Any] = {f"{prefix}_slot": slot}
            if deck_type is not None:
                changes[f"{prefix}_deck_type"] = deck_type
            match = replace(match, **changes)

            state = evaluate_consensus(match)
            if state == ConsensusState.WINNER_MISMATCH:
                logger.info(
                    f"Match {match.id}: players disagree on the winner "
                    f"({match.player1_slot.winner_selection} vs "
                    f"{match.player2_slot.winner_selection})"
                )
                return SubmissionResult(match=match, state=state)
            if state != ConsensusState.AGREED:
                return SubmissionResult(match=match, state=state)

            outcome = MatchService.complete_match_and_recompute(store, match.id)
            return SubmissionResult(
                match=MatchService.get_match(store, match.id),
                state=ConsensusState.COMPLETED,
                outcome=outcome,
            )

    @staticmethod
    def complete_match_and_recompute(
        store: MatchRecordStore,
        match_id: str,
        acting_user_id: Optional[str] = None,
        is_admin: bool = False,
    ) -> CompletionOutcome:
        """Complete an agreed match and update every standing derived from it.

        When an acting user is given they must be a player of the match or
        an administrator.
        """
        with _match_lock(match_id):
            match = MatchService.get_match(store, match_id)
            if (
                acting_user_id is not None
                and not is_admin
                and not match.is_participant(acting_user_id)
            ):
                raise AuthorizationError(
                    "Only the players of this match can complete it."
                )
            MatchService._ensure_open(store, match)

            state = evaluate_consensus(match)
            if state == ConsensusState.WINNER_MISMATCH:
                raise WinnerMismatchError(
                    match.player1_slot.winner_selection,
                    match.player2_slot.winner_selection,
                )
            if state != ConsensusState.AGREED:
                raise IncompleteEvidenceError()

            winner_id = match.player1_slot.winner_selection
            if winner_id == match.player1_id:
                scores = (WINNER_SCORE, LOSER_SCORE)
            elif winner_id == match.player2_id:
                scores = (LOSER_SCORE, WINNER_SCORE)
            else:
                raise ValidationError("The winner must be one of the two players.")

            store.transition_match_to_completed(match.id, winner_id, scores)
            _release_match_lock(match.id)
            logger.info(f"Match {match.id} completed, winner {winner_id}")

            steps = CompletionService.on_match_completed(
                store,
                match.id,
                winner_id,
                match.player1_id,
                match.player2_id,
                match.player1_deck_type,
                match.player2_deck_type,
                match.season_id,
            )
            return CompletionOutcome(
                match_id=match.id,
                winner_id=winner_id,
                player1_score=scores[0],
                player2_score=scores[1],
                steps=steps,
            )

    @staticmethod
    def cancel_match(
        store: MatchRecordStore, match_id: str, is_admin: bool = False
    ) -> Match:
        """Administratively cancel a scheduled match."""
        if not is_admin:
            raise AuthorizationError("Only an administrator can cancel a match.")
        with _match_lock(match_id):
            match = MatchService.get_match(store, match_id)
            MatchService._ensure_open(store, match)
            store.set_match_status(match.id, MATCH_STATUS_CANCELLED)
            _release_match_lock(match.id)
            return replace(match, status=MATCH_STATUS_CANCELLED)

    @staticmethod
    def schedule_match(  # noqa: PLR0913
        store: MatchRecordStore,
        season_id: str,
        player1_id: str,
        player2_id: str,
        match_date: str,
        match_time: Optional[str] = None,
    ) -> Match:
        """Create a scheduled match between two different players."""
        if not player1_id or not player2_id:
            raise ValidationError("Both players are required.")
        if player1_id == player2_id:
            raise ValidationError("A player can't play against themselves.")
        try:
            datetime.datetime.strptime(match_date, "%Y-%m-%d")
            if match_time:
                datetime.datetime.strptime(match_time, "%H:%M")
        except (TypeError, ValueError) as e:
            raise ValidationError("Invalid match date or time.") from e

        season = store.get_season(season_id)
        if season is None:
            raise NotFoundError("Season not found.")
        if season.is_closed:
            raise MatchStateError("This season is closed.")

        return store.create_match(
            season_id, player1_id, player2_id, match_date, match_time or None
        )
