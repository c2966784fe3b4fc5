"""Routes for the match blueprint."""

from __future__ import annotations

from typing import Any

from flask import current_app, jsonify, session

from pokeleague.auth.decorators import login_required
from pokeleague.db import get_store
from pokeleague.errors import ValidationError
from pokeleague.season.services import SeasonService

from . import bp
from .forms import EvidenceForm
from .models import ConsensusState, SlotSubmission
from .services import MatchService, evaluate_consensus


@bp.route("/pending", methods=["GET"])
@login_required
def pending_matches() -> Any:
    """List the current user's matches that still need their result."""
    matches = SeasonService.get_pending_matches(get_store(), session["user_id"])
    return jsonify(
        [
            {**match.to_dict(), "state": evaluate_consensus(match)}
            for match in matches
        ]
    )


@bp.route("/<string:match_id>", methods=["GET"])
@login_required
def view_match(match_id: str) -> Any:
    """Show a match and where its consensus stands."""
    match = MatchService.get_match(get_store(), match_id)
    return jsonify({"match": match.to_dict(), "state": evaluate_consensus(match)})


@bp.route("/<string:match_id>/evidence", methods=["POST"])
@login_required
def submit_evidence(match_id: str) -> Any:
    """Save the current user's screenshot, damage points and winner pick."""
    form = EvidenceForm()
    if not form.validate_on_submit():
        raise ValidationError(form.first_error())

    submission = SlotSubmission(
        participant_id=form.participant_id.data or None,
        image_url=form.image_url.data or None,
        damage_points=form.damage_points.data,
        winner_selection=form.winner_id.data or None,
        deck_type=form.deck_type.data or None,
    )
    result = MatchService.submit_evidence(
        get_store(),
        match_id,
        session["user_id"],
        submission,
        is_admin=bool(session.get("is_admin")),
    )

    if result.state == ConsensusState.WINNER_MISMATCH:
        body = result.to_dict()
        body["error"] = (
            "Your submission was saved, but the players picked different winners. "
            "One of you must correct your result before the match can complete."
        )
        return jsonify(body), 409

    if result.outcome is not None and not result.outcome.succeeded:
        failed = ", ".join(step.name for step in result.outcome.failed_steps)
        current_app.logger.warning(
            f"Match {match_id} completed but recomputation failed: {failed}"
        )
    return jsonify(result.to_dict())


@bp.route("/<string:match_id>/complete", methods=["POST"])
@login_required
def complete_match(match_id: str) -> Any:
    """Try to complete a match whose players both submitted their results."""
    outcome = MatchService.complete_match_and_recompute(
        get_store(),
        match_id,
        acting_user_id=session["user_id"],
        is_admin=bool(session.get("is_admin")),
    )
    return jsonify(outcome.to_dict())


@bp.route("/<string:match_id>/cancel", methods=["POST"])
@login_required(admin_required=True)
def cancel_match(match_id: str) -> Any:
    """Cancel a scheduled match."""
    match = MatchService.cancel_match(get_store(), match_id, is_admin=True)
    current_app.logger.info(f"Match {match_id} cancelled by {session['user_id']}")
    return jsonify({"match": match.to_dict()})
