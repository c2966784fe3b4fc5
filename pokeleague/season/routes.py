"""Routes for the season blueprint."""

from __future__ import annotations

from typing import Any

from flask import current_app, jsonify, session

from pokeleague.auth.decorators import login_required
from pokeleague.db import get_store
from pokeleague.match.completion import CompletionService

from . import bp
from .services import SeasonService


@bp.route("/<string:season_id>/standings", methods=["GET"])
@login_required
def standings(season_id: str) -> Any:
    """Season leaderboard."""
    return jsonify(SeasonService.get_standings(get_store(), season_id))


@bp.route("/<string:season_id>/gym-leaders", methods=["GET"])
@login_required
def gym_leaders(season_id: str) -> Any:
    """Current holder of each deck type badge."""
    store = get_store()
    SeasonService.get_season(store, season_id)
    return jsonify(SeasonService.get_gym_leaders(store, season_id))


@bp.route("/<string:season_id>/achievements/<string:user_id>", methods=["GET"])
@login_required
def player_achievements(season_id: str, user_id: str) -> Any:
    """Pokeballs a player earned in the season."""
    store = get_store()
    SeasonService.get_season(store, season_id)
    return jsonify(SeasonService.get_player_achievements(store, user_id, season_id))


@bp.route("/<string:season_id>/close", methods=["POST"])
@login_required(admin_required=True)
def close_season(season_id: str) -> Any:
    season = SeasonService.close_season(get_store(), season_id, is_admin=True)
    current_app.logger.info(f"Season {season_id} closed by {session['user_id']}")
    return jsonify(season.to_dict())


@bp.route("/<string:season_id>/recompute", methods=["POST"])
@login_required(admin_required=True)
def recompute(season_id: str) -> Any:
    """Re-run badge and achievement recomputation for every season player.

    Used to repair derived data after a completion step failed.
    """
    store = get_store()
    SeasonService.get_season(store, season_id)
    user_ids = [entry["id"] for entry in SeasonService.get_standings(store, season_id)]
    user_ids.extend(stat.user_id for stat in store.list_deck_type_stats(season_id))

    steps = CompletionService.retry_recomputation(store, season_id, user_ids)
    failed = [step.name for step in steps if not step.ok]
    if failed:
        current_app.logger.warning(
            f"Recompute of season {season_id} had failed steps: {', '.join(failed)}"
        )
    return jsonify({"seasonId": season_id, "steps": [step.to_dict() for step in steps]})
