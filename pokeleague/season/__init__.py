"""The season blueprint."""

from flask import Blueprint

bp = Blueprint("season", __name__, url_prefix="/season")

from . import routes  # noqa: E402

__all__ = ["routes"]
