"""Preference and history endpoints.

The client owns these records and keeps them in its own storage. Each PUT
takes the client's current record, validates it, applies the history cap
and cooked-age pruning, and returns what the client should store. Nothing is
written to the server or to a cookie.
"""

from __future__ import annotations

from typing import Any, Callable

from flask import Blueprint, jsonify
from pydantic import TypeAdapter, ValidationError

from fridgefeast_backend.api.deps import get_json_body, validation_error_response
from fridgefeast_backend.models import (
    Filters,
    HistoryEntry,
    ProfilePrefs,
    Sentiment,
)
from fridgefeast_backend.services.preferences import (
    cap_history,
    now_ms,
    prune_cooked,
)

bp = Blueprint("prefs", __name__, url_prefix="/api/prefs")

_HISTORY = TypeAdapter(list[HistoryEntry])
_FEEDBACK = TypeAdapter(dict[str, Sentiment])


def _validated_body(adapter: Callable[[Any], Any]):
    """Return ``(value, None)`` or ``(None, error_response)``."""

    try:
        return adapter(get_json_body()), None
    except ValidationError as exc:
        return None, validation_error_response(exc)
    except ValueError as exc:
        return None, (jsonify(error=str(exc)), 400)


def _dump_history(entries: list[HistoryEntry]) -> list[dict[str, Any]]:
    return [entry.model_dump() for entry in entries]


@bp.put("/profile")
def put_profile():
    profile, error = _validated_body(ProfilePrefs.model_validate)
    if error is not None:
        return error
    return jsonify(profile.model_dump(by_alias=True, exclude_none=True))


@bp.put("/filters")
def put_filters():
    filters, error = _validated_body(Filters.model_validate)
    if error is not None:
        return error
    return jsonify(filters.to_payload())


@bp.put("/saved")
def put_saved():
    """Normalize the saved list; only the newest 200 entries are kept."""

    entries, error = _validated_body(_HISTORY.validate_python)
    if error is not None:
        return error
    return jsonify(_dump_history(cap_history(entries)))


@bp.put("/cooked")
def put_cooked():
    """Normalize cooked history; entries older than 90 days are dropped."""

    entries, error = _validated_body(_HISTORY.validate_python)
    if error is not None:
        return error
    return jsonify(_dump_history(prune_cooked(entries, now_ms())))


@bp.put("/feedback")
def put_feedback():
    feedback, error = _validated_body(_FEEDBACK.validate_python)
    if error is not None:
        return error
    return jsonify(feedback)
