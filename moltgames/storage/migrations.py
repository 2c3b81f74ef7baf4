"""
Migrations - Bring a loaded database document to the current shape.

Applied once at load time. After migration every session record has the
steady-state shape:

    {id, game_type, status, seats, state, result, created_at, updated_at}

Version history:
    (none) -> 1   first lowdb document: {"games": {...}, "leaderboards": {...}}
                  with camelCase records, optional "leaderboard" (single
                  chess board) and chess records carrying fen/history
                  instead of state
    1 -> 2        snake_case session records under "sessions"
"""

from __future__ import annotations
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

CURRENT_VERSION = 2
LEGACY_GAME_TYPE = "chess"


def empty_document() -> dict[str, Any]:
    return {"version": CURRENT_VERSION, "sessions": {}, "leaderboards": {}}


def migrate(document: dict[str, Any], default_game_type: str = LEGACY_GAME_TYPE) -> dict[str, Any]:
    """
    Upgrade a raw document in place and return it.

    Unknown future versions are left untouched.
    """
    version = document.get("version", 1)
    if version > CURRENT_VERSION:
        logger.warning("Database version %s is newer than %s", version, CURRENT_VERSION)
        return document

    while version < CURRENT_VERSION:
        step = _STEPS[version]
        step(document, default_game_type)
        version += 1
        document["version"] = version
        logger.info("Migrated database to version %d", version)

    document.setdefault("sessions", {})
    document.setdefault("leaderboards", {})
    return document


def _v1_to_v2(document: dict[str, Any], default_game_type: str):
    games = document.pop("games", None) or {}
    sessions = document.setdefault("sessions", {})
    for session_id, record in games.items():
        sessions[session_id] = _normalize_session(session_id, record, default_game_type)

    leaderboards = document.setdefault("leaderboards", {})
    legacy_board = document.pop("leaderboard", None)
    if legacy_board and not leaderboards.get(LEGACY_GAME_TYPE):
        leaderboards[LEGACY_GAME_TYPE] = legacy_board


def _normalize_session(session_id: str, record: dict[str, Any], default_game_type: str) -> dict[str, Any]:
    state = record.get("state")
    if not state and record.get("fen"):
        state = {"fen": record["fen"], "history": record.get("history") or []}

    result = record.get("result")
    if result and "isDraw" in result:
        result = {
            "outcome": result.get("outcome"),
            "winner": result.get("winner"),
            "reason": result.get("reason", ""),
            "is_draw": bool(result.get("isDraw")),
            "winner_role": result.get("winner_role"),
        }

    return {
        "id": record.get("id", session_id),
        "game_type": record.get("game_type") or record.get("gameKey") or default_game_type,
        "status": record.get("status", "waiting"),
        "seats": record.get("seats") or record.get("players") or {},
        "state": state or {},
        "result": result,
        "created_at": record.get("created_at") or record.get("createdAt"),
        "updated_at": record.get("updated_at") or record.get("updatedAt"),
    }


_STEPS: dict[int, Callable[[dict[str, Any], str], None]] = {
    1: _v1_to_v2,
}
