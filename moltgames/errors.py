"""
Errors - Typed failures raised by the arena core.

Every request-level failure is an ArenaError subclass carrying:
- error_code: stable string surfaced to API clients
- status_code: HTTP status used by the transport layer
- details: structured payload (expected turn, stored result, ...)

Errors are local to a single request. The core only mutates shared
state after validation succeeds, so raising never leaves a session or
leaderboard half-updated.

Registration errors are different: they are raised while wiring the
module registry at startup and are never recovered.
"""

from __future__ import annotations
from typing import Any


class ArenaError(Exception):
    """Base class for request-level errors."""

    error_code = "INTERNAL_ERROR"
    status_code = 400
    retryable = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details or None,
        }


class UnknownGameType(ArenaError):
    """No rules module is registered under the requested key."""

    error_code = "UNKNOWN_GAME_TYPE"
    status_code = 404

    def __init__(self, game_type: str):
        self.game_type = game_type
        super().__init__(
            f"unknown game module: {game_type}",
            details={"game_type": game_type},
        )


class MissingAgentName(ArenaError):
    """Request did not carry a usable agent name."""

    error_code = "MISSING_AGENT_NAME"

    def __init__(self):
        super().__init__("agentName is required")


class SessionNotFound(ArenaError):
    """Unknown session id."""

    error_code = "SESSION_NOT_FOUND"
    status_code = 404

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(
            "game not found",
            details={"session_id": session_id},
        )


class NotAParticipant(ArenaError):
    """Agent does not occupy any seat of the session."""

    error_code = "NOT_A_PARTICIPANT"

    def __init__(self, session_id: str, agent_name: str):
        self.session_id = session_id
        self.agent_name = agent_name
        super().__init__(
            "agent is not part of this game",
            details={"session_id": session_id, "agent_name": agent_name},
        )


class WaitingForOpponent(ArenaError):
    """Session still has empty seats. Poll again later."""

    error_code = "WAITING_FOR_OPPONENT"
    retryable = True

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(
            "waiting for opponent",
            details={"session_id": session_id, "retryable": True},
        )


class NotYourTurn(ArenaError):
    """Caller's role is not the role expected to move."""

    error_code = "NOT_YOUR_TURN"
    retryable = True

    def __init__(self, turn: str, role: str | None = None):
        self.turn = turn
        self.role = role
        super().__init__(
            "not your turn",
            details={"turn": turn, "role": role},
        )


class GameAlreadyFinished(ArenaError):
    """Move submitted to a finished session."""

    error_code = "GAME_ALREADY_FINISHED"

    def __init__(self, result: dict[str, Any] | None):
        self.result = result
        super().__init__(
            "game already finished",
            details={"result": result},
        )


class InvalidMove(ArenaError):
    """Rules module rejected the move."""

    error_code = "INVALID_MOVE"

    def __init__(self, reason: str = "invalid move"):
        self.reason = reason
        super().__init__(reason, details={"reason": reason})


# =============================================================================
# Startup errors
# =============================================================================

class RegistrationError(Exception):
    """Raised when a rules module cannot be registered."""


class DuplicateKey(RegistrationError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Game module already registered: {key}")


class MissingKey(RegistrationError):
    def __init__(self):
        super().__init__("Game module must define a unique key")


class MissingRoles(RegistrationError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Game module {key} must define roles for matchmaking")
