"""
Session model - One instance of a game being played.

LIFECYCLE:
    waiting  -> at least one seat is empty
    active   -> every seat is filled, moves are accepted
    finished -> terminal; result is set, nothing changes afterwards

Seat rules:
- Seats are fixed by the module's role list at creation, never resized
- A filled seat is never vacated or reassigned
- An agent name occupies at most one seat of a session
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
import copy
import uuid

from ..rules import GameResult


class SessionStatus(str, Enum):
    """State of a game session."""
    WAITING = "waiting"  # Seats still open
    ACTIVE = "active"  # All seats filled, game in progress
    FINISHED = "finished"  # Game over, result recorded


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_session_id(prefix: str = "game") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


@dataclass
class Session:
    """
    A game session as stored.

    state is opaque to the arena: only the session's rules module reads it.
    """
    id: str
    game_type: str
    status: SessionStatus
    seats: dict[str, str | None]
    state: dict[str, Any] = field(default_factory=dict)
    result: GameResult | None = None
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)

    def role_of(self, agent_name: str) -> str | None:
        """Seat held by agent_name, in role order."""
        for role, occupant in self.seats.items():
            if occupant == agent_name:
                return role
        return None

    def has_open_seat(self) -> bool:
        return any(not occupant for occupant in self.seats.values())

    def first_open_role(self) -> str | None:
        for role, occupant in self.seats.items():
            if not occupant:
                return role
        return None

    def is_finished(self) -> bool:
        return self.status == SessionStatus.FINISHED

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "game_type": self.game_type,
            "status": self.status.value,
            "seats": dict(self.seats),
            "state": copy.deepcopy(self.state),
            "result": self.result.to_dict() if self.result else None,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Session:
        result = data.get("result")
        return cls(
            id=data["id"],
            game_type=data["game_type"],
            status=SessionStatus(data.get("status", "waiting")),
            seats=dict(data.get("seats") or {}),
            state=copy.deepcopy(data.get("state") or {}),
            result=GameResult.from_dict(result) if result else None,
            created_at=data.get("created_at") or now_iso(),
            updated_at=data.get("updated_at") or now_iso(),
        )
