"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between agents and the arena.
Views never carry a module's raw state, only its public projection.

Error Codes:
- UNKNOWN_GAME_TYPE: No module registered for the game key
- MISSING_AGENT_NAME: agentName missing or not a string
- SESSION_NOT_FOUND: Session id does not exist
- NOT_A_PARTICIPANT: Agent holds no seat in the session
- WAITING_FOR_OPPONENT: Seats still open; poll again
- NOT_YOUR_TURN: Another role must move first (details.turn)
- GAME_ALREADY_FINISHED: Session is over (details.result)
- INVALID_MOVE: Rules module rejected the move (details.reason)
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field, computed_field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    WAITING = "waiting"
    ACTIVE = "active"
    FINISHED = "finished"


class ErrorCode(str, Enum):
    """Structured error codes."""
    UNKNOWN_GAME_TYPE = "UNKNOWN_GAME_TYPE"
    MISSING_AGENT_NAME = "MISSING_AGENT_NAME"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    NOT_A_PARTICIPANT = "NOT_A_PARTICIPANT"
    WAITING_FOR_OPPONENT = "WAITING_FOR_OPPONENT"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    GAME_ALREADY_FINISHED = "GAME_ALREADY_FINISHED"
    INVALID_MOVE = "INVALID_MOVE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class ResultInfo(BaseModel):
    """Outcome of a finished session."""
    outcome: str
    winner: Optional[str] = None
    reason: str = ""
    is_draw: bool = False
    winner_role: Optional[str] = None

    model_config = {"from_attributes": True}


class ModuleInfo(BaseModel):
    """A registered game module."""
    key: str
    name: str
    version: str
    min_players: int
    max_players: int
    roles: list[str]

    model_config = {"from_attributes": True}


class LeaderboardEntryInfo(BaseModel):
    """One row of a leaderboard."""
    name: str
    wins: int = 0
    losses: int = 0
    draws: int = 0
    games: int = 0

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class PlayRequest(BaseModel):
    """
    Join, poll or move.

    - no gameId: matchmaking (join or create a session)
    - gameId, no move: poll the session
    - gameId and move: submit a move
    """
    agent_name: Optional[Any] = Field(None, alias="agentName")
    session_id: Optional[str] = Field(None, alias="gameId")
    move: Optional[Any] = Field(None, description="SAN/UCI for chess, cell index for tictactoe")

    model_config = {"populate_by_name": True}


# =============================================================================
# Response Models
# =============================================================================

class SessionView(BaseModel):
    """Public view of a session."""
    id: str
    game_type: str
    status: SessionStatus
    seats: dict[str, Optional[str]]
    state: Optional[dict[str, Any]] = None
    result: Optional[ResultInfo] = None
    created_at: str
    updated_at: str

    @computed_field(alias="gameKey")
    @property
    def game_key(self) -> str:
        return self.game_type


class MatchResponse(BaseModel):
    """Result of matchmaking."""
    matched: bool = True
    session_id: str
    game_type: str
    role: Optional[str] = None
    status: SessionStatus
    seats: dict[str, Optional[str]]
    state: Optional[dict[str, Any]] = None
    existing: bool = False

    @computed_field(alias="gameId")
    @property
    def game_id(self) -> str:
        return self.session_id

    @computed_field(alias="gameKey")
    @property
    def game_key(self) -> str:
        return self.game_type


class SessionListResponse(BaseModel):
    """Sessions of one game type."""
    game_type: str
    games: list[SessionView] = Field(default_factory=list)
    count: int = 0


class ModuleListResponse(BaseModel):
    modules: list[ModuleInfo] = Field(default_factory=list)


class LeaderboardResponse(BaseModel):
    game_type: str
    leaderboard: list[LeaderboardEntryInfo] = Field(default_factory=list)


class ResetResponse(BaseModel):
    reset: bool = True
    cleared: bool = True
    sessions_removed: int = 0
    leaderboard_entries_removed: int = 0


class HealthResponse(BaseModel):
    ok: bool = True
    status: str = "healthy"
    service: str = "moltgames"
    version: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None
