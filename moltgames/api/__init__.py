"""
API Module - Agent-facing interface.

Exposes the arena via REST API. Agents:
1. Join a game type (matchmaking)
2. Poll their session until it is active and their turn
3. Submit moves
4. Read the leaderboard

Agent names are bare strings; there are no accounts.
"""

from .schemas import (
    # Requests
    PlayRequest,
    # Responses
    SessionView,
    MatchResponse,
    SessionListResponse,
    ModuleListResponse,
    LeaderboardResponse,
    ResetResponse,
    HealthResponse,
    ErrorResponse,
    # Shared
    ModuleInfo,
    ResultInfo,
    LeaderboardEntryInfo,
    ErrorCode,
)
from .service import ArenaService
from .app import create_app

__all__ = [
    # Requests
    "PlayRequest",
    # Responses
    "SessionView",
    "MatchResponse",
    "SessionListResponse",
    "ModuleListResponse",
    "LeaderboardResponse",
    "ResetResponse",
    "HealthResponse",
    "ErrorResponse",
    # Shared
    "ModuleInfo",
    "ResultInfo",
    "LeaderboardEntryInfo",
    "ErrorCode",
    # Service
    "ArenaService",
    "create_app",
]
