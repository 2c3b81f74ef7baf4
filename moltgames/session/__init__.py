"""
Session Module - Game sessions between agents.

A session represents one game:
- Created by the matchmaker when an agent joins
- Becomes active once every seat is filled
- Advanced one move at a time by the orchestrator
- Finished when the rules module says the game is over

Sessions are persisted in the session store and survive restarts.
Finished sessions are kept until an administrative reset.
"""

from .models import Session, SessionStatus
from .store import SessionStore
from .matchmaker import Matchmaker, MatchResult
from .orchestrator import SessionOrchestrator, PlayOutcome

__all__ = [
    "Session",
    "SessionStatus",
    "SessionStore",
    "Matchmaker",
    "MatchResult",
    "SessionOrchestrator",
    "PlayOutcome",
]
