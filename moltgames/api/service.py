"""
API Service - Business logic layer between the HTTP app and the engine.

The service:
1. Wires the registry, store, matchmaker, orchestrator and leaderboard
2. Translates requests into engine calls
3. Projects sessions into public views (never raw module state)

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.).
Engine errors (ArenaError subclasses) propagate to the caller.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..errors import SessionNotFound
from ..games import create_default_registry
from ..leaderboard import Leaderboard
from ..rules import ModuleRegistry
from ..session import (
    Session,
    SessionStore,
    Matchmaker,
    MatchResult,
    SessionOrchestrator,
)
from ..storage import Database
from .schemas import (
    PlayRequest,
    SessionView,
    MatchResponse,
    SessionListResponse,
    ModuleInfo,
    ModuleListResponse,
    LeaderboardEntryInfo,
    LeaderboardResponse,
    ResetResponse,
    ResultInfo,
)

logger = logging.getLogger(__name__)


@dataclass
class ArenaService:
    """
    Main arena service.

    Usage:
        service = ArenaService()

        # Join
        match = service.play("chess", PlayRequest(agentName="AgentA"))

        # Poll / move
        view = service.play("chess", PlayRequest(agentName="AgentA", gameId=match.session_id, move="e4"))
    """
    database: Database = field(default_factory=Database)
    registry: ModuleRegistry = field(default_factory=create_default_registry)
    default_game: str = "chess"

    store: SessionStore = field(init=False)
    leaderboard: Leaderboard = field(init=False)
    matchmaker: Matchmaker = field(init=False)
    orchestrator: SessionOrchestrator = field(init=False)

    def __post_init__(self):
        self.store = SessionStore(self.database)
        self.leaderboard = Leaderboard(self.database)
        self.matchmaker = Matchmaker(self.registry, self.store)
        self.orchestrator = SessionOrchestrator(
            self.registry,
            self.store,
            self.leaderboard,
            matchmaker=self.matchmaker,
        )

    def list_modules(self) -> ModuleListResponse:
        return ModuleListResponse(
            modules=[
                ModuleInfo.model_validate(summary)
                for summary in self.registry.list()
            ]
        )

    def list_sessions(self, game_type: str | None = None) -> SessionListResponse:
        """Views of every session of a game type (default game when omitted)."""
        game_type = game_type or self.default_game
        games = [self._session_to_view(s) for s in self.store.list_by_type(game_type)]
        return SessionListResponse(game_type=game_type, games=games, count=len(games))

    def get_session(self, session_id: str) -> SessionView:
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return self._session_to_view(session)

    def play(self, game_type: str | None, request: PlayRequest) -> MatchResponse | SessionView:
        """
        Join, poll or move.

        Returns MatchResponse for a join, SessionView otherwise.
        """
        outcome = self.orchestrator.play(
            game_type or self.default_game,
            request.agent_name,
            session_id=request.session_id,
            move=request.move,
        )
        if outcome.match is not None:
            return self._match_to_response(outcome.match)
        return self._session_to_view(outcome.session)

    def get_leaderboard(self, game_type: str | None = None) -> LeaderboardResponse:
        game_type = game_type or self.default_game
        return LeaderboardResponse(
            game_type=game_type,
            leaderboard=[
                LeaderboardEntryInfo.model_validate(entry)
                for entry in self.leaderboard.list_leaderboard(game_type)
            ],
        )

    def reset_all(self, include_leaderboard: bool = False) -> ResetResponse:
        """
        Clear every session. Leaderboards survive unless include_leaderboard.
        """
        removed = self.store.reset_all()
        entries = self.leaderboard.reset() if include_leaderboard else 0
        return ResetResponse(
            sessions_removed=removed,
            leaderboard_entries_removed=entries,
        )

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _public_state(self, session: Session) -> dict | None:
        module = self.registry.get(session.game_type)
        if module is None:
            logger.warning("No module for session %s (%s)", session.id, session.game_type)
            return None
        return module.get_public_state(session.state)

    def _session_to_view(self, session: Session) -> SessionView:
        """Convert Session to SessionView."""
        return SessionView(
            id=session.id,
            game_type=session.game_type,
            status=session.status.value,
            seats=dict(session.seats),
            state=self._public_state(session),
            result=ResultInfo.model_validate(session.result) if session.result else None,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )

    def _match_to_response(self, match: MatchResult) -> MatchResponse:
        session = match.session
        return MatchResponse(
            session_id=session.id,
            game_type=session.game_type,
            role=match.role,
            status=session.status.value,
            seats=dict(session.seats),
            state=self._public_state(session),
            existing=match.existing,
        )
