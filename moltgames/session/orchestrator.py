"""
Session Orchestrator - Turn arbitration and the session state machine.

STATE MACHINE:
    waiting  -> active     last empty seat filled (Matchmaker)
    active   -> active     legal move, game not over
    active   -> finished   legal move, evaluation says game over
    finished is terminal; no session ever leaves it

MOVE SUBMISSION (one request, serialized per session id):
1.  Look up session                        -> SessionNotFound
2.  No move: poll, return as is
3.  Finished                               -> GameAlreadyFinished(result)
4.  Caller's seat                          -> NotAParticipant
5.  Waiting                                -> WaitingForOpponent
6.  Turn check                             -> NotYourTurn(turn)
7.  module.apply_move                      -> InvalidMove, nothing written
8.  Replace state, module.evaluate
9.  Over: finished + result
10. Else: active
11. Persist the full record, crediting the leaderboard in the same
    transaction when the session finished

Steps 1-7 only read, so a failed request never touches shared state.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Any

from ..errors import (
    GameAlreadyFinished,
    MissingAgentName,
    NotAParticipant,
    NotYourTurn,
    SessionNotFound,
    WaitingForOpponent,
)
from ..leaderboard import Leaderboard
from ..rules import ModuleRegistry, RulesModule, GameResult
from .matchmaker import Matchmaker, MatchResult
from .models import Session, SessionStatus
from .store import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class PlayOutcome:
    """
    What a play() call produced.

    Exactly one of match (join without a session id) or session
    (poll or move) is set.
    """
    match: MatchResult | None = None
    session: Session | None = None
    moved: bool = False


class SessionOrchestrator:
    """
    Drives sessions through their lifecycle.

    Usage:
        orchestrator = SessionOrchestrator(registry, store, leaderboard)

        outcome = orchestrator.play("chess", "AgentA")                # join
        sid = outcome.match.session.id
        orchestrator.play("chess", "AgentA", session_id=sid)           # poll
        orchestrator.play("chess", "AgentA", session_id=sid, move="e4")
    """

    def __init__(
        self,
        registry: ModuleRegistry,
        store: SessionStore,
        leaderboard: Leaderboard,
        matchmaker: Matchmaker | None = None,
    ):
        self.registry = registry
        self.store = store
        self.leaderboard = leaderboard
        self.matchmaker = matchmaker or Matchmaker(registry, store)

    def play(
        self,
        game_type: str,
        agent_name: Any,
        session_id: str | None = None,
        move: Any = None,
    ) -> PlayOutcome:
        """
        Join, poll or move, depending on which arguments are present.

        Raises:
            MissingAgentName, UnknownGameType, and everything submit_move raises
        """
        if not agent_name or not isinstance(agent_name, str):
            raise MissingAgentName()
        self.registry.require(game_type)

        if not session_id:
            return PlayOutcome(match=self.matchmaker.join(game_type, agent_name))

        if move is None:
            return PlayOutcome(session=self.poll(session_id))

        session = self.submit_move(session_id, agent_name, move)
        return PlayOutcome(session=session, moved=True)

    def poll(self, session_id: str) -> Session:
        """Current session, unchanged. Status does not matter."""
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def submit_move(self, session_id: str, agent_name: str, move: Any) -> Session:
        """Validate and apply one move. Runs under the session's lock."""
        with self.store.lock(session_id):
            session = self.store.get(session_id)
            if session is None:
                raise SessionNotFound(session_id)

            if session.status == SessionStatus.FINISHED:
                raise GameAlreadyFinished(
                    session.result.to_dict() if session.result else None
                )

            role = session.role_of(agent_name)
            if role is None:
                raise NotAParticipant(session_id, agent_name)

            if session.status == SessionStatus.WAITING:
                raise WaitingForOpponent(session_id)

            module = self.registry.require(session.game_type)
            turn = module.get_current_turn(session.state)
            if turn != role:
                logger.debug(
                    "Rejected move from %s in %s: turn is %s, caller is %s",
                    agent_name, session_id, turn, role,
                )
                raise NotYourTurn(turn=turn, role=role)

            # InvalidMove propagates; nothing has been written yet
            session.state = module.apply_move(session.state, move, role, agent_name)

            evaluation = module.evaluate(session.state, session.seats)
            if evaluation.is_game_over:
                session.status = SessionStatus.FINISHED
                session.result = evaluation.result
            else:
                session.status = SessionStatus.ACTIVE

            # Record and credit together: a failed write undoes both
            with self.store.database.transaction():
                self.store.put(session)
                if session.status == SessionStatus.FINISHED:
                    self._credit(module, session)
            logger.debug("Applied move %r by %s (%s) in %s", move, agent_name, role, session_id)

            if session.status == SessionStatus.FINISHED:
                logger.info(
                    "Session %s finished: %s",
                    session_id,
                    session.result.to_dict() if session.result else None,
                )

            return session

    def _credit(self, module: RulesModule, session: Session):
        """
        Report a finished session to the leaderboard.

        Only the first two roles are scored: the loser is the occupant of
        the first role that is not the winner's.
        """
        result = session.result
        if result is None:
            return

        if result.is_draw:
            first, second = (session.seats.get(role) for role in module.roles[:2])
            if first and second:
                self.leaderboard.record_result(session.game_type, first, second, is_draw=True)
            return

        winner_role = self._winner_role(session, result)
        if winner_role is None:
            logger.warning("Session %s finished without a resolvable winner", session.id)
            return
        loser_role = next((role for role in module.roles if role != winner_role), None)
        winner = session.seats.get(winner_role)
        loser = session.seats.get(loser_role) if loser_role else None
        if winner and loser:
            self.leaderboard.record_result(session.game_type, winner, loser, is_draw=False)

    def _winner_role(self, session: Session, result: GameResult) -> str | None:
        if result.winner_role and result.winner_role in session.seats:
            return result.winner_role
        if result.winner:
            return session.role_of(result.winner)
        return None
