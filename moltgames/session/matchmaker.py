"""
Matchmaker - Places an agent into an open seat.

Algorithm (match_or_create):
1. Look for a waiting session of the game type with an open seat that
   does not already seat the agent
2. Found: seat the agent in the first empty role; when that was the last
   empty seat the session becomes active
3. Not found: open a new session from the module's role list with the
   agent in the first role

join() runs a pre-check first: an agent that already sits in a waiting
or active session gets that session back, so repeating a join call never
creates a duplicate.

Matchmaking for one game type is serialized by a per-type lock. join()
also holds a matchmaker-wide join lock, because its pre-check looks at
every game type. Lock order is always join lock, then game-type lock,
then session lock.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import threading

from ..errors import SessionNotFound
from ..rules import ModuleRegistry, MatchContext, RulesModule
from .models import Session, SessionStatus, generate_session_id
from .store import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """Session an agent was placed in, and the seat it holds."""
    session: Session
    role: str | None
    existing: bool = False


class Matchmaker:
    """
    Finds or creates sessions for agents.

    Usage:
        matchmaker = Matchmaker(registry, store)
        match = matchmaker.join("chess", "AgentA")
        match.session.status   # SessionStatus.WAITING
    """

    def __init__(self, registry: ModuleRegistry, store: SessionStore):
        self.registry = registry
        self.store = store
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._join_lock = threading.Lock()

    def _type_lock(self, game_type: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(game_type)
            if lock is None:
                lock = self._locks[game_type] = threading.Lock()
            return lock

    def join(self, game_type: str, agent_name: str) -> MatchResult:
        """
        Idempotent join: existing waiting/active session first, else matchmaking.

        Raises:
            UnknownGameType: no module for game_type
        """
        module = self.registry.require(game_type)
        with self._join_lock, self._type_lock(game_type):
            existing = self.store.find_active_for_agent(agent_name)
            if existing is not None:
                logger.debug("Agent %s already seated in %s", agent_name, existing.id)
                return MatchResult(
                    session=existing,
                    role=existing.role_of(agent_name),
                    existing=True,
                )
            return self._match_or_create(module, agent_name)

    def match_or_create(self, game_type: str, agent_name: str) -> MatchResult:
        """
        Seat agent_name in a waiting session of game_type, or open a new one.

        Raises:
            UnknownGameType: no module for game_type
        """
        module = self.registry.require(game_type)
        with self._type_lock(game_type):
            return self._match_or_create(module, agent_name)

    def _match_or_create(self, module: RulesModule, agent_name: str) -> MatchResult:
        candidate = self.store.find_open_waiting(module.key, agent_name)
        if candidate is not None:
            match = self._seat_in(candidate.id, agent_name)
            if match is not None:
                return match

        session = self._new_session(module, agent_name)
        self.store.create(session)
        return MatchResult(session=session, role=module.roles[0])

    def _seat_in(self, session_id: str, agent_name: str) -> MatchResult | None:
        try:
            with self.store.lock(session_id):
                # Re-read under the session lock; only matchmaking fills seats
                session = self.store.get(session_id)
                if session is None or not self._can_seat(session, agent_name):
                    return None
                role = self._seat(session, agent_name)
                self.store.put(session)
        except SessionNotFound:
            logger.debug("Session %s vanished before %s could be seated", session_id, agent_name)
            return None
        logger.info(
            "Seated %s as %s in %s (status=%s)",
            agent_name, role, session.id, session.status.value,
        )
        return MatchResult(session=session, role=role)

    def _can_seat(self, session: Session, agent_name: str) -> bool:
        return (
            session.status == SessionStatus.WAITING
            and session.has_open_seat()
            and session.role_of(agent_name) is None
        )

    def _seat(self, session: Session, agent_name: str) -> str:
        role = session.first_open_role()
        session.seats[role] = agent_name
        if not session.has_open_seat():
            session.status = SessionStatus.ACTIVE
        return role

    def _new_session(self, module: RulesModule, agent_name: str) -> Session:
        seats: dict[str, str | None] = {role: None for role in module.roles}
        seats[module.roles[0]] = agent_name
        status = SessionStatus.WAITING if len(module.roles) > 1 else SessionStatus.ACTIVE
        state = module.create_initial_state(
            MatchContext(game_type=module.key, seats=dict(seats))
        )
        return Session(
            id=generate_session_id(),
            game_type=module.key,
            status=status,
            seats=seats,
            state=state,
        )
