"""
Session Store - Durable mapping from session id to session record.

The store:
- Creates, reads and fully rewrites session records
- Filters by game type, by "waiting with an open seat" and by agent
- Hands out one lock per session id for read-modify-write sequences
- Resets everything in one call (administrative)

Records are stored as plain dicts inside the Database document. get()
always returns a detached Session: mutating it has no effect until
put() is called.
"""

from __future__ import annotations
import logging
import threading

from ..errors import SessionNotFound
from ..storage import Database
from .models import Session, SessionStatus, now_iso

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Store for game sessions.

    Usage:
        store = SessionStore(Database("data/db.json"))

        session_id = store.create(session)

        with store.lock(session_id):
            session = store.get(session_id)
            session.status = SessionStatus.ACTIVE
            store.put(session)
    """

    def __init__(self, database: Database | None = None):
        self.database = database or Database()
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def lock(self, session_id: str) -> threading.Lock:
        """
        The mutation lock for one session id.

        Locks are only kept for sessions that exist.

        Raises:
            SessionNotFound: no record with this id
        """
        with self.database.read() as doc:
            if session_id not in doc["sessions"]:
                raise SessionNotFound(session_id)
        with self._locks_guard:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = self._locks[session_id] = threading.Lock()
            return lock

    def create(self, session: Session) -> str:
        """Insert a new session record. Returns its id."""
        session.created_at = session.created_at or now_iso()
        session.updated_at = session.created_at
        with self.database.transaction() as doc:
            doc["sessions"][session.id] = session.to_dict()
        logger.info(
            "Created session %s (%s, status=%s)",
            session.id, session.game_type, session.status.value,
        )
        return session.id

    def get(self, session_id: str) -> Session | None:
        with self.database.read() as doc:
            record = doc["sessions"].get(session_id)
            if record is None:
                return None
            return Session.from_dict(record)

    def put(self, session: Session) -> Session:
        """
        Overwrite a session record with the complete given session.

        Refreshes updated_at on the passed session.

        Raises:
            SessionNotFound: the record no longer exists (e.g. after a reset)
        """
        with self.database.transaction() as doc:
            if session.id not in doc["sessions"]:
                raise SessionNotFound(session.id)
            session.updated_at = now_iso()
            doc["sessions"][session.id] = session.to_dict()
        return session

    def list_by_type(self, game_type: str) -> list[Session]:
        with self.database.read() as doc:
            return [
                Session.from_dict(record)
                for record in doc["sessions"].values()
                if record.get("game_type") == game_type
            ]

    def find_open_waiting(self, game_type: str, exclude_name: str) -> Session | None:
        """First waiting session of game_type with a free seat that agent is not in."""
        with self.database.read() as doc:
            for record in doc["sessions"].values():
                if record.get("game_type") != game_type:
                    continue
                if record.get("status") != SessionStatus.WAITING.value:
                    continue
                occupants = list((record.get("seats") or {}).values())
                if exclude_name in occupants:
                    continue
                if any(not occupant for occupant in occupants):
                    return Session.from_dict(record)
        return None

    def find_active_for_agent(self, agent_name: str) -> Session | None:
        """First waiting-or-active session, of any game type, seating agent_name."""
        with self.database.read() as doc:
            for record in doc["sessions"].values():
                if record.get("status") == SessionStatus.FINISHED.value:
                    continue
                if agent_name in (record.get("seats") or {}).values():
                    return Session.from_dict(record)
        return None

    def reset_all(self) -> int:
        """Delete every session. Returns how many were removed."""
        with self.database.transaction() as doc:
            count = len(doc["sessions"])
            doc["sessions"] = {}
        with self._locks_guard:
            self._locks.clear()
        logger.warning("Reset session store (%d sessions removed)", count)
        return count

    def count(self) -> int:
        with self.database.read() as doc:
            return len(doc["sessions"])
