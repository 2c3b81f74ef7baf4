"""
Tests for matchmaking.

Tests:
- Seat filling in role order
- Waiting -> active transition
- Idempotent join
- Concurrent joins
"""

from concurrent.futures import ThreadPoolExecutor
from collections import Counter
import threading

import pytest

from ..errors import UnknownGameType
from ..games import TicTacToeModule
from ..rules import ModuleRegistry
from ..session import Matchmaker, SessionStatus, SessionStore


class SoloModule(TicTacToeModule):
    """Single-seat variant, used to check immediate activation."""
    key = "solo"
    min_players = 1
    max_players = 1
    roles = ("X",)


class TestMatchOrCreate:
    """Tests for seat assignment."""

    def test_first_agent_opens_session(self, matchmaker):
        match = matchmaker.join("tictactoe", "A")

        assert match.role == "X"
        assert match.existing is False
        assert match.session.status == SessionStatus.WAITING
        assert match.session.seats == {"X": "A", "O": None}
        assert match.session.state["board"] == [None] * 9

    def test_second_agent_fills_session(self, matchmaker, store):
        first = matchmaker.join("tictactoe", "A")
        second = matchmaker.join("tictactoe", "B")

        assert second.session.id == first.session.id
        assert second.role == "O"
        assert second.session.status == SessionStatus.ACTIVE
        assert store.get(first.session.id).seats == {"X": "A", "O": "B"}

    def test_third_agent_opens_new_session(self, matchmaker):
        first = matchmaker.join("tictactoe", "A")
        matchmaker.join("tictactoe", "B")
        third = matchmaker.join("tictactoe", "C")

        assert third.session.id != first.session.id
        assert third.role == "X"
        assert third.session.status == SessionStatus.WAITING

    def test_agent_never_seated_twice(self, matchmaker, store):
        """match_or_create skips sessions the agent already sits in."""
        first = matchmaker.match_or_create("tictactoe", "A")
        second = matchmaker.match_or_create("tictactoe", "A")

        assert second.session.id != first.session.id
        for session in store.list_by_type("tictactoe"):
            occupants = [name for name in session.seats.values() if name]
            assert len(occupants) == len(set(occupants))

    def test_game_types_do_not_mix(self, matchmaker):
        chess = matchmaker.join("chess", "A")
        ttt = matchmaker.match_or_create("tictactoe", "B")

        assert chess.session.id != ttt.session.id
        assert ttt.session.game_type == "tictactoe"

    def test_unknown_game_type(self, matchmaker, store):
        with pytest.raises(UnknownGameType):
            matchmaker.join("checkers", "A")
        assert store.count() == 0

    def test_single_role_session_starts_active(self):
        store = SessionStore()
        matchmaker = Matchmaker(ModuleRegistry([SoloModule()]), store)

        match = matchmaker.join("solo", "A")

        assert match.session.status == SessionStatus.ACTIVE
        assert match.session.seats == {"X": "A"}


class TestIdempotentJoin:
    """Tests for join() when the agent already holds a seat."""

    def test_repeat_join_returns_same_session(self, matchmaker, store):
        first = matchmaker.join("tictactoe", "A")
        again = matchmaker.join("tictactoe", "A")

        assert again.existing is True
        assert again.session.id == first.session.id
        assert again.role == "X"
        assert store.count() == 1

    def test_existing_session_of_other_type_returned(self, matchmaker):
        chess = matchmaker.join("chess", "A")
        again = matchmaker.join("tictactoe", "A")

        assert again.existing is True
        assert again.session.id == chess.session.id

    def test_finished_session_does_not_block(self, matchmaker, store):
        first = matchmaker.join("tictactoe", "A")
        session = store.get(first.session.id)
        session.status = SessionStatus.FINISHED
        store.put(session)

        again = matchmaker.join("tictactoe", "A")
        assert again.existing is False
        assert again.session.id != first.session.id


class TestConcurrentJoins:
    """Many agents joining at once."""

    def test_every_agent_seated_once(self, matchmaker, store):
        names = [f"agent-{i}" for i in range(20)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda name: matchmaker.join("tictactoe", name), names))

        sessions = store.list_by_type("tictactoe")
        assert len(sessions) == 10
        assert all(s.status == SessionStatus.ACTIVE for s in sessions)

        seated = Counter(name for s in sessions for name in s.seats.values())
        assert seated == Counter(names)
        assert {r.role for r in results} == {"X", "O"}

    @pytest.mark.parametrize("attempt", range(5))
    def test_same_agent_across_game_types(self, matchmaker, store, attempt):
        """Joining two game types at once still yields a single session."""
        barrier = threading.Barrier(2)
        results = {}

        def run(game_type):
            barrier.wait()
            results[game_type] = matchmaker.join(game_type, "A")

        threads = [threading.Thread(target=run, args=(g,)) for g in ("chess", "tictactoe")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert store.count() == 1
        assert results["chess"].session.id == results["tictactoe"].session.id
        assert sorted(r.existing for r in results.values()) == [False, True]
