"""
Pytest fixtures for MoltGames tests.
"""

import pytest

from ..api.service import ArenaService
from ..games import create_default_registry
from ..leaderboard import Leaderboard
from ..rules import ModuleRegistry
from ..session import SessionStore, Matchmaker, SessionOrchestrator
from ..storage import Database


# Tic-tac-toe lines used across tests (cell indexes, X moves first)
X_WINS_TOP_ROW = [0, 3, 1, 4, 2]
DRAW_GAME = [0, 1, 2, 4, 3, 5, 7, 6, 8]

# Fool's mate: black mates on move 4
FOOLS_MATE = ["f3", "e5", "g4", "Qh4#"]


@pytest.fixture
def database() -> Database:
    """In-memory database."""
    return Database()


@pytest.fixture
def registry() -> ModuleRegistry:
    return create_default_registry()


@pytest.fixture
def store(database) -> SessionStore:
    return SessionStore(database)


@pytest.fixture
def leaderboard(database) -> Leaderboard:
    return Leaderboard(database)


@pytest.fixture
def matchmaker(registry, store) -> Matchmaker:
    return Matchmaker(registry, store)


@pytest.fixture
def orchestrator(registry, store, leaderboard, matchmaker) -> SessionOrchestrator:
    return SessionOrchestrator(registry, store, leaderboard, matchmaker=matchmaker)


@pytest.fixture
def service() -> ArenaService:
    """Service over an in-memory database."""
    return ArenaService(database=Database())


@pytest.fixture
def active_tictactoe(orchestrator) -> str:
    """Active tic-tac-toe session with A as X and B as O. Returns its id."""
    first = orchestrator.play("tictactoe", "A")
    orchestrator.play("tictactoe", "B")
    return first.match.session.id


@pytest.fixture
def active_chess(orchestrator) -> str:
    """Active chess session with B as white and A as black. Returns its id."""
    first = orchestrator.play("chess", "B")
    orchestrator.play("chess", "A")
    return first.match.session.id


def play_moves(orchestrator, game_type, session_id, seats, moves):
    """Play moves alternating through seats (role order). Returns the last session."""
    names = list(seats.values())
    session = None
    for i, move in enumerate(moves):
        outcome = orchestrator.play(game_type, names[i % len(names)], session_id=session_id, move=move)
        session = outcome.session
    return session
