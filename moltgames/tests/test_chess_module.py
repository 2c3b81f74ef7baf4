"""
Tests for the chess rules module.

Tests:
- Initial state and turn tracking
- Move notations (SAN, UCI, from/to dict)
- Rejected moves
- Game-over evaluation
"""

import chess
import pytest

from ..errors import InvalidMove
from ..games import ChessModule
from ..rules import MatchContext

SEATS = {"w": "White", "b": "Black"}


@pytest.fixture
def module():
    return ChessModule()


@pytest.fixture
def initial(module):
    return module.create_initial_state(MatchContext(game_type="chess", seats=dict(SEATS)))


def play(module, state, *moves):
    for move in moves:
        role = module.get_current_turn(state)
        state = module.apply_move(state, move, role, SEATS[role])
    return state


class TestState:
    """Tests for the state projection."""

    def test_initial_state(self, module, initial):
        assert initial["fen"] == chess.STARTING_FEN
        assert initial["history"] == []
        assert module.get_current_turn(initial) == "w"

    def test_public_state_is_a_copy(self, module, initial):
        public = module.get_public_state(initial)
        public["history"].append("x")
        assert initial["history"] == []

    def test_apply_move_does_not_mutate_input(self, module, initial):
        play(module, initial, "e4")
        assert initial["fen"] == chess.STARTING_FEN
        assert initial["history"] == []


class TestMoveNotation:
    """Accepted move formats."""

    def test_san(self, module, initial):
        state = play(module, initial, "e4", "e5", "Nf3")

        assert [h["move"] for h in state["history"]] == ["e4", "e5", "Nf3"]
        assert [h["by"] for h in state["history"]] == ["White", "Black", "White"]
        assert module.get_current_turn(state) == "b"

    def test_uci_recorded_as_san(self, module, initial):
        state = play(module, initial, "g1f3")
        assert state["history"][0]["move"] == "Nf3"

    def test_dict_move(self, module, initial):
        state = play(module, initial, {"from": "e2", "to": "e4"})
        assert state["history"][0]["move"] == "e4"

    def test_promotion(self, module):
        state = {"fen": "8/P6k/8/8/8/8/8/K7 w - - 0 1", "history": []}
        state = module.apply_move(state, {"from": "a7", "to": "a8", "promotion": "q"}, "w", "White")
        assert state["history"][0]["move"].startswith("a8=Q")


class TestInvalidMoves:
    """Moves the module must reject."""

    @pytest.mark.parametrize("move", ["e5", "Ke2", "zz", "e2e5", "", "   ", None, 7, ["e4"]])
    def test_rejected(self, module, initial, move):
        with pytest.raises(InvalidMove):
            module.apply_move(initial, move, "w", "White")

    @pytest.mark.parametrize("move", ["--", "0000"])
    def test_null_move_rejected(self, module, initial, move):
        with pytest.raises(InvalidMove):
            module.apply_move(initial, move, "w", "White")

    def test_corrupt_position(self, module):
        with pytest.raises(InvalidMove):
            module.apply_move({"fen": "not a fen", "history": []}, "e4", "w", "White")


class TestEvaluate:
    """Game-over detection."""

    def test_ongoing(self, module, initial):
        state = play(module, initial, "e4")
        assert module.evaluate(state, SEATS).is_game_over is False

    def test_checkmate(self, module, initial):
        state = play(module, initial, "f3", "e5", "g4", "Qh4#")

        evaluation = module.evaluate(state, SEATS)
        assert evaluation.is_game_over is True
        assert evaluation.result.outcome == "checkmate"
        assert evaluation.result.winner == "Black"
        assert evaluation.result.winner_role == "b"
        assert evaluation.result.is_draw is False

    def test_stalemate(self, module):
        state = {"fen": "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1", "history": []}

        evaluation = module.evaluate(state, SEATS)
        assert evaluation.is_game_over is True
        assert evaluation.result.is_draw is True
        assert evaluation.result.winner is None
        assert evaluation.result.reason == "stalemate"

    def test_insufficient_material(self, module):
        state = {"fen": "8/8/8/8/8/8/8/K6k w - - 0 1", "history": []}

        evaluation = module.evaluate(state, SEATS)
        assert evaluation.result.is_draw is True
        assert evaluation.result.reason == "insufficient_material"

    def test_threefold_repetition(self, module, initial):
        shuffle = ["Nf3", "Nf6", "Ng1", "Ng8"] * 2
        state = play(module, initial, *shuffle)

        evaluation = module.evaluate(state, SEATS)
        assert evaluation.is_game_over is True
        assert evaluation.result.reason == "threefold_repetition"
