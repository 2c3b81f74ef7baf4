"""
Tests for the tic-tac-toe rules module.
"""

import pytest

from ..errors import InvalidMove
from ..games import TicTacToeModule
from ..rules import MatchContext

SEATS = {"X": "A", "O": "B"}


@pytest.fixture
def module():
    return TicTacToeModule()


@pytest.fixture
def initial(module):
    return module.create_initial_state(MatchContext(game_type="tictactoe", seats=dict(SEATS)))


def play(module, state, *cells):
    for cell in cells:
        role = module.get_current_turn(state)
        state = module.apply_move(state, cell, role, SEATS[role])
    return state


class TestMoves:
    """Tests for apply_move()."""

    def test_turn_alternates(self, module, initial):
        assert module.get_current_turn(initial) == "X"
        state = play(module, initial, 4)
        assert module.get_current_turn(state) == "O"
        assert state["board"][4] == "X"
        assert state["history"][0]["by"] == "A"

    def test_numeric_string_accepted(self, module, initial):
        state = play(module, initial, "8")
        assert state["board"][8] == "X"

    def test_input_state_untouched(self, module, initial):
        play(module, initial, 0)
        assert initial["board"] == [None] * 9

    @pytest.mark.parametrize("move", [-1, 9, "nine", None, True, 1.5, [0]])
    def test_bad_cell(self, module, initial, move):
        with pytest.raises(InvalidMove):
            module.apply_move(initial, move, "X", "A")

    def test_taken_cell(self, module, initial):
        state = play(module, initial, 0)
        with pytest.raises(InvalidMove):
            module.apply_move(state, 0, "O", "B")

    def test_public_state_rows(self, module, initial):
        state = play(module, initial, 0, 4)
        assert module.get_public_state(state)["rows"] == ["X..", ".O.", "..."]


class TestEvaluate:
    """Tests for evaluate()."""

    def test_ongoing(self, module, initial):
        assert module.evaluate(play(module, initial, 0, 1), SEATS).is_game_over is False

    def test_column_win_for_o(self, module, initial):
        state = play(module, initial, 0, 1, 2, 4, 3, 7)

        evaluation = module.evaluate(state, SEATS)
        assert evaluation.is_game_over is True
        assert evaluation.result.winner == "B"
        assert evaluation.result.winner_role == "O"

    def test_diagonal_win(self, module, initial):
        state = play(module, initial, 0, 1, 4, 2, 8)
        assert module.evaluate(state, SEATS).result.winner == "A"

    def test_full_board_draw(self, module, initial):
        state = play(module, initial, 0, 1, 2, 4, 3, 5, 7, 6, 8)

        evaluation = module.evaluate(state, SEATS)
        assert evaluation.is_game_over is True
        assert evaluation.result.is_draw is True
        assert evaluation.result.reason == "board_full"

    def test_no_moves_after_win(self, module, initial):
        state = play(module, initial, 0, 3, 1, 4, 2)
        with pytest.raises(InvalidMove):
            module.apply_move(state, 8, "O", "B")
