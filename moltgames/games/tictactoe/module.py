"""
Tic-tac-toe rules module.

State shape:
    {
        "board": [None | "X" | "O", ...],   # 9 cells, row-major
        "history": [{"move": 4, "role": "X", "by": "AgentA", "at": "<iso>"}]
    }

A move is the index of an empty cell, 0-8 (an int or numeric string).
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any

from ...errors import InvalidMove
from ...rules import RulesModule, Evaluation, GameResult, MatchContext, State, Seats

LINES = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)


class TicTacToeModule(RulesModule):
    """Three in a row on a 3x3 grid. X moves first."""

    key = "tictactoe"
    name = "Tic-Tac-Toe"
    version = "1.0"
    min_players = 2
    max_players = 2
    roles = ("X", "O")

    def create_initial_state(self, context: MatchContext) -> State:
        return {"board": [None] * 9, "history": []}

    def get_public_state(self, state: State) -> dict[str, Any]:
        board = state.get("board", [None] * 9)
        return {
            "board": list(board),
            "rows": ["".join(cell or "." for cell in board[i:i + 3]) for i in (0, 3, 6)],
            "history": list(state.get("history", [])),
        }

    def get_current_turn(self, state: State) -> str:
        filled = sum(1 for cell in state.get("board", []) if cell)
        return self.roles[filled % 2]

    def apply_move(
        self,
        state: State,
        move: Any,
        acting_role: str,
        acting_name: str,
    ) -> State:
        cell = self._parse_cell(move)
        board = list(state.get("board", [None] * 9))
        if board[cell] is not None:
            raise InvalidMove(f"invalid move: cell {cell} is taken")
        if self._winning_role(board) is not None:
            raise InvalidMove("invalid move: game is over")

        board[cell] = acting_role
        return {
            "board": board,
            "history": [
                *state.get("history", []),
                {
                    "move": cell,
                    "role": acting_role,
                    "by": acting_name,
                    "at": datetime.now(timezone.utc).isoformat(),
                },
            ],
        }

    def evaluate(self, state: State, seats: Seats) -> Evaluation:
        board = state.get("board", [None] * 9)
        winner_role = self._winning_role(board)
        if winner_role is not None:
            return Evaluation(
                is_game_over=True,
                result=GameResult(
                    outcome="three_in_a_row",
                    winner=seats.get(winner_role),
                    reason="three_in_a_row",
                    is_draw=False,
                    winner_role=winner_role,
                ),
            )
        if all(board):
            return Evaluation(is_game_over=True, result=GameResult.draw(reason="board_full"))
        return Evaluation.ongoing()

    def _parse_cell(self, move: Any) -> int:
        if isinstance(move, bool) or (isinstance(move, float) and not move.is_integer()):
            raise InvalidMove("invalid move: expected a cell index 0-8")
        try:
            cell = int(move)
        except (TypeError, ValueError):
            raise InvalidMove("invalid move: expected a cell index 0-8")
        if not 0 <= cell <= 8:
            raise InvalidMove(f"invalid move: cell {cell} is off the board")
        return cell

    def _winning_role(self, board: list[str | None]) -> str | None:
        for a, b, c in LINES:
            if board[a] and board[a] == board[b] == board[c]:
                return board[a]
        return None
