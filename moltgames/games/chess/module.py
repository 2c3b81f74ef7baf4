"""
Chess rules module, backed by python-chess.

State shape (JSON-compatible):
    {
        "fen": "<FEN of the current position>",
        "history": [{"move": "e4", "by": "AgentA", "at": "<iso>"}, ...]
    }

Moves may be SAN ("Nf3", "O-O"), UCI ("g1f3", "e7e8q") or a dict
{"from": "e2", "to": "e4", "promotion": "q"}.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any

import chess

from ...errors import InvalidMove
from ...rules import RulesModule, Evaluation, GameResult, MatchContext, State, Seats

WHITE = "w"
BLACK = "b"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _color_to_role(color: chess.Color) -> str:
    return WHITE if color == chess.WHITE else BLACK


class ChessModule(RulesModule):
    """Standard chess, white (w) moves first."""

    key = "chess"
    name = "Chess"
    version = "1.0"
    min_players = 2
    max_players = 2
    roles = (WHITE, BLACK)

    def create_initial_state(self, context: MatchContext) -> State:
        return {"fen": chess.STARTING_FEN, "history": []}

    def get_public_state(self, state: State) -> dict[str, Any]:
        return {
            "fen": state.get("fen", chess.STARTING_FEN),
            "history": list(state.get("history", [])),
        }

    def get_current_turn(self, state: State) -> str:
        board = self._board(state)
        return _color_to_role(board.turn)

    def apply_move(
        self,
        state: State,
        move: Any,
        acting_role: str,
        acting_name: str,
    ) -> State:
        try:
            board = self._board(state)
        except ValueError as e:
            raise InvalidMove(f"invalid move: corrupt position ({e})")

        parsed = self._parse_move(board, move)
        san = board.san(parsed)
        board.push(parsed)

        return {
            "fen": board.fen(),
            "history": [
                *state.get("history", []),
                {"move": san, "by": acting_name, "at": _now_iso()},
            ],
        }

    def evaluate(self, state: State, seats: Seats) -> Evaluation:
        board = self._replay(state)
        outcome = board.outcome(claim_draw=True)
        if outcome is None:
            return Evaluation.ongoing()

        if outcome.termination == chess.Termination.CHECKMATE:
            winner_role = _color_to_role(outcome.winner)
            return Evaluation(
                is_game_over=True,
                result=GameResult(
                    outcome="checkmate",
                    winner=seats.get(winner_role),
                    reason="checkmate",
                    is_draw=False,
                    winner_role=winner_role,
                ),
            )

        return Evaluation(
            is_game_over=True,
            result=GameResult.draw(reason=outcome.termination.name.lower()),
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _board(self, state: State) -> chess.Board:
        return chess.Board(state.get("fen", chess.STARTING_FEN))

    def _replay(self, state: State) -> chess.Board:
        """
        Rebuild the board from history so repetition draws are visible.

        Falls back to the bare FEN when history does not lead to it
        (records migrated from older stores may have partial history).
        """
        fen = state.get("fen", chess.STARTING_FEN)
        board = chess.Board()
        try:
            for entry in state.get("history", []):
                board.push_san(entry["move"])
        except (ValueError, KeyError, TypeError):
            return chess.Board(fen)
        if board.fen() != fen:
            return chess.Board(fen)
        return board

    def _parse_move(self, board: chess.Board, move: Any) -> chess.Move:
        if isinstance(move, dict):
            source = str(move.get("from", ""))
            target = str(move.get("to", ""))
            promotion = str(move.get("promotion") or "")
            text = f"{source}{target}{promotion}".lower()
        elif isinstance(move, str):
            text = move.strip()
        else:
            raise InvalidMove("invalid move: malformed move notation")

        if not text:
            raise InvalidMove("invalid move: malformed move notation")

        try:
            parsed = board.parse_san(text)
        except ValueError:
            pass
        else:
            # parse_san accepts null moves ("--", "0000")
            if not parsed:
                raise InvalidMove("invalid move: null move")
            return parsed

        try:
            candidate = chess.Move.from_uci(text.lower())
        except ValueError:
            raise InvalidMove("invalid move")
        if not board.is_legal(candidate):
            raise InvalidMove("invalid move")
        return candidate
