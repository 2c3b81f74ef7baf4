"""Tic-Tac-Toe - a small second game type, X moves first."""

from .module import TicTacToeModule

__all__ = ["TicTacToeModule"]
