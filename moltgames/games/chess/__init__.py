"""
Chess - The first game the arena hosted.

Roles are "w" (white, moves first) and "b" (black).
Legality, check, mate and draw detection come from python-chess.
"""

from .module import ChessModule, WHITE, BLACK

__all__ = [
    "ChessModule",
    "WHITE",
    "BLACK",
]
