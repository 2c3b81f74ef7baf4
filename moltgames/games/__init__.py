"""
Games module - Built-in rules modules.

Each game has its own subpackage with a RulesModule implementation.
New games are added by writing a module and listing it in
builtin_modules().
"""

from __future__ import annotations

from ..rules import ModuleRegistry, RulesModule
from .chess import ChessModule
from .tictactoe import TicTacToeModule


def builtin_modules() -> list[RulesModule]:
    """Fresh instances of every built-in module."""
    return [ChessModule(), TicTacToeModule()]


def create_default_registry() -> ModuleRegistry:
    """Registry with all built-in games registered."""
    return ModuleRegistry(builtin_modules())


__all__ = [
    "ChessModule",
    "TicTacToeModule",
    "builtin_modules",
    "create_default_registry",
]
