"""Rules modules - the pluggable per-game contract and its registry."""

from .base import (
    RulesModule,
    GameResult,
    Evaluation,
    MatchContext,
    ModuleSummary,
    State,
    Seats,
)
from .registry import ModuleRegistry

__all__ = [
    "RulesModule",
    "GameResult",
    "Evaluation",
    "MatchContext",
    "ModuleSummary",
    "State",
    "Seats",
    "ModuleRegistry",
]
