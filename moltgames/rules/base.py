"""
Rules Module contract - The capability set every game type implements.

A rules module owns one game type end to end:
- Which roles exist (seat order for matchmaking)
- The initial state for a new session
- A public projection of its state
- Whose turn it is
- Applying a move
- Deciding whether the game is over

The arena never looks inside a module's state. It only passes it back
to the module that produced it.

Purity: get_current_turn, apply_move and evaluate must not have side
effects. The orchestrator calls them without any synchronization of
their own.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict
from typing import Any, ClassVar


State = dict[str, Any]
Seats = dict[str, "str | None"]


@dataclass
class GameResult:
    """
    Outcome of a finished session.

    winner is an agent name (None on a draw). winner_role names the seat
    that won so crediting never depends on name lookups.
    """
    outcome: str
    winner: str | None = None
    reason: str = ""
    is_draw: bool = False
    winner_role: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameResult:
        return cls(
            outcome=data.get("outcome", "unknown"),
            winner=data.get("winner"),
            reason=data.get("reason", ""),
            is_draw=bool(data.get("is_draw", data.get("isDraw", False))),
            winner_role=data.get("winner_role"),
        )

    @classmethod
    def draw(cls, reason: str = "draw") -> GameResult:
        return cls(outcome="draw", winner=None, reason=reason, is_draw=True)


@dataclass
class Evaluation:
    """Result of evaluating a state after a move."""
    is_game_over: bool
    result: GameResult | None = None

    @classmethod
    def ongoing(cls) -> Evaluation:
        return cls(is_game_over=False)


@dataclass
class MatchContext:
    """What a module sees when building a fresh state."""
    game_type: str
    seats: Seats = field(default_factory=dict)


@dataclass
class ModuleSummary:
    """Public description of a registered module."""
    key: str
    name: str
    version: str
    min_players: int
    max_players: int
    roles: list[str]


class RulesModule(ABC):
    """
    Abstract base class for game rules.

    Subclasses set the class attributes and implement the five
    state operations.
    """

    key: ClassVar[str] = ""
    name: ClassVar[str] = ""
    version: ClassVar[str] = "1.0"
    min_players: ClassVar[int] = 2
    max_players: ClassVar[int] = 2
    roles: ClassVar[tuple[str, ...]] = ()

    @abstractmethod
    def create_initial_state(self, context: MatchContext) -> State:
        """Build the state of a brand new session."""

    @abstractmethod
    def get_public_state(self, state: State) -> dict[str, Any]:
        """Project state into what may be shown to agents."""

    @abstractmethod
    def get_current_turn(self, state: State) -> str:
        """Role that must act next."""

    @abstractmethod
    def apply_move(
        self,
        state: State,
        move: Any,
        acting_role: str,
        acting_name: str,
    ) -> State:
        """
        Apply a move and return the new state.

        Raises:
            InvalidMove: the move is illegal; `state` is left untouched
        """

    @abstractmethod
    def evaluate(self, state: State, seats: Seats) -> Evaluation:
        """Decide whether the game is over and who won."""

    def summary(self) -> ModuleSummary:
        return ModuleSummary(
            key=self.key,
            name=self.name,
            version=self.version,
            min_players=self.min_players,
            max_players=self.max_players,
            roles=list(self.roles),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} key={self.key!r}>"
