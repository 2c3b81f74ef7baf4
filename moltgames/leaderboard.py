"""
Leaderboard - Per-game-type ranking keyed by agent name.

Entries are created lazily, with zeroed counters, the first time an
agent is referenced. games is kept as a running counter so reads are
O(1), and every update moves it together with exactly one of wins,
losses or draws:

    games == wins + losses + draws

Both sides of a result are written in one storage transaction, so
concurrent terminations never leave one agent credited and the other not.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
import logging
from typing import Any

from .storage import Database

logger = logging.getLogger(__name__)


@dataclass
class LeaderboardEntry:
    """One agent's record for one game type."""
    name: str
    wins: int = 0
    losses: int = 0
    draws: int = 0
    games: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LeaderboardEntry:
        return cls(
            name=data["name"],
            wins=int(data.get("wins", 0)),
            losses=int(data.get("losses", 0)),
            draws=int(data.get("draws", 0)),
            games=int(data.get("games", 0)),
        )


def _sort_key(entry: LeaderboardEntry) -> tuple[int, int, int]:
    return (-entry.wins, -entry.draws, entry.losses)


class Leaderboard:
    """
    Persistent leaderboards, one per game type.

    Usage:
        board = Leaderboard(database)
        board.record_result("chess", "AgentA", "AgentB", is_draw=False)
        board.list_leaderboard("chess")[0].name   # "AgentA"
    """

    def __init__(self, database: Database | None = None):
        self.database = database or Database()

    def get_entry(self, game_type: str, name: str) -> LeaderboardEntry:
        """Entry for name, created with zero counters if missing."""
        with self.database.read() as doc:
            record = doc["leaderboards"].get(game_type, {}).get(name)
            if record is not None:
                return LeaderboardEntry.from_dict(record)

        with self.database.transaction() as doc:
            board = doc["leaderboards"].setdefault(game_type, {})
            record = board.setdefault(name, LeaderboardEntry(name=name).to_dict())
            return LeaderboardEntry.from_dict(record)

    def record_result(
        self,
        game_type: str,
        winner_name: str,
        loser_name: str,
        is_draw: bool = False,
    ):
        """
        Credit one finished game to both agents.

        On a draw both get a draw; otherwise the first argument gets a win
        and the second a loss.
        """
        with self.database.transaction() as doc:
            board = doc["leaderboards"].setdefault(game_type, {})
            winner = board.setdefault(winner_name, LeaderboardEntry(name=winner_name).to_dict())
            winner["games"] += 1
            if is_draw:
                winner["draws"] += 1
            else:
                winner["wins"] += 1

            # Same dict as winner when both names match; counters stay consistent
            loser = board.setdefault(loser_name, LeaderboardEntry(name=loser_name).to_dict())
            loser["games"] += 1
            if is_draw:
                loser["draws"] += 1
            else:
                loser["losses"] += 1

        logger.info(
            "Leaderboard %s: %s %s %s",
            game_type,
            winner_name,
            "drew with" if is_draw else "beat",
            loser_name,
        )

    def list_leaderboard(self, game_type: str) -> list[LeaderboardEntry]:
        """Entries ordered by wins desc, draws desc, losses asc, then creation order."""
        with self.database.read() as doc:
            entries = [
                LeaderboardEntry.from_dict(record)
                for record in doc["leaderboards"].get(game_type, {}).values()
            ]
        return sorted(entries, key=_sort_key)

    def reset(self, game_type: str | None = None) -> int:
        """Drop entries for one game type, or all of them. Returns entries removed."""
        with self.database.transaction() as doc:
            if game_type is None:
                count = sum(len(board) for board in doc["leaderboards"].values())
                doc["leaderboards"] = {}
            else:
                count = len(doc["leaderboards"].pop(game_type, {}))
        logger.warning("Reset leaderboard %s (%d entries removed)", game_type or "*", count)
        return count
