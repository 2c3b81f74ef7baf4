"""
Tests for leaderboards.
"""

import pytest

from ..leaderboard import Leaderboard, LeaderboardEntry
from ..storage import Database


def assert_consistent(entry: LeaderboardEntry):
    assert entry.games == entry.wins + entry.losses + entry.draws


class TestRecordResult:
    """Tests for record_result()."""

    def test_win_and_loss(self, leaderboard):
        leaderboard.record_result("chess", "A", "B")

        a = leaderboard.get_entry("chess", "A")
        b = leaderboard.get_entry("chess", "B")
        assert (a.wins, a.losses, a.draws, a.games) == (1, 0, 0, 1)
        assert (b.wins, b.losses, b.draws, b.games) == (0, 1, 0, 1)

    def test_draw(self, leaderboard):
        leaderboard.record_result("chess", "A", "B", is_draw=True)

        for name in ("A", "B"):
            entry = leaderboard.get_entry("chess", name)
            assert entry.draws == 1
            assert entry.wins == entry.losses == 0
            assert_consistent(entry)

    def test_same_name_on_both_sides(self, leaderboard):
        """Self-play counts as two games for one entry."""
        leaderboard.record_result("chess", "A", "A")

        entry = leaderboard.get_entry("chess", "A")
        assert (entry.wins, entry.losses, entry.games) == (1, 1, 2)
        assert_consistent(entry)

    def test_game_types_are_separate(self, leaderboard):
        leaderboard.record_result("chess", "A", "B")
        leaderboard.record_result("tictactoe", "B", "A")

        assert leaderboard.get_entry("chess", "A").wins == 1
        assert leaderboard.get_entry("tictactoe", "A").losses == 1
        assert leaderboard.get_entry("tictactoe", "A").wins == 0

    def test_counters_stay_consistent(self, leaderboard):
        results = [("A", "B", False), ("B", "C", True), ("C", "A", False), ("A", "C", False)]
        for winner, loser, draw in results:
            leaderboard.record_result("chess", winner, loser, is_draw=draw)

        for entry in leaderboard.list_leaderboard("chess"):
            assert_consistent(entry)


class TestEntries:
    """Tests for lazy creation and listing."""

    def test_get_entry_creates_zeroed(self, leaderboard):
        entry = leaderboard.get_entry("chess", "Newcomer")

        assert entry == LeaderboardEntry(name="Newcomer")
        assert [e.name for e in leaderboard.list_leaderboard("chess")] == ["Newcomer"]

    def test_empty_board(self, leaderboard):
        assert leaderboard.list_leaderboard("chess") == []

    def test_ordering(self, leaderboard):
        leaderboard.record_result("chess", "Top", "Bottom")
        leaderboard.record_result("chess", "Top", "Bottom")
        leaderboard.record_result("chess", "Drawer", "Middle", is_draw=True)
        leaderboard.record_result("chess", "Middle", "Bottom")

        names = [e.name for e in leaderboard.list_leaderboard("chess")]
        assert names == ["Top", "Middle", "Drawer", "Bottom"]

    def test_ties_keep_creation_order(self, leaderboard):
        leaderboard.get_entry("chess", "First")
        leaderboard.get_entry("chess", "Second")

        assert [e.name for e in leaderboard.list_leaderboard("chess")] == ["First", "Second"]

    def test_fewer_losses_ranks_higher(self, leaderboard):
        leaderboard.record_result("chess", "A", "Loser")
        leaderboard.record_result("chess", "B", "Loser")
        leaderboard.record_result("chess", "Loser", "B")

        names = [e.name for e in leaderboard.list_leaderboard("chess")]
        assert names[0] == "A"


class TestReset:
    """Tests for reset()."""

    def test_reset_one_game_type(self, leaderboard):
        leaderboard.record_result("chess", "A", "B")
        leaderboard.record_result("tictactoe", "A", "B")

        assert leaderboard.reset("chess") == 2
        assert leaderboard.list_leaderboard("chess") == []
        assert len(leaderboard.list_leaderboard("tictactoe")) == 2

    def test_reset_all(self, leaderboard):
        leaderboard.record_result("chess", "A", "B")
        leaderboard.record_result("tictactoe", "A", "C")

        assert leaderboard.reset() == 4
        assert leaderboard.list_leaderboard("tictactoe") == []

    @pytest.mark.parametrize("game_type", ["chess", "tictactoe"])
    def test_entries_survive_reopen(self, tmp_path, game_type):
        path = tmp_path / "db.json"
        Leaderboard(Database(path)).record_result(game_type, "A", "B")

        reopened = Leaderboard(Database(path))
        assert reopened.get_entry(game_type, "A").wins == 1
