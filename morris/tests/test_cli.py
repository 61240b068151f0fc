"""
Tests for the terminal front end.
"""

import argparse

from ..cli import cmd_list, cmd_play, format_board, format_status
from ..storage import GameStore


def _args(tmp_path, **kwargs):
    defaults = {"data_file": str(tmp_path / "data.txt"), "load": None, "name": None}
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


def _feed_stdin(monkeypatch, *lines):
    answers = iter(lines)

    def fake_input(prompt=""):
        try:
            return next(answers)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr("builtins.input", fake_input)


class TestFormatting:
    """Tests for board and status text."""

    def test_format_board_marks(self, make_board):
        """Cat is C, Dog is D, empty points are dots."""
        text = format_board(make_board(cat=[0, 23], dog=[12]))
        assert text.count("C") == 2
        assert text.count("D") == 1
        assert text.count(".") == 21
        assert text.splitlines()[0].strip().startswith("C")

    def test_format_status(self, empty_board):
        """Status names the team on turn and what it must do."""
        text = format_status(empty_board)
        assert "Cat: 9 to place, 9 alive" in text
        assert text.splitlines()[-1] == "Cat to place a token"


class TestCommands:
    """Tests for the list and play commands."""

    def test_list_empty(self, tmp_path, capsys):
        """An empty store says so."""
        cmd_list(_args(tmp_path))
        assert "No saved games." in capsys.readouterr().out

    def test_play_and_save(self, tmp_path, monkeypatch, capsys):
        """Inputs are applied and 's' writes the game."""
        _feed_stdin(monkeypatch, "0", "0", "banana", "30", "s", "q")

        cmd_play(_args(tmp_path, name="Terminal"))

        out = capsys.readouterr().out
        assert "Cat placed a token at 0" in out
        assert "Rejected:" in out
        assert "Not a point: 'banana'" in out
        assert "Points are numbered 0-23" in out
        assert "Saved as 'Terminal' (index 0)" in out

        games = GameStore(tmp_path / "data.txt").list_games()
        assert [(g.name, g.num_boards) for g in games] == [("Terminal", 2)]

    def test_resume_and_list(self, tmp_path, monkeypatch, capsys):
        """A saved game resumes and shows up in the list."""
        _feed_stdin(monkeypatch, "4", "s")
        cmd_play(_args(tmp_path, name="Again"))

        _feed_stdin(monkeypatch, "u", "s")
        cmd_play(_args(tmp_path, load=0))
        cmd_list(_args(tmp_path))

        out = capsys.readouterr().out
        assert "Loaded game: Again" in out
        assert "  0  Again  (1 boards)" in out
