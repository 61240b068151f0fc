"""
Game Store - Saved games in a single text file.

The store:
- Keeps every saved game in one file (default ~/.morris/data.txt)
- One game per entry, entries separated by a blank line
- Each entry is a name line followed by one JSON board record per line
- Records use the shape in engine_core/serialization.py

Example:

    Friday game
    {"teams":[...],"currentPlayer":0,"positions":[...],"gamePhase":1}
    {"teams":[...],"currentPlayer":1,"positions":[...],"gamePhase":1}

    Rematch
    {"teams":[...],"currentPlayer":0,"positions":[...],"gamePhase":1}

Design decisions:
- Lines starting with "{" are records, anything else starts a new game
- Writes go to a temp file that replaces the original
- Malformed records surface as RecordError when the game is loaded
"""

from __future__ import annotations
import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TYPE_CHECKING

from ..engine_core.serialization import board_from_record, board_to_record

if TYPE_CHECKING:
    from ..session.game import Game

logger = logging.getLogger(__name__)


@dataclass
class SavedGame:
    """
    A saved game entry, records not yet parsed into boards.
    """
    index: int
    name: str
    boards: list[dict[str, Any]] = field(default_factory=list)

    @property
    def num_boards(self) -> int:
        return len(self.boards)


def default_data_path() -> Path:
    return Path.home() / ".morris" / "data.txt"


class GameStore:
    """
    File-based store for saved games.

    Usage:
        store = GameStore("~/.morris/data.txt")

        index = store.save(game)          # new entry
        store.save(game, index)           # overwrite
        game = store.load(index)
    """

    def __init__(self, path: str | Path | None = None):
        if path is None:
            path = default_data_path()
        self.path = Path(path).expanduser()

    def list_games(self) -> list[SavedGame]:
        """
        List all saved games.

        A missing file means no saved games.
        """
        if not self.path.exists():
            return []
        with open(self.path, "r", encoding="utf-8") as f:
            return self._parse(f.read())

    def get(self, game_index: int) -> SavedGame:
        """Get a saved entry by index. Raises IndexError if there is none."""
        games = self.list_games()
        if not 0 <= game_index < len(games):
            raise IndexError(f"No saved game at index {game_index}")
        return games[game_index]

    def load(self, game_index: int) -> Game:
        """
        Load a saved game, ready to continue.

        Raises IndexError for an unknown index and RecordError for a
        malformed record.
        """
        from ..session.game import Game

        entry = self.get(game_index)
        boards = [board_from_record(record) for record in entry.boards]
        logger.info("Loaded game %r (%d snapshots)", entry.name, len(boards))
        return Game.from_history(boards, name=entry.name, game_index=entry.index)

    def save(self, game: Game, game_index: int | None = None, name: str | None = None) -> int:
        """
        Save a game's full history.

        game_index None (or -1) appends a new entry; otherwise the entry at
        that index is overwritten. Returns the index written and records it
        (and the name) on the game.
        """
        name = name or game.name
        self._check_name(name)
        name = name.strip()

        games = self.list_games()
        if game_index is None or game_index == -1:
            game_index = len(games)
            games.append(SavedGame(index=game_index, name=name))
        elif not 0 <= game_index < len(games):
            raise ValueError(f"Invalid game index {game_index}")

        games[game_index] = SavedGame(
            index=game_index,
            name=name,
            boards=[board_to_record(board) for board in game.history],
        )
        self._write(games)

        game.name = name
        game.game_index = game_index
        logger.info("Saved game %r at index %d", name, game_index)
        return game_index

    def delete(self, game_index: int):
        """Remove a saved game. Later entries shift down by one."""
        games = self.list_games()
        if not 0 <= game_index < len(games):
            raise IndexError(f"No saved game at index {game_index}")
        del games[game_index]
        self._write(games)

    def _check_name(self, name: str | None):
        if not name or not name.strip():
            raise ValueError("A game name is required to save")
        if "\n" in name or "\r" in name:
            raise ValueError("Game name must be a single line")
        if name.lstrip().startswith("{"):
            raise ValueError("Game name must not start with '{'")

    def _parse(self, text: str) -> list[SavedGame]:
        """Split file content into saved games."""
        games: list[SavedGame] = []
        current: SavedGame | None = None

        for line_no, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line:
                continue

            if not line.startswith("{"):
                current = SavedGame(index=-1, name=line)
                games.append(current)
                continue

            if current is None:
                logger.warning("%s:%d: board record before any game name, skipped", self.path, line_no)
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                logger.warning("%s:%d: unreadable board record skipped (%s)", self.path, line_no, e)
                continue
            current.boards.append(record)

        kept = []
        for game in games:
            if not game.boards:
                logger.warning("%s: saved game %r has no boards, skipped", self.path, game.name)
                continue
            game.index = len(kept)
            kept.append(game)
        return kept

    def _write(self, games: list[SavedGame]):
        """Replace the data file with the given entries."""
        blocks = []
        for game in games:
            lines = [game.name] + [
                json.dumps(record, separators=(",", ":")) for record in game.boards
            ]
            blocks.append("\n".join(lines))
        content = "\n\n".join(blocks) + ("\n" if blocks else "")

        # Ensure data directory exists
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".morris-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
