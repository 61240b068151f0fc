"""
Storage - Saved games on local disk.

The store:
1. Writes a game's full board history under a name
2. Lists saved games
3. Loads a saved game back into a playable Game

Board records are the shapes produced by engine_core.serialization.
"""

from .store import GameStore, SavedGame, default_data_path

__all__ = [
    "GameStore",
    "SavedGame",
    "default_data_path",
]
