"""
Session Module - Live games and their history.

A session represents one play-through of a game:
- Created when the user starts or resumes a game
- Holds the Game (board history, current board, undo)
- Removed when the game is ended

Saving is explicit and goes through morris.storage.
"""

from .game import Game, TurnResult
from .manager import SessionManager, Session, SessionState

__all__ = [
    "Game",
    "TurnResult",
    "SessionManager",
    "Session",
    "SessionState",
]
