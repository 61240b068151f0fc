"""
Session Manager - Creates and tracks live games.

LIFECYCLE:
1. User starts a new game, or resumes one from the saved-games store
2. During play, board inputs go to the session's Game
3. User may save (through the store) at any time
4. Game ends or is abandoned → session removed from memory

Sessions are in-memory only. The only persistence is the saved-games
file, and saving is always an explicit request.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
import logging
import time
import uuid

from .game import Game

if TYPE_CHECKING:
    from ..storage import GameStore

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # A team has lost
    ABANDONED = "abandoned"  # User quit


@dataclass
class Session:
    """
    A live game session.

    Wraps the Game with an id and bookkeeping for the API.
    """
    session_id: str
    game: Game
    created_at: float

    state: SessionState = SessionState.ACTIVE
    last_active: float = 0.0

    def is_active(self) -> bool:
        """Check if session is still being played."""
        return self.state == SessionState.ACTIVE

    def touch(self):
        """Record activity and sync state with the game (undo can reopen a finished game)."""
        self.last_active = time.time()
        if self.state == SessionState.ABANDONED:
            return
        self.state = SessionState.GAME_OVER if self.game.is_over else SessionState.ACTIVE


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions for new or loaded games
    - Track live sessions
    - Clean up finished sessions
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_session(self, name: str | None = None, game: Game | None = None) -> Session:
        """
        Create a new game session.

        Args:
            name: Optional game name (used when saving)
            game: Existing game to wrap (e.g. loaded from the store)

        Returns:
            New Session ready to play
        """
        session_id = str(uuid.uuid4())
        now = time.time()
        session = Session(
            session_id=session_id,
            game=game or Game(name=name),
            created_at=now,
            last_active=now,
        )
        session.touch()

        self._sessions[session_id] = session
        logger.info("Created session %s (game %r)", session_id, session.game.name)
        return session

    def load_saved(self, store: GameStore, game_index: int) -> Session:
        """Resume a saved game as a new session."""
        game = store.load(game_index)
        return self.create_session(game=game)

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and remove it from memory.

        Unsaved progress is discarded.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if reason == "completed" and session.game.is_over:
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_sessions(self) -> list[str]:
        """List IDs of all live sessions."""
        return list(self._sessions)

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions whose game is still undecided."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Drop sessions idle for longer than max_age.

        Returns the number removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_active > max_age_seconds
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)
