"""
Action System - Actions, reject reasons, and results.

There are three actions, one per phase:
1. Pick up one of your own tokens to start a move
2. Place a token (a new one, or the one you just picked up)
3. Capture an opponent token after forming a mill

All board changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import GamePhase


class ActionType(Enum):
    """Types of actions in the system."""
    PICK_UP = "pick_up"
    PLACE = "place"
    CAPTURE = "capture"

    @classmethod
    def for_phase(cls, phase: GamePhase) -> ActionType:
        """The only action accepted in a phase."""
        return _PHASE_ACTIONS[phase]


_PHASE_ACTIONS = {
    GamePhase.PICK_UP: ActionType.PICK_UP,
    GamePhase.PLACE: ActionType.PLACE,
    GamePhase.CAPTURE: ActionType.CAPTURE,
}


class RejectReason(str, Enum):
    """Why a legal-looking input was refused."""
    NOT_YOUR_TOKEN = "NOT_YOUR_TOKEN"
    NOT_OPPONENT_TOKEN = "NOT_OPPONENT_TOKEN"
    TOKEN_STUCK = "TOKEN_STUCK"
    POSITION_OCCUPIED = "POSITION_OCCUPIED"
    NOT_ADJACENT = "NOT_ADJACENT"
    SAME_POSITION = "SAME_POSITION"
    PROTECTED_BY_MILL = "PROTECTED_BY_MILL"
    GAME_OVER = "GAME_OVER"


@dataclass(frozen=True)
class Action:
    """
    A single board input resolved to an action.

    The index is the board point the player selected.
    """
    action_type: ActionType
    index: int

    @classmethod
    def pick_up(cls, index: int) -> Action:
        """Factory for lifting one of your tokens."""
        return cls(action_type=ActionType.PICK_UP, index=index)

    @classmethod
    def place(cls, index: int) -> Action:
        """Factory for putting a token down."""
        return cls(action_type=ActionType.PLACE, index=index)

    @classmethod
    def capture(cls, index: int) -> Action:
        """Factory for removing an opponent token."""
        return cls(action_type=ActionType.CAPTURE, index=index)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action was accepted
    - New board (if accepted)
    - Reason (if rejected)
    - Human readable changes (for UI/logs)
    """
    success: bool
    new_board: Any | None = None  # Board
    error: str | None = None
    error_code: RejectReason | None = None

    state_changes: list[str] = field(default_factory=list)
    mill_formed: bool = False

    @classmethod
    def failure(cls, error: str, error_code: RejectReason) -> ActionResult:
        """Create a rejection. The input board is untouched."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_board(
        cls,
        board: Any,
        changes: list[str] | None = None,
        mill_formed: bool = False,
    ) -> ActionResult:
        """Create a success result with the new board."""
        return cls(
            success=True,
            new_board=board,
            state_changes=changes or [],
            mill_formed=mill_formed,
        )
