"""
Engine Core - Deterministic Nine Men's Morris rules.

The engine is the runtime that:
1. Holds the fixed board graph
2. Manages Board snapshots and team ledgers
3. Detects mills and tracks mill membership
4. Applies actions via the reducer
5. Decides victory
"""

from .topology import Direction, Orientation, InvariantViolation, NUM_POSITIONS
from .state import Board, Node, Team, Player, GamePhase
from .action import Action, ActionType, ActionResult, RejectReason
from .mills import detect_mill, update_mill_membership
from .reducer import Reducer, apply_action, action_for_input
from .victory import check_victory
from .serialization import RecordError, board_from_record, board_to_record

__all__ = [
    "Direction",
    "Orientation",
    "InvariantViolation",
    "NUM_POSITIONS",
    "Board",
    "Node",
    "Team",
    "Player",
    "GamePhase",
    "Action",
    "ActionType",
    "ActionResult",
    "RejectReason",
    "detect_mill",
    "update_mill_membership",
    "Reducer",
    "apply_action",
    "action_for_input",
    "check_victory",
    "RecordError",
    "board_from_record",
    "board_to_record",
]
