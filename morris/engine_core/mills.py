"""
Mill Detector - Finds lines of three and keeps mill membership counts.

A mill is a full board line (three points) held by one player. Every
line on the board has exactly three points, so a point is in a mill along
an axis when the runs of same-owner tokens on either side add up to two.

Membership counts are maintained incrementally:
- after a token lands, register_mills() adds the lines it completes
- before a token leaves, unregister_mills() removes the lines it breaks
recount_mills() rebuilds them from scratch (used after loading a record).
"""

from __future__ import annotations
import logging

from .state import Board, Player
from .topology import (
    Direction, InvariantViolation, Orientation, check_index, line_through, walk,
)

logger = logging.getLogger(__name__)


def consecutive_count(board: Board, index: int, direction: Direction, owner: Player) -> int:
    """Count owner's tokens directly beyond index in one direction, stopping at the first gap."""
    count = 0
    for other in walk(index, direction):
        if board.nodes[other].occupant != owner:
            break
        count += 1
    return count


def detect_mill(board: Board, index: int) -> Orientation:
    """
    Check which mills the token at index is part of.

    Evaluated for the point's current owner; an empty point is never in a mill.
    """
    owner = board.node(index).occupant
    if owner is None:
        return Orientation.NONE

    horizontal = (
        consecutive_count(board, index, Direction.LEFT, owner)
        + consecutive_count(board, index, Direction.RIGHT, owner)
    ) == 2
    vertical = (
        consecutive_count(board, index, Direction.UP, owner)
        + consecutive_count(board, index, Direction.DOWN, owner)
    ) == 2
    return Orientation.from_axes(horizontal=horizontal, vertical=vertical)


def update_mill_membership(board: Board, index: int, orientation: Orientation, added: bool):
    """
    Add or remove one mill line per axis in orientation.

    Every point on the line is updated, including index itself, so a point
    at the crossing of two mills counts both.
    """
    check_index(index)
    delta = 1 if added else -1
    for axis in orientation.axes:
        for point in line_through(index, axis):
            node = board.nodes[point]
            node.mill_membership += delta
            if node.mill_membership < 0:
                raise InvariantViolation(
                    f"Mill membership of position {point} dropped below zero"
                )


def register_mills(board: Board, index: int) -> Orientation:
    """Record the mills completed by the token now standing at index."""
    orientation = detect_mill(board, index)
    if orientation is not Orientation.NONE:
        update_mill_membership(board, index, orientation, added=True)
        logger.debug(
            "%s formed a %s mill at position %d",
            board.occupant(index).label, orientation.value, index,
        )
    return orientation


def unregister_mills(board: Board, index: int) -> Orientation:
    """Drop the mills broken by removing the token at index. Call before vacating it."""
    orientation = detect_mill(board, index)
    if orientation is not Orientation.NONE:
        update_mill_membership(board, index, orientation, added=False)
    return orientation


def recount_mills(board: Board):
    """Recompute every point's mill membership from the current layout."""
    for node in board.nodes:
        node.mill_membership = 0
    seen: set[tuple[int, ...]] = set()
    for node in board.nodes:
        if node.occupant is None:
            continue
        for axis in detect_mill(board, node.index).axes:
            line = tuple(sorted(line_through(node.index, axis)))
            if line in seen:
                continue
            seen.add(line)
            for point in line:
                board.nodes[point].mill_membership += 1


def is_in_mill(board: Board, index: int) -> bool:
    return board.node(index).in_mill


def all_in_mills(board: Board, player: Player) -> bool:
    """True if every token player has on the board belongs to a mill."""
    return all(board.nodes[i].in_mill for i in board.positions_of(player))
