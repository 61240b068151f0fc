"""
Board Topology - The fixed 24-point Nine Men's Morris graph.

Three concentric squares joined by midlines. Points are numbered
left-to-right, top-to-bottom:

     0 ------------ 1 ------------ 2
     |              |              |
     |    3 ------- 4 ------- 5    |
     |    |         |         |    |
     |    |    6 -- 7 -- 8    |    |
     |    |    |         |    |    |
     9 -- 10 - 11        12 - 13 - 14
     |    |    |         |    |    |
     |    |   15 - 16 - 17    |    |
     |    |         |         |    |
     |   18 ------ 19 ------ 20    |
     |              |              |
    21 ----------- 22 ----------- 23

The graph never changes during play. Nodes reference their neighbours by
integer index only; the Board owns the occupancy data.
"""

from __future__ import annotations
from enum import Enum


NUM_POSITIONS = 24


class InvariantViolation(AssertionError):
    """Raised when the engine is driven with input no legal caller produces."""


class Direction(Enum):
    """Compass directions along the board lines."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Orientation(Enum):
    """Which lines through a point currently hold a mill."""
    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    BOTH = "both"

    @property
    def axes(self) -> tuple[tuple[Direction, Direction], ...]:
        """The (forward, backward) direction pairs covered by this orientation."""
        return _AXES[self]

    @classmethod
    def from_axes(cls, horizontal: bool, vertical: bool) -> Orientation:
        if horizontal and vertical:
            return cls.BOTH
        if vertical:
            return cls.VERTICAL
        if horizontal:
            return cls.HORIZONTAL
        return cls.NONE


_HORIZONTAL = (Direction.LEFT, Direction.RIGHT)
_VERTICAL = (Direction.UP, Direction.DOWN)

_AXES = {
    Orientation.NONE: (),
    Orientation.HORIZONTAL: (_HORIZONTAL,),
    Orientation.VERTICAL: (_VERTICAL,),
    Orientation.BOTH: (_HORIZONTAL, _VERTICAL),
}


_U, _D, _L, _R = Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT

# index -> {direction: neighbour index}
NEIGHBORS: tuple[dict[Direction, int], ...] = (
    {_R: 1, _D: 9},                 # 0
    {_L: 0, _R: 2, _D: 4},          # 1
    {_L: 1, _D: 14},                # 2
    {_R: 4, _D: 10},                # 3
    {_L: 3, _R: 5, _U: 1, _D: 7},   # 4
    {_L: 4, _D: 13},                # 5
    {_R: 7, _D: 11},                # 6
    {_L: 6, _R: 8, _U: 4},          # 7
    {_L: 7, _D: 12},                # 8
    {_U: 0, _R: 10, _D: 21},        # 9
    {_L: 9, _R: 11, _U: 3, _D: 18}, # 10
    {_L: 10, _U: 6, _D: 15},        # 11
    {_U: 8, _R: 13, _D: 17},        # 12
    {_L: 12, _R: 14, _U: 5, _D: 20},  # 13
    {_L: 13, _U: 2, _D: 23},        # 14
    {_U: 11, _R: 16},               # 15
    {_L: 15, _R: 17, _D: 19},       # 16
    {_L: 16, _U: 12},               # 17
    {_U: 10, _R: 19},               # 18
    {_L: 18, _R: 20, _U: 16, _D: 22},  # 19
    {_L: 19, _U: 13},               # 20
    {_U: 9, _R: 22},                # 21
    {_L: 21, _R: 23, _U: 19},       # 22
    {_L: 22, _U: 14},               # 23
)


def check_index(index: int) -> int:
    """Return index unchanged, or raise if it is not a board point."""
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvariantViolation(f"Position index must be an int, got {index!r}")
    if not 0 <= index < NUM_POSITIONS:
        raise InvariantViolation(
            f"Position index {index} out of range 0-{NUM_POSITIONS - 1}"
        )
    return index


def neighbor(index: int, direction: Direction) -> int | None:
    """Get the neighbour of a point in a direction, or None at a line end."""
    return NEIGHBORS[check_index(index)].get(direction)


def neighbors(index: int) -> list[int]:
    """All neighbours of a point."""
    return list(NEIGHBORS[check_index(index)].values())


def is_neighbor_of(index: int, other: int) -> bool:
    """Check whether two points are joined by a line segment."""
    check_index(other)
    return other in NEIGHBORS[check_index(index)].values()


def walk(index: int, direction: Direction) -> list[int]:
    """Every point reached by walking from index in one direction (excluding index)."""
    path = []
    current = neighbor(index, direction)
    while current is not None:
        path.append(current)
        current = NEIGHBORS[current].get(direction)
    return path


def line_through(index: int, axis: tuple[Direction, Direction]) -> list[int]:
    """The full board line through a point along an axis, in walking order."""
    backward, forward = axis
    return list(reversed(walk(index, backward))) + [index] + walk(index, forward)
