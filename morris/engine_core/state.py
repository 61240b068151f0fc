"""
Board State - The snapshot of a Nine Men's Morris game at one point in time.

Design principles:
- Snapshot per action: the reducer clones, mutates the clone, returns it
- Serializable: see serialization.py for the stored record shape
- The adjacency graph is static (topology.py); only occupancy lives here
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from enum import IntEnum

from .topology import NEIGHBORS, NUM_POSITIONS, InvariantViolation, check_index


TOKENS_PER_TEAM = 9

# A team at or below this many tokens may move to any empty point.
FLYING_THRESHOLD = 3

# A team below this many tokens has lost.
MIN_ALIVE_TOKENS = 3


class Player(IntEnum):
    """The two sides. Values are the stored player codes."""
    CAT = 0
    DOG = 1

    @property
    def opponent(self) -> Player:
        return Player(1 - self.value)

    @property
    def label(self) -> str:
        return self.name.capitalize()


class GamePhase(IntEnum):
    """Turn sub-state. Values are the stored phase codes."""
    PICK_UP = 0
    PLACE = 1
    CAPTURE = 2


@dataclass
class Team:
    """Token ledger for one player."""
    player: Player
    unplaced_tokens: int = TOKENS_PER_TEAM
    alive_tokens: int = TOKENS_PER_TEAM

    @property
    def can_fly(self) -> bool:
        return self.alive_tokens <= FLYING_THRESHOLD

    @property
    def all_placed(self) -> bool:
        return self.unplaced_tokens == 0

    def place_token(self):
        """Use up one unplaced token. No-op once all are on the board."""
        if self.unplaced_tokens > 0:
            self.unplaced_tokens -= 1

    def remove_token(self):
        """Lose one token to a capture."""
        if self.alive_tokens <= 0:
            raise InvariantViolation(f"{self.player.label} has no tokens left to lose")
        self.alive_tokens -= 1


@dataclass
class Node:
    """
    One point on the board.

    mill_membership counts the complete mill lines through this point
    (0, 1 or 2). It is kept up to date by mills.update_mill_membership.
    """
    index: int
    occupant: Player | None = None
    mill_membership: int = 0

    @property
    def is_empty(self) -> bool:
        return self.occupant is None

    @property
    def in_mill(self) -> bool:
        return self.mill_membership > 0


def _fresh_teams() -> list[Team]:
    return [Team(Player.CAT), Team(Player.DOG)]


def _empty_nodes() -> list[Node]:
    return [Node(index=i) for i in range(NUM_POSITIONS)]


@dataclass
class Board:
    """
    Complete board state for one turn snapshot.

    Boards pushed onto a game's history are never mutated again; every
    action works on clone().
    """
    teams: list[Team] = field(default_factory=_fresh_teams)
    current_player: Player = Player.CAT
    nodes: list[Node] = field(default_factory=_empty_nodes)
    phase: GamePhase = GamePhase.PLACE

    # Point a token was lifted from during a move, until it is put down
    pick_up_index: int | None = None

    @property
    def playing_team(self) -> Team:
        """The team whose turn it is."""
        return self.teams[self.current_player]

    @property
    def non_playing_team(self) -> Team:
        return self.teams[self.current_player.opponent]

    def team(self, player: Player) -> Team:
        return self.teams[player]

    def node(self, index: int) -> Node:
        return self.nodes[check_index(index)]

    def occupant(self, index: int) -> Player | None:
        return self.node(index).occupant

    def positions_of(self, player: Player) -> list[int]:
        """Indices of all points holding a token of player."""
        return [n.index for n in self.nodes if n.occupant == player]

    def is_stuck(self, index: int) -> bool:
        """
        True if every existing neighbour of the point is occupied.

        Missing neighbours (line ends) do not free a token.
        """
        for other in NEIGHBORS[check_index(index)].values():
            if self.nodes[other].is_empty:
                return False
        return True

    def switch_playing_team(self):
        """Pass the turn and reset the phase for the incoming player."""
        self.current_player = self.current_player.opponent
        if self.playing_team.all_placed:
            self.phase = GamePhase.PICK_UP
        else:
            self.phase = GamePhase.PLACE
        self.pick_up_index = None

    def clone(self) -> Board:
        """Deep copy the board."""
        return deepcopy(self)
