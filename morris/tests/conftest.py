"""
Pytest fixtures for Morris tests.
"""

import pytest

from ..engine_core.mills import recount_mills
from ..engine_core.state import Board, GamePhase, Node, Player, Team
from ..session import Game
from ..storage import GameStore


@pytest.fixture
def empty_board() -> Board:
    """A fresh board: Cat to place, nine tokens each."""
    return Board()


@pytest.fixture
def make_board():
    """
    Build a board from token positions.

    Alive counts default to the number of tokens on the board plus the
    unplaced ones, so the ledgers always match the layout.
    """
    def _make(
        cat=(),
        dog=(),
        current=Player.CAT,
        phase=None,
        cat_unplaced=0,
        dog_unplaced=0,
        cat_alive=None,
        dog_alive=None,
        pick_up_index=None,
    ) -> Board:
        nodes = [Node(index=i) for i in range(24)]
        for i in cat:
            nodes[i].occupant = Player.CAT
        for i in dog:
            nodes[i].occupant = Player.DOG

        teams = [
            Team(
                Player.CAT,
                unplaced_tokens=cat_unplaced,
                alive_tokens=cat_alive if cat_alive is not None else len(cat) + cat_unplaced,
            ),
            Team(
                Player.DOG,
                unplaced_tokens=dog_unplaced,
                alive_tokens=dog_alive if dog_alive is not None else len(dog) + dog_unplaced,
            ),
        ]

        if phase is None:
            unplaced = cat_unplaced if current == Player.CAT else dog_unplaced
            phase = GamePhase.PLACE if unplaced > 0 or pick_up_index is not None else GamePhase.PICK_UP

        board = Board(
            teams=teams,
            current_player=current,
            nodes=nodes,
            phase=phase,
            pick_up_index=pick_up_index,
        )
        recount_mills(board)
        return board

    return _make


@pytest.fixture
def new_game() -> Game:
    """A new unnamed game."""
    return Game()


@pytest.fixture
def store(tmp_path) -> GameStore:
    """A game store writing to a temp directory."""
    return GameStore(tmp_path / "data.txt")


def play(game: Game, *indices: int):
    """Feed inputs to a game, failing loudly on the first rejection."""
    for index in indices:
        result = game.apply_input(index)
        assert result.accepted, f"input {index} rejected: {result.error}"
    return game
