"""
Serialization - The stored record shape of a board snapshot.

Record shape (one JSON object per snapshot):

    {
        "teams": [{"player": 0, "numUnplacedTokens": 9, "numAliveTokens": 9}, ...],
        "currentPlayer": 0,
        "positions": [{"player": 0}, {}, ...],      # 24 entries
        "gamePhase": 1,
        "pickUpPositionIndex": 4                    # omitted when not mid-move
    }

An empty position carries no "player" key. Adjacency is never stored; it
comes from topology.py. Mill membership is not stored either and is
recomputed on load.
"""

from __future__ import annotations
from typing import Any

from .mills import recount_mills
from .state import TOKENS_PER_TEAM, Board, GamePhase, Node, Player, Team
from .topology import NUM_POSITIONS


class RecordError(ValueError):
    """Raised when a stored board record is malformed."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Board record invalid with {len(errors)} error(s): {'; '.join(errors)}")


def board_to_record(board: Board) -> dict[str, Any]:
    """Turn a board into its stored record."""
    record: dict[str, Any] = {
        "teams": [
            {
                "player": int(team.player),
                "numUnplacedTokens": team.unplaced_tokens,
                "numAliveTokens": team.alive_tokens,
            }
            for team in board.teams
        ],
        "currentPlayer": int(board.current_player),
        "positions": [
            {} if node.occupant is None else {"player": int(node.occupant)}
            for node in board.nodes
        ],
        "gamePhase": int(board.phase),
    }
    if board.pick_up_index is not None:
        record["pickUpPositionIndex"] = board.pick_up_index
    return record


def board_from_record(record: dict[str, Any]) -> Board:
    """
    Rebuild a board from a stored record.

    Raises RecordError listing every problem found.
    """
    if not isinstance(record, dict):
        raise RecordError([f"record must be an object, got {type(record).__name__}"])

    errors: list[str] = []

    teams = _parse_teams(record.get("teams"), errors)
    current_player = _parse_enum(Player, record.get("currentPlayer"), "currentPlayer", errors)
    phase = _parse_enum(GamePhase, record.get("gamePhase"), "gamePhase", errors)
    nodes = _parse_positions(record.get("positions"), errors)

    pick_up_index = record.get("pickUpPositionIndex")
    if pick_up_index is not None and not _is_index(pick_up_index):
        errors.append(f"pickUpPositionIndex out of range: {pick_up_index!r}")

    if errors:
        raise RecordError(errors)

    board = Board(
        teams=teams,
        current_player=current_player,
        nodes=nodes,
        phase=phase,
        pick_up_index=pick_up_index,
    )
    recount_mills(board)
    return board


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < NUM_POSITIONS


def _parse_enum(enum_cls, value: Any, name: str, errors: list[str]):
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        errors.append(f"{name} has invalid value {value!r}")
        return None


def _parse_count(value: Any, name: str, errors: list[str]) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= TOKENS_PER_TEAM:
        errors.append(f"{name} must be an int between 0 and {TOKENS_PER_TEAM}, got {value!r}")
        return 0
    return value


def _parse_teams(value: Any, errors: list[str]) -> list[Team]:
    if not isinstance(value, list) or len(value) != 2:
        errors.append("teams must be a list of two entries")
        return []

    teams = []
    for player, data in zip(Player, value):
        if not isinstance(data, dict):
            errors.append(f"teams[{int(player)}] must be an object")
            continue
        if data.get("player") != int(player):
            errors.append(
                f"teams[{int(player)}].player must be {int(player)}, got {data.get('player')!r}"
            )
        teams.append(Team(
            player=player,
            unplaced_tokens=_parse_count(
                data.get("numUnplacedTokens"), f"teams[{int(player)}].numUnplacedTokens", errors
            ),
            alive_tokens=_parse_count(
                data.get("numAliveTokens"), f"teams[{int(player)}].numAliveTokens", errors
            ),
        ))
    return teams


def _parse_positions(value: Any, errors: list[str]) -> list[Node]:
    if not isinstance(value, list) or len(value) != NUM_POSITIONS:
        errors.append(f"positions must be a list of {NUM_POSITIONS} entries")
        return []

    nodes = []
    for index, data in enumerate(value):
        if not isinstance(data, dict):
            errors.append(f"positions[{index}] must be an object")
            continue
        occupant = data.get("player")
        if occupant is not None:
            occupant = _parse_enum(Player, occupant, f"positions[{index}].player", errors)
        nodes.append(Node(index=index, occupant=occupant))
    return nodes
