"""
Game - Turn sequencing, board history and undo.

The loop:
1. A board input (point index) comes in
2. The current phase picks the action (pick up, place or capture)
3. The reducer accepts or rejects it
4. Accepted boards are pushed onto history
5. Victory is evaluated on the new board

History holds one snapshot per committed action, starting with the
initial board. The working board is always a deep copy of the top entry,
so nothing done to it can reach a stored snapshot.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from ..engine_core.action import ActionResult, ActionType, RejectReason
from ..engine_core.reducer import Reducer, action_for_input
from ..engine_core.state import Board, GamePhase, Player
from ..engine_core.victory import check_victory

logger = logging.getLogger(__name__)


@dataclass
class TurnResult:
    """
    Result of processing one board input.

    A rejected input leaves the game exactly as it was; board is then the
    unchanged current board.
    """
    accepted: bool
    board: Board
    action_type: ActionType | None = None

    changes: list[str] = field(default_factory=list)
    mill_formed: bool = False

    error: str | None = None
    error_code: RejectReason | None = None

    # Game over info
    loser: Player | None = None

    @property
    def winner(self) -> Player | None:
        return self.loser.opponent if self.loser is not None else None


class Game:
    """
    A single game of Nine Men's Morris.

    Usage:
        game = Game(name="Friday")

        result = game.apply_input(4)
        if not result.accepted:
            show(result.error)

        game.undo()
    """

    def __init__(
        self,
        history: list[Board] | None = None,
        name: str | None = None,
        game_index: int | None = None,
        reducer: Reducer | None = None,
    ):
        if history:
            self._history = [board.clone() for board in history]
        else:
            self._history = [Board()]
        self.current_board = self._history[-1].clone()
        self.name = name
        self.game_index = game_index
        self.reducer = reducer or Reducer()

    @classmethod
    def from_history(
        cls,
        boards: list[Board],
        name: str | None = None,
        game_index: int | None = None,
    ) -> Game:
        """Rebuild a game from loaded snapshots. The last one becomes current."""
        if not boards:
            raise ValueError("A game needs at least one board snapshot")
        return cls(history=boards, name=name, game_index=game_index)

    @property
    def history(self) -> list[Board]:
        """Committed snapshots, oldest first. The list is a copy; the boards are not."""
        return list(self._history)

    @property
    def loser(self) -> Player | None:
        return check_victory(self.current_board)

    @property
    def winner(self) -> Player | None:
        loser = self.loser
        return loser.opponent if loser is not None else None

    @property
    def is_over(self) -> bool:
        return self.loser is not None

    def perform_turn(self, index: int) -> ActionResult:
        """
        Run the action the current phase calls for at index.

        The resulting board is committed to history only if accepted. On
        success new_board is the working copy, never the stored snapshot.
        """
        action = action_for_input(self.current_board, index)
        result = self.reducer.apply(self.current_board, action)
        if result.success:
            self._commit(result.new_board)
            result.new_board = self.current_board
        return result

    def apply_input(self, index: int) -> TurnResult:
        """
        Single entry point for a selected board point.

        Rejects everything once the game is decided.
        """
        loser = self.loser
        if loser is not None:
            return TurnResult(
                accepted=False,
                board=self.current_board,
                error=f"Game is over: {loser.opponent.label} won",
                error_code=RejectReason.GAME_OVER,
                loser=loser,
            )

        action_type = ActionType.for_phase(self.current_board.phase)
        result = self.perform_turn(index)
        if not result.success:
            return TurnResult(
                accepted=False,
                board=self.current_board,
                action_type=action_type,
                error=result.error,
                error_code=result.error_code,
            )

        loser = None
        if self.current_board.phase != GamePhase.CAPTURE:
            loser = check_victory(self.current_board)
            if loser is not None:
                logger.info(
                    "Game %s over: %s won", self.name or "(unsaved)", loser.opponent.label,
                )

        return TurnResult(
            accepted=True,
            board=self.current_board,
            action_type=action_type,
            changes=result.state_changes,
            mill_formed=result.mill_formed,
            loser=loser,
        )

    def undo(self) -> Board:
        """
        Drop the latest snapshot and return to the one before it.

        The initial snapshot is never discarded.
        """
        if len(self._history) > 1:
            self._history.pop()
            self.current_board = self._history[-1].clone()
        return self.current_board

    def _commit(self, board: Board):
        """Push a new snapshot and derive a fresh working copy from it."""
        self._history.append(board)
        self.current_board = board.clone()
