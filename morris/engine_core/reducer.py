"""
Reducer - Applies actions to a board.

The reducer is the single point of board mutation.
All board changes must go through apply_action().

Design principles:
- (board, action) -> new board; the input board is never touched
- Each phase accepts exactly one action type
- Illegal moves come back as ActionResult failures, not exceptions
- Driving the reducer with the wrong action for the phase, or an index
  off the board, raises InvariantViolation
"""

from __future__ import annotations
import logging

from .action import Action, ActionResult, ActionType, RejectReason
from .mills import all_in_mills, is_in_mill, register_mills, unregister_mills
from .state import Board, GamePhase
from .topology import InvariantViolation, Orientation, check_index, is_neighbor_of

logger = logging.getLogger(__name__)


class Reducer:
    """
    Reducer applies actions to boards.

    Stateless - all state is in Board.
    """

    def apply(self, board: Board, action: Action) -> ActionResult:
        """
        Apply an action to the board.

        Returns ActionResult with the new board or a reject reason.
        """
        check_index(action.index)
        expected = ActionType.for_phase(board.phase)
        if action.action_type is not expected:
            raise InvariantViolation(
                f"{action.action_type.value} action applied during "
                f"{board.phase.name} phase (expected {expected.value})"
            )

        handler = self._get_handler(action.action_type)
        result = handler(board, action.index)

        if result.success:
            logger.debug(
                "%s %s at position %d",
                board.current_player.label, action.action_type.value, action.index,
            )
        return result

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.PICK_UP: self._handle_pick_up,
            ActionType.PLACE: self._handle_place,
            ActionType.CAPTURE: self._handle_capture,
        }
        return handlers[action_type]

    def _handle_pick_up(self, board: Board, index: int) -> ActionResult:
        """
        Handle lifting a token to start a move.

        A stuck token can only be lifted by a team that is down to its last
        three tokens (and may therefore fly).
        """
        player = board.current_player
        team = board.playing_team

        if board.occupant(index) != player:
            return ActionResult.failure(
                f"Position {index} does not hold a {player.label} token",
                RejectReason.NOT_YOUR_TOKEN,
            )

        if board.is_stuck(index) and not team.can_fly:
            return ActionResult.failure(
                f"Token at position {index} has no free neighbour",
                RejectReason.TOKEN_STUCK,
            )

        new_board = board.clone()
        unregister_mills(new_board, index)
        new_board.node(index).occupant = None
        new_board.pick_up_index = index
        new_board.phase = GamePhase.PLACE

        return ActionResult.success_with_board(
            new_board,
            changes=[f"{player.label} picked up the token at {index}"],
        )

    def _handle_place(self, board: Board, index: int) -> ActionResult:
        """
        Handle putting a token down.

        Fresh placement: any empty point. Completing a move: an empty
        neighbour of the pick-up point, or any empty point when flying.
        """
        player = board.current_player
        team = board.playing_team
        lifted_from = board.pick_up_index

        if lifted_from is not None and index == lifted_from:
            return ActionResult.failure(
                f"Token was picked up from position {index}",
                RejectReason.SAME_POSITION,
            )

        if not board.node(index).is_empty:
            return ActionResult.failure(
                f"Position {index} is occupied",
                RejectReason.POSITION_OCCUPIED,
            )

        if lifted_from is not None and not team.can_fly:
            if not is_neighbor_of(lifted_from, index):
                return ActionResult.failure(
                    f"Position {index} is not adjacent to {lifted_from}",
                    RejectReason.NOT_ADJACENT,
                )

        new_board = board.clone()
        new_board.node(index).occupant = player
        if lifted_from is None:
            new_board.playing_team.place_token()
            changes = [f"{player.label} placed a token at {index}"]
        else:
            changes = [f"{player.label} moved a token from {lifted_from} to {index}"]
        new_board.pick_up_index = None

        orientation = register_mills(new_board, index)
        mill_formed = orientation is not Orientation.NONE
        if mill_formed:
            new_board.phase = GamePhase.CAPTURE
            changes.append(f"{player.label} formed a mill")
        else:
            new_board.switch_playing_team()

        return ActionResult.success_with_board(new_board, changes=changes, mill_formed=mill_formed)

    def _handle_capture(self, board: Board, index: int) -> ActionResult:
        """
        Handle removing an opponent token after a mill.

        Tokens in a mill are protected while the opponent still has a
        token outside any mill.
        """
        player = board.current_player
        opponent = player.opponent

        if board.occupant(index) != opponent:
            return ActionResult.failure(
                f"Position {index} does not hold a {opponent.label} token",
                RejectReason.NOT_OPPONENT_TOKEN,
            )

        if is_in_mill(board, index) and not all_in_mills(board, opponent):
            logger.warning(
                "Capture at %d refused: token is in a mill and %s has unprotected tokens",
                index, opponent.label,
            )
            return ActionResult.failure(
                f"Token at position {index} is part of a mill",
                RejectReason.PROTECTED_BY_MILL,
            )

        new_board = board.clone()
        unregister_mills(new_board, index)
        new_board.node(index).occupant = None
        new_board.non_playing_team.remove_token()
        new_board.switch_playing_team()

        return ActionResult.success_with_board(
            new_board,
            changes=[f"{player.label} captured the {opponent.label} token at {index}"],
        )


def apply_action(board: Board, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer()
    return reducer.apply(board, action)


def action_for_input(board: Board, index: int) -> Action:
    """Resolve a raw board input to the action the current phase expects."""
    return Action(action_type=ActionType.for_phase(board.phase), index=index)
