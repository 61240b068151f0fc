"""
Victory - Decides whether the team about to move has lost.
"""

from __future__ import annotations

from .state import MIN_ALIVE_TOKENS, Board, GamePhase, Player


def check_victory(board: Board) -> Player | None:
    """
    Get the losing player on this board, if any.

    A board waiting for a capture is mid-turn and never reports a loser.

    A team loses when:
    - it is down to fewer than three tokens, or
    - it is about to move, all its tokens are on the board, and every one
      of them is stuck.
    """
    if board.phase == GamePhase.CAPTURE:
        return None

    for player in (board.current_player, board.current_player.opponent):
        if board.team(player).alive_tokens < MIN_ALIVE_TOKENS:
            return player

    team = board.playing_team
    if not team.all_placed:
        return None
    # mid-move: the lifted token is still in hand
    if board.pick_up_index is not None:
        return None

    # flying does not exempt a team: three boxed-in tokens still lose
    for index in board.positions_of(team.player):
        if not board.is_stuck(index):
            return None
    return team.player


def winner_of(board: Board) -> Player | None:
    """The opponent of the losing player, if the game is decided."""
    loser = check_victory(board)
    return loser.opponent if loser is not None else None
