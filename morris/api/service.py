"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages live games through the SessionManager
3. Saves and loads games through the GameStore
4. Formats responses for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateGameRequest,
    SaveRequest,
    # Responses
    BoardRecord,
    EndGameResponse,
    ErrorCode,
    ErrorResponse,
    GameListResponse,
    GameStateResponse,
    InputResponse,
    SavedGameInfo,
    SavedGameListResponse,
    SaveResponse,
    SessionStatus,
    TeamInfo,
    UndoResponse,
)
from ..engine_core.action import ActionType
from ..engine_core.serialization import RecordError, board_to_record
from ..session import Session, SessionManager
from ..storage import GameStore

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        state = service.create_game(CreateGameRequest(name="Friday"))
        response = service.apply_input(state.game_id, 4)
        service.save_game(state.game_id, SaveRequest())
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    store: GameStore = field(default_factory=GameStore)

    def create_game(self, request: CreateGameRequest) -> GameStateResponse:
        """
        Start a new game.
        """
        session = self.session_manager.create_session(name=request.name)
        return self._game_state(session)

    def get_game_state(self, game_id: str) -> GameStateResponse | ErrorResponse:
        """
        Get the current state of a live game.
        """
        session = self.session_manager.get_session(game_id)
        if not session:
            return self._not_found(game_id)
        return self._game_state(session)

    def apply_input(self, game_id: str, index: int) -> InputResponse | ErrorResponse:
        """
        Apply a board input to a live game.

        Rejections come back as a normal InputResponse with accepted=False.
        """
        session = self.session_manager.get_session(game_id)
        if not session:
            return self._not_found(game_id)

        result = session.game.apply_input(index)
        session.touch()

        return InputResponse(
            accepted=result.accepted,
            action_type=result.action_type.value if result.action_type else None,
            changes=result.changes,
            mill_formed=result.mill_formed,
            error=result.error,
            reject_reason=result.error_code.value if result.error_code else None,
            game_state=self._game_state(session),
        )

    def undo(self, game_id: str) -> UndoResponse | ErrorResponse:
        """
        Undo the latest committed action of a live game.
        """
        session = self.session_manager.get_session(game_id)
        if not session:
            return self._not_found(game_id)

        before = len(session.game.history)
        session.game.undo()
        session.touch()

        return UndoResponse(
            undone=len(session.game.history) < before,
            game_state=self._game_state(session),
        )

    def end_game(self, game_id: str, reason: str = "user_ended") -> EndGameResponse:
        """End a live game without saving."""
        success = self.session_manager.end_session(game_id, reason)
        return EndGameResponse(success=success, game_id=game_id)

    def list_games(self) -> GameListResponse:
        """List live game IDs."""
        games = self.session_manager.list_sessions()
        return GameListResponse(games=games, count=len(games))

    def save_game(self, game_id: str, request: SaveRequest) -> SaveResponse | ErrorResponse:
        """
        Save a live game's history.

        A game loaded from the store overwrites its entry unless as_new is set.
        """
        session = self.session_manager.get_session(game_id)
        if not session:
            return self._not_found(game_id)

        game = session.game
        game_index = None if request.as_new else game.game_index
        try:
            written = self.store.save(game, game_index=game_index, name=request.name)
        except OSError as e:
            logger.error("Saving game %s failed: %s", game_id, e)
            return ErrorResponse(
                error=f"Could not write saved games: {e}",
                error_code=ErrorCode.STORAGE_ERROR,
            )
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.VALIDATION_ERROR)

        return SaveResponse(game_id=game_id, game_index=written, name=game.name)

    def list_saved(self) -> SavedGameListResponse | ErrorResponse:
        """List saved games."""
        try:
            saved = self.store.list_games()
        except OSError as e:
            return ErrorResponse(
                error=f"Could not read saved games: {e}",
                error_code=ErrorCode.STORAGE_ERROR,
            )
        games = [
            SavedGameInfo(game_index=g.index, name=g.name, num_boards=g.num_boards)
            for g in saved
        ]
        return SavedGameListResponse(games=games, count=len(games))

    def load_saved(self, game_index: int) -> GameStateResponse | ErrorResponse:
        """Resume a saved game as a new live game."""
        try:
            session = self.session_manager.load_saved(self.store, game_index)
        except IndexError as e:
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.SAVED_GAME_NOT_FOUND,
                details={"game_index": game_index},
            )
        except RecordError as e:
            logger.error("Saved game %d is corrupt: %s", game_index, e)
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.STORAGE_ERROR,
                details={"problems": e.errors},
            )
        except OSError as e:
            return ErrorResponse(
                error=f"Could not read saved games: {e}",
                error_code=ErrorCode.STORAGE_ERROR,
            )
        return self._game_state(session)

    def _not_found(self, game_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Game {game_id} not found",
            error_code=ErrorCode.GAME_NOT_FOUND,
            details={"game_id": game_id},
        )

    def _game_state(self, session: Session) -> GameStateResponse:
        """Convert a session to a GameStateResponse."""
        game = session.game
        board = game.current_board
        winner = game.winner

        teams = [
            TeamInfo(
                player=int(team.player),
                name=team.player.label,
                unplaced_tokens=team.unplaced_tokens,
                alive_tokens=team.alive_tokens,
                tokens_on_board=len(board.positions_of(team.player)),
                can_fly=team.can_fly,
                is_current_turn=team.player == board.current_player,
            )
            for team in board.teams
        ]

        return GameStateResponse(
            game_id=session.session_id,
            status=SessionStatus(session.state.value),
            name=game.name,
            game_index=game.game_index,
            current_player=int(board.current_player),
            current_player_name=board.current_player.label,
            phase=board.phase.name.lower(),
            expected_action=ActionType.for_phase(board.phase).value,
            pick_up_index=board.pick_up_index,
            teams=teams,
            mill_positions=[n.index for n in board.nodes if n.in_mill],
            board=BoardRecord.model_validate(board_to_record(board)),
            history_length=len(game.history),
            winner=int(winner) if winner is not None else None,
            winner_name=winner.label if winner is not None else None,
        )
