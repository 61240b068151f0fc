"""
FastAPI Application - REST API for board clients.

Endpoints:
    GET    /api/v1/health                     Health check
    POST   /api/v1/games                      Start a new game
    GET    /api/v1/games                      List live games
    GET    /api/v1/games/{id}                 Get game state
    POST   /api/v1/games/{id}/input           Select a board point
    POST   /api/v1/games/{id}/undo            Undo the latest action
    DELETE /api/v1/games/{id}                 End a live game
    POST   /api/v1/games/{id}/save            Save to the saved-games file
    GET    /api/v1/saved                      List saved games
    POST   /api/v1/saved/{index}/load         Resume a saved game

Input Flow:
    Every click on the board is one POST /input with the point index.
    The current phase decides what it does (pick up, place or capture).
    An illegal input is not an HTTP error: the response has
    accepted=false and a reject_reason, and the game is unchanged.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Union
import logging
import os

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..session import SessionManager
from ..storage import GameStore
from .service import APIService
from .schemas import (
    # Request models
    CreateGameRequest,
    InputRequest,
    SaveRequest,
    # Response models
    EndGameResponse,
    ErrorResponse,
    GameListResponse,
    GameStateResponse,
    HealthResponse,
    InputResponse,
    SavedGameListResponse,
    SaveResponse,
    UndoResponse,
    # Enums
    ErrorCode,
)

logger = logging.getLogger(__name__)

# Environment configuration
MORRIS_ENV = os.getenv("MORRIS_ENV", "development")
MORRIS_DATA_FILE = os.getenv("MORRIS_DATA_FILE", None)
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

_ERROR_STATUS = {
    ErrorCode.GAME_NOT_FOUND: 404,
    ErrorCode.SAVED_GAME_NOT_FOUND: 404,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.STORAGE_ERROR: 500,
}


def create_app(service: APIService | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Morris Engine API",
        description="""
Nine Men's Morris rules engine - Cat vs Dog.

## Playing

Send every board click to `POST /games/{id}/input` with the point index
(0-23). The game phase decides the action:

| Phase | Input does |
|-------|------------|
| `place` | put a new token down, or finish a move |
| `pick_up` | lift one of your tokens to move it |
| `capture` | remove an opponent token after forming a mill |

Illegal inputs return `accepted=false` with a `reject_reason`.

## Error Codes

| Code | Description |
|------|-------------|
| `GAME_NOT_FOUND` | Live game does not exist |
| `SAVED_GAME_NOT_FOUND` | No saved game at that index |
| `VALIDATION_ERROR` | Request is invalid |
| `STORAGE_ERROR` | Saved games file unreadable or unwritable |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if service is None:
        store = GameStore(MORRIS_DATA_FILE) if MORRIS_DATA_FILE else GameStore()
        service = APIService(session_manager=SessionManager(), store=store)
    api_service = service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Turn a service ErrorResponse into a JSON response with the right status."""
        return JSONResponse(
            status_code=_ERROR_STATUS.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    def respond(result):
        if isinstance(result, ErrorResponse):
            return make_error_response(result)
        return result

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameStateResponse,
        tags=["Games"],
        summary="Start a new game",
    )
    async def create_game(body: CreateGameRequest | None = None) -> GameStateResponse:
        """Start a new game. Cat moves first."""
        return api_service.create_game(body or CreateGameRequest())

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List live games",
    )
    async def list_games() -> GameListResponse:
        """List all live game IDs."""
        return api_service.list_games()

    @app.get(
        "/api/v1/games/{game_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get game state",
    )
    async def get_game(game_id: str) -> Union[GameStateResponse, JSONResponse]:
        """Get the current board, phase, teams and winner of a live game."""
        return respond(api_service.get_game_state(game_id))

    @app.delete(
        "/api/v1/games/{game_id}",
        response_model=EndGameResponse,
        tags=["Games"],
        summary="End a live game",
    )
    async def end_game(
        game_id: str,
        reason: str = Query("user_ended", description="Reason for ending"),
    ) -> EndGameResponse:
        """End a live game. Unsaved progress is lost."""
        return api_service.end_game(game_id, reason)

    # =========================================================================
    # Play Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games/{game_id}/input",
        response_model=InputResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Play"],
        summary="Select a board point",
    )
    async def board_input(
        game_id: str,
        body: InputRequest,
    ) -> Union[InputResponse, JSONResponse]:
        """
        Apply a board input.

        **Request Body:**
        ```json
        {"index": 4}
        ```
        """
        return respond(api_service.apply_input(game_id, body.index))

    @app.post(
        "/api/v1/games/{game_id}/undo",
        response_model=UndoResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Play"],
        summary="Undo the latest action",
    )
    async def undo(game_id: str) -> Union[UndoResponse, JSONResponse]:
        """Step back one committed action. The initial board is never undone."""
        return respond(api_service.undo(game_id))

    # =========================================================================
    # Saved Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games/{game_id}/save",
        response_model=SaveResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Missing or invalid name"},
            404: {"model": ErrorResponse},
            500: {"model": ErrorResponse, "description": "Saved games file error"},
        },
        tags=["Saved Games"],
        summary="Save a live game",
    )
    async def save_game(
        game_id: str,
        body: SaveRequest | None = None,
    ) -> Union[SaveResponse, JSONResponse]:
        """
        Save the game's full history.

        A game loaded from the saved list overwrites its entry unless
        `as_new` is true.
        """
        return respond(api_service.save_game(game_id, body or SaveRequest()))

    @app.get(
        "/api/v1/saved",
        response_model=SavedGameListResponse,
        responses={500: {"model": ErrorResponse}},
        tags=["Saved Games"],
        summary="List saved games",
    )
    async def list_saved() -> Union[SavedGameListResponse, JSONResponse]:
        """List saved games with their indices."""
        return respond(api_service.list_saved())

    @app.post(
        "/api/v1/saved/{game_index}/load",
        response_model=GameStateResponse,
        responses={
            404: {"model": ErrorResponse},
            500: {"model": ErrorResponse, "description": "Saved game is corrupt"},
        },
        tags=["Saved Games"],
        summary="Resume a saved game",
    )
    async def load_saved(game_index: int) -> Union[GameStateResponse, JSONResponse]:
        """Load a saved game as a new live game."""
        return respond(api_service.load_saved(game_index))

    # =========================================================================
    # System Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="morris-engine",
            env=MORRIS_ENV,
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Morris Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/api/v1/health",
        }

    return app


# For running directly: uvicorn morris.api.app:app
app = create_app()
