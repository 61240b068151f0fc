"""
API Module - HTTP interface.

Exposes the engine via REST API. A client:
1. Starts a game (or resumes a saved one)
2. Sends each board click as an input
3. Undoes, saves and ends games

Live games are in memory; saved games go to the GameStore file.
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    InputRequest,
    SaveRequest,
    # Responses
    GameStateResponse,
    InputResponse,
    UndoResponse,
    SaveResponse,
    SavedGameListResponse,
    ErrorResponse,
    # Shared
    BoardRecord,
    TeamInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "InputRequest",
    "SaveRequest",
    # Responses
    "GameStateResponse",
    "InputResponse",
    "UndoResponse",
    "SaveResponse",
    "SavedGameListResponse",
    "ErrorResponse",
    # Shared
    "BoardRecord",
    "TeamInfo",
    # Service
    "APIService",
    "create_app",
]
