"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between a client (browser board,
bot, script) and the engine. The embedded board uses the stored record
shape, so a client can save and replay what it receives.

Error Codes:
- GAME_NOT_FOUND: Live game does not exist or has ended
- SAVED_GAME_NOT_FOUND: No saved game at that index
- VALIDATION_ERROR: Request body is invalid (e.g. missing save name)
- STORAGE_ERROR: Saved-games file could not be read or written
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field, model_serializer


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    SAVED_GAME_NOT_FOUND = "SAVED_GAME_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"


# =============================================================================
# Board Record Models (stored shape)
# =============================================================================

class TeamRecord(BaseModel):
    """Team ledger as stored."""
    player: int = Field(..., ge=0, le=1)
    numUnplacedTokens: int = Field(..., ge=0, le=9)
    numAliveTokens: int = Field(..., ge=0, le=9)


class PositionRecord(BaseModel):
    """One board point as stored; player is absent when empty."""
    player: Optional[int] = Field(None, ge=0, le=1)

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler):
        return {k: v for k, v in handler(self).items() if v is not None}


class BoardRecord(BaseModel):
    """A full board snapshot in stored form."""
    teams: list[TeamRecord]
    currentPlayer: int = Field(..., ge=0, le=1)
    positions: list[PositionRecord] = Field(..., min_length=24, max_length=24)
    gamePhase: int = Field(..., ge=0, le=2)
    pickUpPositionIndex: Optional[int] = Field(None, ge=0, le=23)

    @model_serializer(mode="wrap")
    def _omit_pick_up(self, handler):
        # pickUpPositionIndex is left out when not mid-move, as in the file
        return {k: v for k, v in handler(self).items() if v is not None}


# =============================================================================
# Shared Models
# =============================================================================

class TeamInfo(BaseModel):
    """Team information for display."""
    player: int
    name: str
    unplaced_tokens: int
    alive_tokens: int
    tokens_on_board: int
    can_fly: bool = False
    is_current_turn: bool = False


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to start a new game."""
    name: Optional[str] = Field(None, description="Name used when saving")


class InputRequest(BaseModel):
    """A selected board point."""
    index: int = Field(..., ge=0, le=23, description="Board point 0-23")


class SaveRequest(BaseModel):
    """Request to save a live game."""
    name: Optional[str] = Field(None, description="Name to save under (defaults to the game's name)")
    as_new: bool = Field(
        False, description="Append a new entry even if the game was loaded from one"
    )


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Complete state of a live game for display."""
    game_id: str
    status: SessionStatus
    name: Optional[str] = None
    game_index: Optional[int] = Field(None, description="Index in the saved games list")

    current_player: int
    current_player_name: str
    phase: str = Field(..., description="pick_up, place or capture")
    expected_action: str = Field(..., description="Action the next input will perform")
    pick_up_index: Optional[int] = None

    teams: list[TeamInfo] = Field(default_factory=list)
    mill_positions: list[int] = Field(
        default_factory=list, description="Points currently part of a mill"
    )
    board: BoardRecord
    history_length: int = 1

    winner: Optional[int] = None
    winner_name: Optional[str] = None
    api_version: str = "v1"


class InputResponse(BaseModel):
    """Outcome of a board input. A rejection is a normal response, not an error."""
    accepted: bool
    action_type: Optional[str] = None
    changes: list[str] = Field(default_factory=list)
    mill_formed: bool = False
    error: Optional[str] = None
    reject_reason: Optional[str] = None
    game_state: GameStateResponse
    api_version: str = "v1"


class UndoResponse(BaseModel):
    """Outcome of an undo request."""
    undone: bool = Field(..., description="False when only the initial board remained")
    game_state: GameStateResponse
    api_version: str = "v1"


class GameListResponse(BaseModel):
    """List of live games."""
    games: list[str]
    count: int


class EndGameResponse(BaseModel):
    """Response from ending a live game."""
    success: bool
    game_id: str


class SaveResponse(BaseModel):
    """Response from saving a game."""
    game_id: str
    game_index: int
    name: str
    api_version: str = "v1"


class SavedGameInfo(BaseModel):
    """A saved game entry."""
    game_index: int
    name: str
    num_boards: int


class SavedGameListResponse(BaseModel):
    """List of saved games."""
    games: list[SavedGameInfo]
    count: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    env: str
    version: str
