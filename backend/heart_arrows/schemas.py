"""
Heart Arrows - Pydantic Schemas

All validation schemas in one file.
"""

from typing import Optional, List, Literal
from pydantic import BaseModel, Field


# ============================================
# BOARD
# ============================================

class Cell(BaseModel):
    """Board cell."""
    x: int = Field(ge=0)
    y: int = Field(ge=0)


class TileSchema(BaseModel):
    """Tile on the board."""
    x: int
    y: int
    kind: Literal["straight", "curve"]
    facing: Literal["up", "right", "down", "left"]
    exit: Literal["up", "right", "down", "left"]


class BoardSchema(BaseModel):
    """Board state."""
    width: int
    height: int
    tiles: List[TileSchema]


class SilhouetteResponse(BaseModel):
    """Playable slots (True) and gaps (False), row by row."""
    width: int
    height: int
    rows: List[List[bool]]
    playable_count: int


# ============================================
# GAME
# ============================================

class SessionResponse(BaseModel):
    """Level session state."""
    session_id: str
    level: int
    seed: int
    lives: int
    status: Literal["playing", "won", "lost"]
    complete: bool
    remaining: int
    mistakes: int
    board: BoardSchema


class MoveRequest(Cell):
    """Removal attempt."""


class MoveResponse(BaseModel):
    """Removal outcome."""
    status: Literal["removed", "rejected", "ignored"]
    accepted: bool
    remaining: int
    lives: int
    game_status: Literal["playing", "won", "lost"]
    blockers: List[Cell] = []


class RemainingResponse(BaseModel):
    remaining: int


class HintResponse(BaseModel):
    """Hint."""
    x: int
    y: int


class ValidateRequest(BaseModel):
    """Replay a full solution for a level rebuilt from its seed."""
    level: int = Field(ge=1)
    seed: int = Field(ge=0)
    moves: List[Cell]


class ValidateResponse(BaseModel):
    valid: bool
    error: Optional[str] = None
    tile_count: int
