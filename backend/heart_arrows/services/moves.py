"""
Heart Arrows - Move Validator

Applies a single player removal to a board.
"""

from dataclasses import dataclass
from enum import Enum

from .board import Board, CheckMode, is_clear


class MoveStatus(str, Enum):
    REMOVED = "removed"
    REJECTED = "rejected"
    # Nothing to remove or a move is already in flight
    IGNORED = "ignored"


@dataclass(frozen=True)
class MoveOutcome:
    status: MoveStatus
    remaining: int

    @property
    def accepted(self) -> bool:
        return self.status == MoveStatus.REMOVED


def attempt_remove(board: Board, x: int, y: int) -> MoveOutcome:
    """
    Remove the tile at (x, y) if its path is clear on the current board.

    A blocked tile is rejected and the board is left untouched, so the same
    call keeps returning REJECTED until a blocker is cleared. Empty slots,
    gaps and off-board coordinates are ignored.

    The caller must serialize calls (one move in flight at a time).
    """
    tile = board.get(x, y)
    if tile is None:
        return MoveOutcome(MoveStatus.IGNORED, board.remaining_count())

    if not is_clear(board, x, y, tile.kind, tile.facing, CheckMode.PLAY):
        return MoveOutcome(MoveStatus.REJECTED, board.remaining_count())

    board.remove(x, y)
    return MoveOutcome(MoveStatus.REMOVED, board.remaining_count())
