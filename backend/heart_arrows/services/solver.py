"""
Heart Arrows - Solution Helpers

Free tiles, hints, full solutions and move-sequence replay.
"""

from typing import List, Optional, Sequence, Tuple

from .board import Board, CheckMode, Coord, is_clear


def get_free_tiles(board: Board) -> List[Coord]:
    """All tiles that can be removed right now, in row-major order."""
    return [
        (x, y)
        for (x, y), tile in board.tiles()
        if is_clear(board, x, y, tile.kind, tile.facing, CheckMode.PLAY)
    ]


def get_hint(board: Board) -> Optional[Coord]:
    """Coordinate of one removable tile."""
    free = get_free_tiles(board)
    if free:
        return free[0]
    return None


def get_full_solution(board: Board) -> List[Coord]:
    """
    Greedy removal order for the board (the board itself is not modified).

    Removing a tile never blocks another one, so if any full clear exists
    the greedy order finds one. A shorter list means the board is stuck.
    """
    remaining = board.copy()
    solution = []

    while remaining.remaining_count():
        free = get_free_tiles(remaining)
        if not free:
            break
        for x, y in free:
            remaining.remove(x, y)
            solution.append((x, y))

    return solution


def validate_moves(board: Board, moves: Sequence[Coord]) -> Tuple[bool, Optional[str]]:
    """
    Replay a full sequence of removals on a copy of the board.

    Returns (valid, error). Every tile must be removed exactly once, each at
    a moment when its path is clear.
    """
    replay = board.copy()

    for step, (x, y) in enumerate(moves, start=1):
        tile = replay.get(x, y)
        if tile is None:
            return False, f"Step {step}: no tile at ({x}, {y})"
        if not is_clear(replay, x, y, tile.kind, tile.facing, CheckMode.PLAY):
            return False, f"Step {step}: tile at ({x}, {y}) is blocked"
        replay.remove(x, y)

    if replay.remaining_count():
        return False, f"Not all tiles removed: {replay.remaining_count()} left"

    return True, None
