"""Shared fixtures."""
import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest

from heart_arrows.services.board import Board, Facing, Silhouette, Tile, TileKind


def make_board(rows, tiles):
    """Board on a mask built from rows, with tiles given as {(x, y): (kind, facing)}."""
    board = Board(Silhouette(rows))
    for (x, y), (kind, facing) in tiles.items():
        board.place(x, y, Tile(kind, facing))
    return board


@pytest.fixture
def open_3x3():
    return Silhouette([[1, 1, 1], [1, 1, 1], [1, 1, 1]])


@pytest.fixture
def deadlock_board():
    """Two tiles pointing at each other: nothing can ever be removed."""
    return make_board(
        [[1, 1]],
        {
            (0, 0): (TileKind.STRAIGHT, Facing.RIGHT),
            (1, 0): (TileKind.STRAIGHT, Facing.LEFT),
        },
    )


@pytest.fixture
def blocked_row_board():
    """(0, 0) is blocked by (1, 0); the other two tiles are free."""
    return make_board(
        [[1, 1, 1]],
        {
            (0, 0): (TileKind.STRAIGHT, Facing.RIGHT),
            (1, 0): (TileKind.STRAIGHT, Facing.UP),
            (2, 0): (TileKind.STRAIGHT, Facing.UP),
        },
    )
