"""
Heart Arrows - Board Model & Path Checker

Silhouette mask, tiles, board state and the obstruction check shared by
the generator and the move validator.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple


Coord = Tuple[int, int]


# ============================================
# CONSTANTS
# ============================================

# 1 = playable slot, 0 = permanent gap
HEART_SHAPE = (
    (0, 1, 1, 0, 1, 1, 0),
    (1, 1, 1, 1, 1, 1, 1),
    (1, 1, 1, 1, 1, 1, 1),
    (1, 1, 1, 1, 1, 1, 1),
    (0, 1, 1, 1, 1, 1, 0),
    (0, 0, 1, 1, 1, 0, 0),
    (0, 0, 0, 1, 0, 0, 0),
)


class Facing(IntEnum):
    """Tile facing. index + 1 (mod 4) is 90° clockwise."""
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    def rotate_cw(self) -> "Facing":
        return Facing((self + 1) % 4)


class TileKind(IntEnum):
    STRAIGHT = 0
    CURVE = 1


class CheckMode(str, Enum):
    """Who is asking. The check itself is identical for both."""
    GENERATION = "generation"
    PLAY = "play"


DIRECTION_VECTORS: Dict[Facing, Coord] = {
    Facing.UP: (0, -1),
    Facing.RIGHT: (1, 0),
    Facing.DOWN: (0, 1),
    Facing.LEFT: (-1, 0),
}


# ============================================
# SILHOUETTE MASK
# ============================================

class Silhouette:
    """Immutable grid of playable slots and gaps."""

    def __init__(self, rows: Sequence[Sequence[int]]):
        cells = tuple(tuple(bool(v) for v in row) for row in rows)
        if cells and any(len(row) != len(cells[0]) for row in cells):
            raise ValueError("Silhouette rows must all have the same length")
        self._cells = cells
        self.height = len(cells)
        self.width = len(cells[0]) if cells else 0

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_playable(self, x: int, y: int) -> bool:
        """Out-of-bounds cells are never playable."""
        return self.in_bounds(x, y) and self._cells[y][x]

    def playable_cells(self) -> List[Coord]:
        """Playable coordinates in row-major order."""
        return [
            (x, y)
            for y in range(self.height)
            for x in range(self.width)
            if self._cells[y][x]
        ]

    @property
    def playable_count(self) -> int:
        return sum(sum(row) for row in self._cells)

    def to_rows(self) -> List[List[bool]]:
        return [list(row) for row in self._cells]

    def __eq__(self, other) -> bool:
        return isinstance(other, Silhouette) and self._cells == other._cells

    def __hash__(self) -> int:
        return hash(self._cells)

    def __repr__(self) -> str:
        return f"Silhouette({self.width}x{self.height}, playable={self.playable_count})"


HEART = Silhouette(HEART_SHAPE)


# ============================================
# TILE
# ============================================

@dataclass(frozen=True)
class Tile:
    kind: TileKind
    facing: Facing

    @property
    def exit_facing(self) -> Facing:
        return travel_direction(self.kind, self.facing)


def travel_direction(kind: TileKind, facing: Facing) -> Facing:
    """Straight tiles leave along their facing, curves exit 90° clockwise from it."""
    if kind == TileKind.CURVE:
        return Facing(facing).rotate_cw()
    return Facing(facing)


# ============================================
# BOARD
# ============================================

class Board:
    """
    Tiles placed on a silhouette.

    Only playable coordinates may hold a tile. The board also remembers the
    order in which the generator committed its tiles.
    """

    def __init__(self, mask: Silhouette):
        self.mask = mask
        self._tiles: Dict[Coord, Tile] = {}
        self.placement_order: List[Coord] = []

    @property
    def width(self) -> int:
        return self.mask.width

    @property
    def height(self) -> int:
        return self.mask.height

    def get(self, x: int, y: int) -> Optional[Tile]:
        return self._tiles.get((x, y))

    def is_occupied(self, x: int, y: int) -> bool:
        return (x, y) in self._tiles

    def place(self, x: int, y: int, tile: Tile):
        if not self.mask.is_playable(x, y):
            raise ValueError(f"Cell ({x}, {y}) is not a playable slot")
        if (x, y) in self._tiles:
            raise ValueError(f"Cell ({x}, {y}) is already occupied")
        self._tiles[(x, y)] = tile
        self.placement_order.append((x, y))

    def remove(self, x: int, y: int) -> Optional[Tile]:
        return self._tiles.pop((x, y), None)

    def remaining_count(self) -> int:
        return len(self._tiles)

    @property
    def is_full(self) -> bool:
        return len(self._tiles) == self.mask.playable_count

    def tiles(self) -> Iterator[Tuple[Coord, Tile]]:
        """Live tiles in row-major order."""
        for pos in sorted(self._tiles, key=lambda p: (p[1], p[0])):
            yield pos, self._tiles[pos]

    def copy(self) -> "Board":
        clone = Board(self.mask)
        clone._tiles = dict(self._tiles)
        clone.placement_order = list(self.placement_order)
        return clone

    def to_dict(self) -> Dict:
        return {
            "width": self.width,
            "height": self.height,
            "tiles": [
                {
                    "x": x,
                    "y": y,
                    "kind": tile.kind.name.lower(),
                    "facing": tile.facing.name.lower(),
                    "exit": tile.exit_facing.name.lower(),
                }
                for (x, y), tile in self.tiles()
            ],
        }

    def __repr__(self) -> str:
        return f"Board({self.width}x{self.height}, remaining={self.remaining_count()})"


def remaining_count(board: Board) -> int:
    """Number of coordinates still holding a live tile."""
    return board.remaining_count()


# ============================================
# PATH CHECKER
# ============================================

def get_path_cells(board: Board, x: int, y: int, direction: Facing) -> List[Coord]:
    """In-bounds cells strictly between (x, y) and the edge, nearest first."""
    dx, dy = DIRECTION_VECTORS[Facing(direction)]
    path = []
    cx, cy = x + dx, y + dy
    while board.mask.in_bounds(cx, cy):
        path.append((cx, cy))
        cx += dx
        cy += dy
    return path


def is_clear(
    board: Board,
    x: int,
    y: int,
    kind: TileKind,
    facing: Facing,
    mode: CheckMode = CheckMode.PLAY,
) -> bool:
    """
    Whether a tile of this kind/facing at (x, y) can fly off the board.

    Gaps and off-board space are open; any live tile on the way blocks.
    ``mode`` is accepted for both generation and play and does not change
    the result.
    """
    direction = travel_direction(kind, facing)
    for cx, cy in get_path_cells(board, x, y, direction):
        if not board.mask.is_playable(cx, cy):
            continue
        if board.is_occupied(cx, cy):
            return False
    return True


def find_blockers(board: Board, x: int, y: int) -> List[Coord]:
    """Live tiles standing in the way of the tile at (x, y)."""
    tile = board.get(x, y)
    if tile is None:
        return []
    return [
        pos
        for pos in get_path_cells(board, x, y, tile.exit_facing)
        if board.is_occupied(*pos)
    ]
