"""
Heart Arrows - Level Generator

Reverse placement:
  A tile is committed only if its path is ALREADY clear against the tiles
  placed before it. Tiles placed later can never block it once those are
  gone, so removing tiles in reverse placement order always works.
  A fully filled board is solvable by construction.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..config import settings
from .board import (
    HEART,
    Board,
    CheckMode,
    Facing,
    Silhouette,
    Tile,
    TileKind,
    is_clear,
)
from .solver import get_full_solution


logger = logging.getLogger(__name__)


# ============================================
# SEEDED RANDOM
# ============================================

class SeededRandom:
    """Deterministic PRNG so a level can be rebuilt from its seed."""

    def __init__(self, seed: int):
        self.seed = seed
        self._state = seed & 0x7FFFFFFF

    def next(self) -> float:
        """Returns a number in [0, 1)."""
        self._state = (self._state * 1103515245 + 12345) & 0x7FFFFFFF
        return self._state / 0x80000000

    def next_int(self, min_val: int, max_val: int) -> int:
        """Returns an integer in [min, max]."""
        if min_val > max_val:
            return min_val
        return min_val + int(self.next() * (max_val - min_val + 1))

    def shuffle(self, arr: list) -> list:
        """Fisher-Yates shuffle."""
        result = arr.copy()
        for i in range(len(result) - 1, 0, -1):
            j = self.next_int(0, i)
            result[i], result[j] = result[j], result[i]
        return result


def new_seed() -> int:
    return random.randrange(1, 0x7FFFFFFF)


# ============================================
# DIFFICULTY
# ============================================

def get_curve_chance(level: int) -> float:
    """Probability of a curved tile. Higher levels get more curves."""
    chance = settings.CURVE_CHANCE_BASE + settings.CURVE_CHANCE_PER_LEVEL * level
    return min(1.0, max(0.0, chance))


def random_tile(level: int, rng: SeededRandom) -> Tile:
    kind = TileKind.CURVE if rng.next() < get_curve_chance(level) else TileKind.STRAIGHT
    facing = Facing(rng.next_int(0, 3))
    return Tile(kind, facing)


# ============================================
# FULL BOARD
# ============================================

def generate_full_board(
    mask: Silhouette,
    level: int,
    rng: SeededRandom,
    max_attempts: Optional[int] = None,
) -> Tuple[Board, bool]:
    """
    Try to fill every playable slot.

    Returns (board, success). On failure the board is partially filled and
    should be discarded by the caller.
    """
    if max_attempts is None:
        max_attempts = settings.GENERATION_MAX_ATTEMPTS

    board = Board(mask)
    valid_spots = mask.playable_count
    if valid_spots == 0:
        return board, True

    positions = rng.shuffle(mask.playable_cells())
    position_index = 0
    attempts = 0

    while board.remaining_count() < valid_spots and attempts < max_attempts:
        attempts += 1

        # Shuffled slots first, then random cells anywhere on the grid
        if position_index < len(positions):
            x, y = positions[position_index]
            position_index += 1
        else:
            x = rng.next_int(0, mask.width - 1)
            y = rng.next_int(0, mask.height - 1)

        if not mask.is_playable(x, y) or board.is_occupied(x, y):
            continue

        tile = random_tile(level, rng)

        # Checked only against tiles placed so far
        if is_clear(board, x, y, tile.kind, tile.facing, CheckMode.GENERATION):
            board.place(x, y, tile)

    success = board.remaining_count() == valid_spots
    logger.debug(
        f"[Generator] full run level={level} placed={board.remaining_count()}/{valid_spots} "
        f"attempts={attempts} success={success}"
    )
    return board, success


# ============================================
# PARTIAL BOARD (FALLBACK)
# ============================================

PARTIAL_TRY_ORDER: List[Tuple[TileKind, Facing]] = [
    (kind, facing) for kind in (TileKind.STRAIGHT, TileKind.CURVE) for facing in Facing
]


def generate_partial_board(
    mask: Silhouette,
    level: int,
    rng: SeededRandom,
    max_attempts: Optional[int] = None,
    fill_ratio: Optional[float] = None,
) -> Board:
    """
    Best-effort board that always terminates.

    Visits each slot once and commits the first orientation that passes the
    check. Slots where nothing fits stay empty for the level.
    """
    if max_attempts is None:
        max_attempts = settings.PARTIAL_MAX_ATTEMPTS
    if fill_ratio is None:
        fill_ratio = settings.PARTIAL_FILL_RATIO

    board = Board(mask)
    target_spots = math.floor(mask.playable_count * fill_ratio)
    attempts = 0

    for x, y in rng.shuffle(mask.playable_cells()):
        if board.remaining_count() >= target_spots or attempts >= max_attempts:
            break
        if board.is_occupied(x, y):
            continue

        for kind, facing in PARTIAL_TRY_ORDER:
            attempts += 1
            if is_clear(board, x, y, kind, facing, CheckMode.GENERATION):
                board.place(x, y, Tile(kind, facing))
                break

    logger.debug(
        f"[Generator] partial run level={level} placed={board.remaining_count()}/"
        f"{mask.playable_count} target={target_spots} attempts={attempts}"
    )
    return board


# ============================================
# MAIN GENERATOR FUNCTION
# ============================================

@dataclass
class LevelBuild:
    level: int
    seed: int
    board: Board
    complete: bool
    runs: int


def build_level(
    level: int,
    seed: Optional[int] = None,
    mask: Silhouette = HEART,
    max_retries: Optional[int] = None,
) -> LevelBuild:
    """
    Build a level: repeated full runs, then the partial fallback.

    The same (level, seed, mask) always gives the same board.
    """
    if max_retries is None:
        max_retries = settings.GENERATION_MAX_RETRIES
    if seed is None:
        seed = new_seed()

    rng = SeededRandom(seed)

    for run in range(1, max_retries + 1):
        board, success = generate_full_board(mask, level, rng)
        if success:
            return LevelBuild(level=level, seed=seed, board=board, complete=True, runs=run)

    logger.warning(
        f"[Generator] Could not generate full board for level={level} seed={seed} "
        f"after {max_retries} runs, using partial board"
    )
    board = generate_partial_board(mask, level, rng)
    return LevelBuild(level=level, seed=seed, board=board, complete=False, runs=max_retries)


def start_level(level: int, seed: Optional[int] = None, mask: Silhouette = HEART) -> Board:
    """Fresh board for a level (full if possible, partial otherwise)."""
    return build_level(level, seed=seed, mask=mask).board


# ============================================
# VALIDATION
# ============================================

def validate_level(board: Board) -> Dict:
    """Checks that a board is well-formed and can be cleared."""
    errors = []

    for (x, y), _tile in board.tiles():
        if not board.mask.is_playable(x, y):
            errors.append(f"Tile at ({x}, {y}) sits on a gap")

    total = board.mask.playable_count
    placed = board.remaining_count()
    coverage = placed / total * 100 if total else 100.0
    if placed != total:
        errors.append(f"Board not fully covered: {coverage:.1f}% ({placed}/{total})")

    solution = get_full_solution(board)
    if len(solution) != placed:
        errors.append(f"Level not solvable: {len(solution)}/{placed} tiles removable")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "coverage": coverage,
    }


# ============================================
# CLI TESTING
# ============================================

if __name__ == "__main__":
    import time

    logging.basicConfig(level=logging.INFO)

    print("Heart Arrows Generator")
    print("=" * 60)

    for lvl in [1, 3, 5, 10, 20]:
        started = time.time()
        result = build_level(lvl, seed=lvl)
        elapsed = (time.time() - started) * 1000

        validation = validate_level(result.board)
        curves = sum(1 for _, t in result.board.tiles() if t.kind == TileKind.CURVE)

        status = "OK" if validation["valid"] else "PARTIAL"
        print(f"\nLevel {lvl:4d} {status} | {elapsed:6.1f}ms | runs={result.runs}")
        print(f"  Tiles: {result.board.remaining_count()} (curves: {curves})")
        print(f"  Coverage: {validation['coverage']:.1f}%")
        for err in validation["errors"][:5]:
            print(f"     - {err}")
