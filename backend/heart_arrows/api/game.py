"""
Heart Arrows - Game API

Level sessions: start, remove tiles, hints, restart, next level.
"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool

from ..config import settings
from ..middleware.security import limiter
from ..schemas import (
    BoardSchema, Cell, HintResponse, MoveRequest, MoveResponse, RemainingResponse,
    SessionResponse, SilhouetteResponse, TileSchema, ValidateRequest, ValidateResponse,
)
from ..services.board import find_blockers
from ..services.generator import LevelBuild, build_level
from ..services.moves import MoveStatus
from ..services.sessions import GameSession, LevelLocked, SessionBusy, SessionNotFound, store
from ..services.solver import validate_moves


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/game", tags=["game"])


# ============================================
# HELPERS
# ============================================

def _serialize_session(session: GameSession) -> SessionResponse:
    """Converts a session into SessionResponse."""
    board_data = session.board.to_dict()
    board_obj = BoardSchema(
        width=board_data["width"],
        height=board_data["height"],
        tiles=[TileSchema(**t) for t in board_data["tiles"]],
    )
    return SessionResponse(
        session_id=session.id,
        level=session.level,
        seed=session.seed,
        lives=session.lives,
        status=session.status.value,
        complete=session.complete,
        remaining=session.remaining,
        mistakes=session.mistakes,
        board=board_obj,
    )


def _get_session_or_404(session_id: str) -> GameSession:
    try:
        return store.get(session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")


def _check_level_num(level_num: int):
    if level_num < 1 or level_num > settings.MAX_LEVEL:
        raise HTTPException(status_code=400, detail="Invalid level number")


async def _generate(level_num: int, seed: Optional[int] = None) -> LevelBuild:
    """Runs the generator in a worker thread and logs how long it took."""
    started = time.monotonic()
    build = await run_in_threadpool(build_level, level_num, seed, store.mask)
    elapsed_ms = (time.monotonic() - started) * 1000
    logger.info(
        f"[Generate] level={level_num} seed={build.seed} tiles={build.board.remaining_count()} "
        f"complete={build.complete} generation_ms={elapsed_ms:.1f}"
    )
    return build


# ============================================
# ENDPOINTS
# ============================================

@router.get("/silhouette", response_model=SilhouetteResponse)
async def get_silhouette():
    mask = store.mask
    return SilhouetteResponse(
        width=mask.width,
        height=mask.height,
        rows=mask.to_rows(),
        playable_count=mask.playable_count,
    )


@router.post("/start/{level_num}", response_model=SessionResponse)
@limiter.limit(f"{settings.RATE_LIMIT_GAME}/minute")
async def start_level(
    request: Request,
    level_num: int,
    seed: Optional[int] = Query(None, ge=0),
):
    _check_level_num(level_num)

    build = await _generate(level_num, seed)
    return _serialize_session(store.open(build))


@router.get("/session/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str):
    return _serialize_session(_get_session_or_404(session_id))


@router.post("/session/{session_id}/remove", response_model=MoveResponse)
async def remove_tile(session_id: str, move: MoveRequest):
    session = _get_session_or_404(session_id)
    outcome = store.remove(session, move.x, move.y)

    blockers = []
    if outcome.status == MoveStatus.REJECTED:
        blockers = [Cell(x=bx, y=by) for bx, by in find_blockers(session.board, move.x, move.y)]

    return MoveResponse(
        status=outcome.status.value,
        accepted=outcome.accepted,
        remaining=outcome.remaining,
        lives=session.lives,
        game_status=session.status.value,
        blockers=blockers,
    )


@router.get("/session/{session_id}/remaining", response_model=RemainingResponse)
async def get_remaining(session_id: str):
    session = _get_session_or_404(session_id)
    return RemainingResponse(remaining=session.remaining)


@router.post("/session/{session_id}/hint", response_model=HintResponse)
async def get_hint(session_id: str):
    session = _get_session_or_404(session_id)
    hint = store.hint(session)
    if hint is None:
        raise HTTPException(status_code=409, detail="No move available")
    x, y = hint
    return HintResponse(x=x, y=y)


@router.post("/session/{session_id}/restart", response_model=SessionResponse)
@limiter.limit(f"{settings.RATE_LIMIT_GAME}/minute")
async def restart_level(request: Request, session_id: str):
    session = _get_session_or_404(session_id)
    try:
        with store.hold(session):
            build = await _generate(session.level)
    except SessionBusy:
        raise HTTPException(status_code=409, detail="Level is already being generated")
    return _serialize_session(store.restart(session, build))


@router.post("/session/{session_id}/next", response_model=SessionResponse)
@limiter.limit(f"{settings.RATE_LIMIT_GAME}/minute")
async def next_level(request: Request, session_id: str):
    session = _get_session_or_404(session_id)
    try:
        store.check_unlocked(session)
    except LevelLocked:
        raise HTTPException(status_code=409, detail="Level not completed")
    _check_level_num(session.level + 1)

    try:
        with store.hold(session):
            build = await _generate(session.level + 1)
    except SessionBusy:
        raise HTTPException(status_code=409, detail="Level is already being generated")
    return _serialize_session(store.next_level(session, build))


@router.post("/validate", response_model=ValidateResponse)
@limiter.limit(f"{settings.RATE_LIMIT_GAME}/minute")
async def validate_solution(request: Request, payload: ValidateRequest):
    """Rebuilds the level from its seed and replays the moves."""
    _check_level_num(payload.level)

    build = await _generate(payload.level, payload.seed)
    valid, error = validate_moves(build.board, [(m.x, m.y) for m in payload.moves])
    return ValidateResponse(
        valid=valid,
        error=error,
        tile_count=build.board.remaining_count(),
    )
