"""
Heart Arrows - Level Sessions

Per-level play state kept in memory: board, lives, status and the
one-move-at-a-time gate.
"""

import logging
import uuid
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..config import settings
from .board import HEART, Board, Coord, Silhouette
from .generator import LevelBuild, build_level
from .moves import MoveOutcome, MoveStatus, attempt_remove
from .solver import get_hint


logger = logging.getLogger(__name__)


class SessionNotFound(KeyError):
    pass


class SessionBusy(Exception):
    """Another restart or next level is already being generated."""


class LevelLocked(Exception):
    """Next level requested before the current one was won."""


class SessionStatus(str, Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass
class GameSession:
    id: str
    level: int
    seed: int
    board: Board
    complete: bool
    lives: int
    status: SessionStatus = SessionStatus.PLAYING
    mistakes: int = 0
    moves: List[Coord] = field(default_factory=list)
    is_moving: bool = False

    @property
    def remaining(self) -> int:
        return self.board.remaining_count()


class SessionStore:
    """LRU store of live sessions."""

    def __init__(self, mask: Silhouette = HEART, max_size: Optional[int] = None):
        self.mask = mask
        self.max_size = max_size or settings.SESSION_CACHE_SIZE
        self._sessions: "OrderedDict[str, GameSession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def _register(self, session: GameSession) -> GameSession:
        self._sessions[session.id] = session
        while len(self._sessions) > self.max_size:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info(f"[Session] evicted {evicted_id}")
        return session

    def start(self, level: int, seed: Optional[int] = None) -> GameSession:
        return self.open(build_level(level, seed=seed, mask=self.mask))

    def open(self, build: LevelBuild) -> GameSession:
        """Registers a session for an already generated level."""
        level = build.level
        session = GameSession(
            id=uuid.uuid4().hex,
            level=level,
            seed=build.seed,
            board=build.board,
            complete=build.complete,
            lives=settings.INITIAL_LIVES,
        )
        logger.info(
            f"[Session] start id={session.id} level={level} seed={build.seed} "
            f"tiles={session.remaining} complete={build.complete} runs={build.runs}"
        )
        return self._register(session)

    def get(self, session_id: str) -> GameSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        self._sessions.move_to_end(session_id)
        return session

    def discard(self, session_id: str):
        self._sessions.pop(session_id, None)

    def remove(self, session: GameSession, x: int, y: int) -> MoveOutcome:
        """
        Player removal attempt.

        Ignored while the gate is held (a restart or next level is being
        generated for this session) or once the level is over.
        A rejected move costs a life.
        """
        if session.is_moving or session.status != SessionStatus.PLAYING:
            return MoveOutcome(MoveStatus.IGNORED, session.remaining)

        session.is_moving = True
        try:
            outcome = attempt_remove(session.board, x, y)
        finally:
            session.is_moving = False

        if outcome.status == MoveStatus.REMOVED:
            session.moves.append((x, y))
            if outcome.remaining == 0:
                session.status = SessionStatus.WON
                logger.info(f"[Session] won id={session.id} level={session.level}")
        elif outcome.status == MoveStatus.REJECTED:
            session.mistakes += 1
            session.lives = max(0, session.lives - 1)
            if session.lives == 0:
                session.status = SessionStatus.LOST
                logger.info(f"[Session] lost id={session.id} level={session.level}")

        return outcome

    @contextmanager
    def hold(self, session: GameSession):
        """
        Holds the move gate while a replacement level is generated.

        Raises SessionBusy if the gate is already held.
        """
        if session.is_moving:
            raise SessionBusy(session.id)
        session.is_moving = True
        try:
            yield session
        finally:
            session.is_moving = False

    def restart(self, session: GameSession, build: Optional[LevelBuild] = None) -> GameSession:
        """Same level, new board, full lives."""
        if build is None:
            build = build_level(session.level, mask=self.mask)
        self.discard(session.id)
        return self.open(build)

    def check_unlocked(self, session: GameSession):
        if session.status != SessionStatus.WON:
            raise LevelLocked(f"Level {session.level} is not completed")

    def next_level(self, session: GameSession, build: Optional[LevelBuild] = None) -> GameSession:
        self.check_unlocked(session)
        if build is None:
            build = build_level(session.level + 1, mask=self.mask)
        self.discard(session.id)
        return self.open(build)

    def hint(self, session: GameSession) -> Optional[Coord]:
        if session.status != SessionStatus.PLAYING:
            return None
        return get_hint(session.board)


store = SessionStore()
