"""Tests for level sessions."""
import pytest

from heart_arrows.config import settings
from heart_arrows.services.board import Silhouette
from heart_arrows.services.generator import build_level
from heart_arrows.services.moves import MoveStatus
from heart_arrows.services.sessions import (
    LevelLocked,
    SessionBusy,
    SessionNotFound,
    SessionStatus,
    SessionStore,
)


@pytest.fixture
def store():
    return SessionStore(mask=Silhouette([[1, 1], [1, 1]]))


def clear_session(store, session):
    for x, y in reversed(session.board.placement_order):
        store.remove(session, x, y)


class TestStart:
    def test_new_session(self, store):
        session = store.start(1, seed=4)

        assert session.level == 1
        assert session.seed == 4
        assert session.lives == settings.INITIAL_LIVES
        assert session.status == SessionStatus.PLAYING
        assert session.complete
        assert session.remaining == 4
        assert store.get(session.id) is session

    def test_unknown_session(self, store):
        with pytest.raises(SessionNotFound):
            store.get("missing")

    def test_lru_eviction(self):
        store = SessionStore(mask=Silhouette([[1]]), max_size=2)
        first = store.start(1)
        second = store.start(1)
        store.get(first.id)
        store.start(1)

        assert len(store) == 2
        assert store.get(first.id) is first
        with pytest.raises(SessionNotFound):
            store.get(second.id)


class TestRemove:
    """Lives, win and loss bookkeeping."""

    def test_clearing_wins(self, store):
        session = store.start(1, seed=4)
        clear_session(store, session)

        assert session.status == SessionStatus.WON
        assert session.remaining == 0
        assert session.lives == settings.INITIAL_LIVES
        assert len(session.moves) == 4

    def test_rejection_costs_a_life(self, store, blocked_row_board):
        session = store.start(1)
        session.board = blocked_row_board

        outcome = store.remove(session, 0, 0)

        assert outcome.status == MoveStatus.REJECTED
        assert session.lives == settings.INITIAL_LIVES - 1
        assert session.mistakes == 1
        assert session.remaining == 3

    def test_out_of_lives_loses(self, store, blocked_row_board):
        session = store.start(1)
        session.board = blocked_row_board

        for _ in range(settings.INITIAL_LIVES):
            store.remove(session, 0, 0)

        assert session.status == SessionStatus.LOST
        assert session.lives == 0
        # Level is over; even a free tile is ignored now
        assert store.remove(session, 1, 0).status == MoveStatus.IGNORED
        assert session.lives == 0
        assert session.remaining == 3

    def test_empty_slot_costs_nothing(self, store, blocked_row_board):
        session = store.start(1)
        session.board = blocked_row_board
        store.remove(session, 1, 0)

        outcome = store.remove(session, 1, 0)

        assert outcome.status == MoveStatus.IGNORED
        assert session.lives == settings.INITIAL_LIVES

    def test_move_in_flight_ignored(self, store):
        session = store.start(1, seed=4)
        x, y = session.board.placement_order[-1]
        session.is_moving = True

        outcome = store.remove(session, x, y)

        assert outcome.status == MoveStatus.IGNORED
        assert session.remaining == 4

    def test_gate_released_after_move(self, store):
        session = store.start(1, seed=4)
        x, y = session.board.placement_order[-1]
        store.remove(session, x, y)
        assert not session.is_moving


class TestLevelFlow:
    def test_next_level_requires_win(self, store):
        session = store.start(1, seed=4)
        with pytest.raises(LevelLocked):
            store.next_level(session)

    def test_next_level(self, store):
        session = store.start(1, seed=4)
        clear_session(store, session)

        following = store.next_level(session)

        assert following.level == 2
        assert following.status == SessionStatus.PLAYING
        with pytest.raises(SessionNotFound):
            store.get(session.id)

    def test_restart(self, store, blocked_row_board):
        session = store.start(3)
        session.board = blocked_row_board
        store.remove(session, 0, 0)

        restarted = store.restart(session)

        assert restarted.level == 3
        assert restarted.lives == settings.INITIAL_LIVES
        assert restarted.remaining == 4
        with pytest.raises(SessionNotFound):
            store.get(session.id)

    def test_hint(self, store, blocked_row_board):
        session = store.start(1)
        session.board = blocked_row_board
        assert store.hint(session) == (1, 0)

    def test_no_hint_after_loss(self, store, blocked_row_board):
        session = store.start(1)
        session.board = blocked_row_board
        for _ in range(settings.INITIAL_LIVES):
            store.remove(session, 0, 0)

        assert store.hint(session) is None

    def test_restart_with_prebuilt_level(self, store):
        session = store.start(2, seed=4)
        build = build_level(2, seed=9, mask=store.mask)

        restarted = store.restart(session, build)

        assert restarted.seed == 9
        assert restarted.board is build.board

    def test_locked_next_level_keeps_session(self, store):
        session = store.start(1, seed=4)
        build = build_level(2, seed=9, mask=store.mask)

        with pytest.raises(LevelLocked):
            store.next_level(session, build)
        assert store.get(session.id) is session


class TestHold:
    """Move gate held while a replacement level is generated."""

    def test_removals_ignored_while_held(self, store):
        session = store.start(1, seed=4)
        x, y = session.board.placement_order[-1]

        with store.hold(session):
            assert session.is_moving
            assert store.remove(session, x, y).status == MoveStatus.IGNORED

        assert not session.is_moving
        assert store.remove(session, x, y).status == MoveStatus.REMOVED

    def test_second_hold_is_busy(self, store):
        session = store.start(1, seed=4)

        with store.hold(session):
            with pytest.raises(SessionBusy):
                with store.hold(session):
                    pass
            assert session.is_moving

    def test_released_on_error(self, store):
        session = store.start(1, seed=4)

        with pytest.raises(RuntimeError):
            with store.hold(session):
                raise RuntimeError("generation failed")

        assert not session.is_moving
