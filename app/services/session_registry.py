"""
In-memory registry of live test sessions.

Each session is owned by the registry until it is discarded or sits idle
longer than the TTL. Sessions that are loading or counting down never
expire, and every tick counts as activity. Nothing is persisted; discarding
stops the timer and drops the session without scoring it.
"""
import functools
import logging
import threading
import time

from app.core.config import settings
from app.exceptions import TestSessionNotFoundError
from app.schemas.test_session import SessionPhase
from app.services.question_source import QuestionSource, get_question_source
from app.services.test_session import TestSession
from app.services.timer import SessionTimer

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Session id -> (session, timer), guarded by a lock"""

    def __init__(self, ttl_seconds: int | None = None, timer_interval: float | None = None):
        self.ttl_seconds = settings.session_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.timer_interval = timer_interval
        self._lock = threading.Lock()
        self._sessions: dict[str, TestSession] = {}
        self._timers: dict[str, SessionTimer] = {}
        self._timestamps: dict[str, float] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self, source: QuestionSource | None = None) -> TestSession:
        """Register a new session in the SELECTING phase"""
        self.cleanup_expired()
        session = TestSession(source or get_question_source())
        with self._lock:
            self._sessions[session.id] = session
            self._timers[session.id] = SessionTimer(
                session,
                interval=self.timer_interval,
                on_tick=functools.partial(self.touch, session.id),
            )
            self._timestamps[session.id] = time.time()
        logger.info(f"Test session created: session_id={session.id}")
        return session

    def get(self, session_id: str) -> TestSession:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise TestSessionNotFoundError(session_id)
            if self._is_expired(session_id, time.time()):
                self._drop(session_id)
                raise TestSessionNotFoundError(session_id)
            self._timestamps[session_id] = time.time()  # refresh on access
            return session

    def timer(self, session_id: str) -> SessionTimer:
        self.get(session_id)
        with self._lock:
            return self._timers[session_id]

    def discard(self, session_id: str) -> None:
        """Drop a session without side effects (no scoring, no persistence)"""
        with self._lock:
            if session_id not in self._sessions:
                raise TestSessionNotFoundError(session_id)
            self._drop(session_id)
        logger.info(f"Test session discarded: session_id={session_id}")

    def cleanup_expired(self) -> int:
        """Drop idle sessions; returns the number removed"""
        now = time.time()
        with self._lock:
            expired = [sid for sid in self._sessions if self._is_expired(sid, now)]
            for sid in expired:
                self._drop(sid)
        if expired:
            logger.info(f"Expired test sessions removed: {len(expired)}")
        return len(expired)

    def touch(self, session_id: str) -> None:
        """Record activity without looking the session up"""
        with self._lock:
            if session_id in self._timestamps:
                self._timestamps[session_id] = time.time()

    def clear(self) -> None:
        with self._lock:
            for sid in list(self._sessions):
                self._drop(sid)

    def _is_expired(self, session_id: str, now: float) -> bool:
        if self._sessions[session_id].phase is SessionPhase.LOADING or self._timers[session_id].running:
            return False
        return now - self._timestamps[session_id] > self.ttl_seconds

    def _drop(self, session_id: str) -> None:
        timer = self._timers.pop(session_id, None)
        if timer is not None:
            timer.stop()
        self._sessions.pop(session_id, None)
        self._timestamps.pop(session_id, None)


_registry: SessionRegistry | None = None


def get_session_registry() -> SessionRegistry:
    """Session registry singleton"""
    global _registry
    if _registry is None:
        _registry = SessionRegistry()
    return _registry
