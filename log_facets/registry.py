"""
Process-scoped registry of log sessions.

One lock guards the whole session map and is held for the full duration of
every operation, so operations on all sessions are serialized. Work under
the lock is purely in-memory.

Lock failures are reported as LockUnavailableError rather than crashing the
host: either the lock could not be acquired within the configured timeout,
or a previous mutation failed part way and left the registry poisoned. A
poisoned registry refuses all work until `reset()` discards its state.

Usage:
    registry = SessionRegistry()
    session_id = registry.create(['{"level": "info"}'])

    with registry.session(session_id, mutating=True) as session:
        session.add_facet("level", "OR")
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from .config import EngineConfig
from .exceptions import LockUnavailableError, LogFacetsError, SessionNotFoundError
from .session import LogSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Map of session id to LogSession behind a single mutual-exclusion lock."""

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self._lock = threading.Lock()
        self._sessions: dict[str, LogSession] = {}
        self._poisoned: str | None = None

    @property
    def poisoned(self) -> bool:
        """Whether a failed mutation has left the registry unusable."""
        return self._poisoned is not None

    @contextmanager
    def locked(self, mutating: bool = False) -> Iterator[dict[str, LogSession]]:
        """Hold the registry lock and yield the live session map.

        Unexpected exceptions escaping a mutating block poison the registry.
        Engine errors such as SessionNotFoundError pass through untouched.
        """
        timeout = self.config.lock_timeout_seconds
        acquired = self._lock.acquire(timeout=timeout if timeout >= 0 else -1)
        if not acquired:
            logger.error("Timed out after %.2fs waiting for session registry lock", timeout)
            raise LockUnavailableError("timed out waiting for lock", timeout)

        try:
            if self._poisoned is not None:
                raise LockUnavailableError(f"registry poisoned by earlier failure: {self._poisoned}")
            try:
                yield self._sessions
            except LogFacetsError:
                raise
            except Exception as e:
                if mutating:
                    self._poisoned = f"{type(e).__name__}: {e}"
                    logger.error("Session registry poisoned during mutation", exc_info=True)
                raise
        finally:
            self._lock.release()

    @contextmanager
    def session(self, session_id: str, mutating: bool = False) -> Iterator[LogSession]:
        """Hold the registry lock and yield one session.

        Raises:
            SessionNotFoundError: If the session id is unknown.
            LockUnavailableError: If the lock cannot be used.
        """
        with self.locked(mutating=mutating) as sessions:
            session = sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)
            yield session

    def create(self, initial_records: Iterable[str] = ()) -> str:
        """Create a session seeded with raw record texts and return its id."""
        session_id = str(uuid.uuid4())
        # Parsing happens outside the lock; it touches no shared state
        session = LogSession.from_texts(session_id, initial_records)

        with self.locked(mutating=True) as sessions:
            sessions[session_id] = session

        logger.info(
            "Created log session",
            extra={"session_id": session_id, "record_count": len(session.records)},
        )
        return session_id

    def drop(self, session_id: str) -> None:
        """Remove a session.

        Raises:
            SessionNotFoundError: If the session id is unknown.
        """
        with self.locked(mutating=True) as sessions:
            if sessions.pop(session_id, None) is None:
                raise SessionNotFoundError(session_id)

        logger.info("Dropped log session", extra={"session_id": session_id})

    def session_ids(self) -> list[str]:
        """Ids of all live sessions, in creation order."""
        with self.locked() as sessions:
            return list(sessions)

    def __contains__(self, session_id: object) -> bool:
        with self.locked() as sessions:
            return session_id in sessions

    def __len__(self) -> int:
        with self.locked() as sessions:
            return len(sessions)

    def reset(self) -> None:
        """Discard every session and clear a poisoned state."""
        timeout = self.config.lock_timeout_seconds
        if not self._lock.acquire(timeout=timeout if timeout >= 0 else -1):
            raise LockUnavailableError("timed out waiting for lock", timeout)
        try:
            dropped = len(self._sessions)
            self._sessions.clear()
            self._poisoned = None
        finally:
            self._lock.release()
        logger.info("Session registry reset (%d sessions dropped)", dropped)


_default_registry: SessionRegistry | None = None
_default_registry_lock = threading.Lock()


def get_default_registry(config: EngineConfig | None = None) -> SessionRegistry:
    """Process-wide registry, created on first use.

    `config` only applies when this call creates the registry.
    """
    global _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            _default_registry = SessionRegistry(config)
        return _default_registry


def reset_default_registry() -> None:
    """Tear down the process-wide registry; the next use creates a fresh one."""
    global _default_registry
    with _default_registry_lock:
        _default_registry = None
