"""In-memory registries of users, outstanding challenges and sessions."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterator, Optional, Tuple

from .exceptions import ChallengeNotFound, SessionNotFound, StateInvariantError, UserNotFound

logger = logging.getLogger(__name__)


@dataclass
class UserRecord:
    """Registered commitments ``y1 = g^x`` and ``y2 = h^x``; ``x`` is never stored."""

    id: str
    y1: int
    y2: int
    auth_id: Optional[str] = None
    session_id: Optional[str] = None


@dataclass(frozen=True)
class ChallengeRecord:
    id: str
    user_id: str
    r1: int
    r2: int
    c: int
    issued_at: float = 0.0


@dataclass(frozen=True)
class SessionRecord:
    id: str
    user_id: str


@dataclass(frozen=True)
class StateSnapshot:
    users: Dict[str, UserRecord]
    challenges: Dict[str, ChallengeRecord]
    sessions: Dict[str, SessionRecord]


class ReadWriteLock:
    """Many concurrent readers or one writer.

    Waiting writers block new readers so a steady stream of reads cannot
    starve registrations and challenge issuance.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class AuthState:
    """Owner of the three registries.

    The dictionaries are never handed out; every access goes through a
    method that takes the lock, and reads return copies.
    """

    def __init__(
        self,
        *,
        challenge_ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = ReadWriteLock()
        self._users: Dict[str, UserRecord] = {}
        self._challenges: Dict[str, ChallengeRecord] = {}
        self._sessions: Dict[str, SessionRecord] = {}
        self.challenge_ttl = challenge_ttl
        self._clock = clock

    def _is_expired(self, challenge: ChallengeRecord) -> bool:
        if self.challenge_ttl is None:
            return False
        return self._clock() - challenge.issued_at > self.challenge_ttl

    def _live_challenge(self, challenge_id: str) -> ChallengeRecord:
        challenge = self._challenges.get(challenge_id)
        if challenge is None or self._is_expired(challenge):
            raise ChallengeNotFound(challenge_id)
        return challenge

    def register_user(self, user_id: str, y1: int, y2: int) -> bool:
        """Insert or overwrite a user. Returns ``True`` when a record was replaced."""

        with self._lock.write_locked():
            previous = self._users.get(user_id)
            if previous is not None and previous.auth_id is not None:
                # Commitments changed, the outstanding round can never verify.
                self._challenges.pop(previous.auth_id, None)
            self._users[user_id] = UserRecord(id=user_id, y1=y1, y2=y2)
        return previous is not None

    def create_challenge(
        self, user_id: str, challenge_id: str, r1: int, r2: int, c: int
    ) -> Optional[str]:
        """Store a challenge, superseding the user's previous one.

        Returns the identifier of the superseded challenge, if any.
        """

        with self._lock.write_locked():
            user = self._users.get(user_id)
            if user is None:
                raise UserNotFound(user_id)
            if challenge_id in self._challenges:
                raise StateInvariantError(f"Challenge id '{challenge_id}' issued twice")
            superseded = user.auth_id
            if superseded is not None:
                self._challenges.pop(superseded, None)
            self._challenges[challenge_id] = ChallengeRecord(
                id=challenge_id,
                user_id=user_id,
                r1=r1,
                r2=r2,
                c=c,
                issued_at=self._clock(),
            )
            user.auth_id = challenge_id
        return superseded

    def create_session(
        self, user_id: str, session_id: str, *, challenge_id: Optional[str] = None
    ) -> SessionRecord:
        """Record a session for ``user_id``.

        When ``challenge_id`` is given the challenge is consumed in the same
        write section; if it is no longer the user's live challenge the
        session is not created and :class:`ChallengeNotFound` is raised.
        """

        with self._lock.write_locked():
            user = self._users.get(user_id)
            if user is None:
                raise UserNotFound(user_id)
            if session_id in self._sessions:
                raise StateInvariantError(f"Session id '{session_id}' issued twice")
            if challenge_id is not None:
                challenge = self._live_challenge(challenge_id)
                if challenge.user_id != user_id or user.auth_id != challenge_id:
                    raise ChallengeNotFound(challenge_id)
                del self._challenges[challenge_id]
                user.auth_id = None
            session = SessionRecord(id=session_id, user_id=user_id)
            self._sessions[session_id] = session
            user.session_id = session_id
        return session

    def verification_material(self, challenge_id: str) -> Tuple[ChallengeRecord, UserRecord]:
        """Challenge and owner read under one read section."""

        with self._lock.read_locked():
            challenge = self._live_challenge(challenge_id)
            user = self._users.get(challenge.user_id)
            if user is None:
                raise UserNotFound(challenge.user_id)
            if user.auth_id != challenge_id:
                logger.error(
                    "Challenge %s is stored but user %s points at %s",
                    challenge_id,
                    user.id,
                    user.auth_id,
                )
                raise StateInvariantError(
                    f"Challenge '{challenge_id}' is not the live challenge of '{user.id}'"
                )
            return challenge, replace(user)

    def get_user(self, user_id: str) -> UserRecord:
        with self._lock.read_locked():
            user = self._users.get(user_id)
            if user is None:
                raise UserNotFound(user_id)
            return replace(user)

    def get_challenge(self, challenge_id: str) -> ChallengeRecord:
        with self._lock.read_locked():
            return self._live_challenge(challenge_id)

    def get_session(self, session_id: str) -> SessionRecord:
        with self._lock.read_locked():
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFound(session_id)
            return session

    def purge_expired(self) -> int:
        """Drop challenges older than ``challenge_ttl``; returns how many."""

        if self.challenge_ttl is None:
            return 0
        with self._lock.write_locked():
            expired = [cid for cid, ch in self._challenges.items() if self._is_expired(ch)]
            for challenge_id in expired:
                challenge = self._challenges.pop(challenge_id)
                owner = self._users.get(challenge.user_id)
                if owner is not None and owner.auth_id == challenge_id:
                    owner.auth_id = None
        if expired:
            logger.debug("Purged %d expired challenges", len(expired))
        return len(expired)

    def snapshot(self) -> StateSnapshot:
        with self._lock.read_locked():
            return StateSnapshot(
                users={key: replace(user) for key, user in self._users.items()},
                challenges=dict(self._challenges),
                sessions=dict(self._sessions),
            )

    def counts(self) -> Dict[str, int]:
        with self._lock.read_locked():
            return {
                "users": len(self._users),
                "challenges": len(self._challenges),
                "sessions": len(self._sessions),
            }


__all__ = [
    "AuthState",
    "ChallengeRecord",
    "ReadWriteLock",
    "SessionRecord",
    "StateSnapshot",
    "UserRecord",
]
