"""Registration, challenge issuance and answer verification."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Callable, Optional

from .constants import ID_BYTES
from .crypto import ChaumPedersen
from .encoding import bytes_to_int, int_to_bytes
from .exceptions import VerificationFailed
from .store import AuthState

logger = logging.getLogger(__name__)


def _default_id() -> str:
    return secrets.token_urlsafe(ID_BYTES)


@dataclass(frozen=True)
class IssuedChallenge:
    auth_id: str
    c: int


class AuthenticationService:
    """Server side of the protocol.

    Each user moves through ``registered -> challenged -> authenticated``
    independently. Engine arithmetic runs outside the registry lock; only
    the bookkeeping around it is synchronised.
    """

    def __init__(
        self,
        engine: Optional[ChaumPedersen] = None,
        state: Optional[AuthState] = None,
        *,
        id_factory: Optional[Callable[[], str]] = None,
        challenge_ttl: Optional[float] = None,
    ) -> None:
        if state is not None and challenge_ttl is not None:
            raise ValueError("Pass challenge_ttl to the AuthState, not alongside it")
        self.engine = engine or ChaumPedersen()
        self.state = state or AuthState(challenge_ttl=challenge_ttl)
        self._new_id = id_factory or _default_id

    def register(self, user: str, y1: int, y2: int) -> None:
        replaced = self.state.register_user(user, y1, y2)
        if replaced:
            logger.warning("User %s re-registered, previous commitments replaced", user)
        else:
            logger.info("Registered user %s", user)

    def issue_challenge(self, user: str, r1: int, r2: int) -> IssuedChallenge:
        self.state.purge_expired()
        c = self.engine.generate_random()
        auth_id = self._new_id()
        superseded = self.state.create_challenge(user, auth_id, r1, r2, c)
        if superseded is not None:
            logger.debug("Challenge %s for %s superseded by %s", superseded, user, auth_id)
        else:
            logger.debug("Issued challenge %s for %s", auth_id, user)
        return IssuedChallenge(auth_id=auth_id, c=c)

    def verify_answer(self, auth_id: str, s: int) -> str:
        """Check the answer to ``auth_id`` and return a new session id.

        The challenge is consumed together with session creation, so of two
        concurrent correct answers only one yields a session; the other sees
        :class:`ChallengeNotFound`. A wrong answer changes no state.
        """

        challenge, user = self.state.verification_material(auth_id)
        try:
            self.engine.verify(user.y1, user.y2, challenge.r1, challenge.r2, s, challenge.c)
        except VerificationFailed:
            logger.warning("Verification failed for user %s on challenge %s", user.id, auth_id)
            raise VerificationFailed(auth_id) from None

        session_id = self._new_id()
        self.state.create_session(user.id, session_id, challenge_id=auth_id)
        logger.info("User %s authenticated", user.id)
        return session_id

    def lookup_session(self, session_id: str) -> str:
        return self.state.get_session(session_id).user_id

    # Big-endian byte forms used at the transport boundary.

    def register_bytes(self, user: str, y1: bytes, y2: bytes) -> None:
        self.register(user, bytes_to_int(y1), bytes_to_int(y2))

    def issue_challenge_bytes(self, user: str, r1: bytes, r2: bytes) -> tuple[str, bytes]:
        issued = self.issue_challenge(user, bytes_to_int(r1), bytes_to_int(r2))
        return issued.auth_id, int_to_bytes(issued.c)

    def verify_answer_bytes(self, auth_id: str, s: bytes) -> str:
        return self.verify_answer(auth_id, bytes_to_int(s))


__all__ = ["AuthenticationService", "IssuedChallenge"]
