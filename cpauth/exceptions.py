"""Error taxonomy for registration, challenge and verification failures."""

from __future__ import annotations

from typing import Optional


class AuthError(Exception):
    """Base class for every error raised by the authentication core."""


class UserNotFound(AuthError):
    """An operation referenced a user that never registered."""

    def __init__(self, user_id: str) -> None:
        super().__init__(user_id)
        self.user_id = user_id

    def __str__(self) -> str:
        return f"Unknown user '{self.user_id}', user must register first"


class ChallengeNotFound(AuthError):
    """No live challenge exists under the given identifier."""

    def __init__(self, challenge_id: str) -> None:
        super().__init__(challenge_id)
        self.challenge_id = challenge_id

    def __str__(self) -> str:
        return f"Unknown or expired challenge '{self.challenge_id}'"


class SessionNotFound(AuthError):
    def __init__(self, session_id: str) -> None:
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Unknown session '{self.session_id}'"


class VerificationFailed(AuthError):
    """The submitted solution does not match the registered commitments."""

    def __init__(self, challenge_id: Optional[str] = None) -> None:
        super().__init__(challenge_id)
        self.challenge_id = challenge_id

    def __str__(self) -> str:
        if self.challenge_id is None:
            return "Failed to verify challenge, invalid authentication attempt"
        return f"Failed to verify challenge '{self.challenge_id}', invalid authentication attempt"


class StateInvariantError(AuthError):
    """Registries disagree with each other. Indicates a bug, not bad input."""


class ConfigurationError(AuthError):
    """Configuration error."""


class EncodingError(AuthError, ValueError):
    """A wire value could not be decoded."""


class ClientError(AuthError):
    """The server rejected a request issued by the client."""

    def __init__(self, status_code: int, detail: str, kind: Optional[str] = None) -> None:
        super().__init__(status_code, detail)
        self.status_code = status_code
        self.detail = detail
        self.kind = kind

    def __str__(self) -> str:
        return f"Server rejected request ({self.status_code}): {self.detail}"


__all__ = [
    "AuthError",
    "ChallengeNotFound",
    "ClientError",
    "ConfigurationError",
    "EncodingError",
    "SessionNotFound",
    "StateInvariantError",
    "UserNotFound",
    "VerificationFailed",
]
