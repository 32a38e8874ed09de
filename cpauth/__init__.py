"""Chaum-Pedersen zero-knowledge authentication package."""

from .auth import AuthenticationService, IssuedChallenge
from .config import GroupParameters, Settings, get_parameters, load_parameters, load_settings
from .crypto import ChaumPedersen, Commitment, derive_secret
from .encoding import bytes_to_int, hex_to_int, int_to_bytes, int_to_hex
from .exceptions import (
    AuthError,
    ChallengeNotFound,
    ClientError,
    ConfigurationError,
    EncodingError,
    SessionNotFound,
    StateInvariantError,
    UserNotFound,
    VerificationFailed,
)
from .store import AuthState, ChallengeRecord, SessionRecord, UserRecord

__all__ = [
    "AuthenticationService",
    "IssuedChallenge",
    "GroupParameters",
    "Settings",
    "get_parameters",
    "load_parameters",
    "load_settings",
    "ChaumPedersen",
    "Commitment",
    "derive_secret",
    "bytes_to_int",
    "hex_to_int",
    "int_to_bytes",
    "int_to_hex",
    "AuthError",
    "ChallengeNotFound",
    "ClientError",
    "ConfigurationError",
    "EncodingError",
    "SessionNotFound",
    "StateInvariantError",
    "UserNotFound",
    "VerificationFailed",
    "AuthState",
    "ChallengeRecord",
    "SessionRecord",
    "UserRecord",
]
