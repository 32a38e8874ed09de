"""Group parameters and runtime settings, optionally read from the environment."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Mapping, Optional

from .constants import BIT_SIZE, DEFAULT_SERVER_URL, ENV_PREFIX, G, H, P, Q
from .encoding import int_to_hex
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class GroupParameters:
    """Cyclic group shared by prover and verifier.

    ``g`` and ``h`` must both generate the subgroup of order ``q`` modulo
    ``p``. This is a precondition of the deployment and is not checked here.
    """

    bit_size: int
    p: int
    q: int
    g: int
    h: int

    @classmethod
    def default(cls) -> "GroupParameters":
        return cls(bit_size=BIT_SIZE, p=P, q=Q, g=G, h=H)

    def to_dict(self) -> Dict[str, object]:
        return {
            "bit_size": self.bit_size,
            "p": int_to_hex(self.p),
            "q": int_to_hex(self.q),
            "g": int_to_hex(self.g),
            "h": int_to_hex(self.h),
        }


@dataclass(frozen=True)
class Settings:
    challenge_ttl: Optional[float] = None
    server_url: str = DEFAULT_SERVER_URL


def _parse_int(name: str, raw: str) -> int:
    text = raw.strip().replace("_", "")
    try:
        value = int(text, 16) if text.lower().startswith("0x") else int(text, 10)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a decimal or 0x-prefixed integer") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive")
    return value


def load_parameters(environ: Optional[Mapping[str, str]] = None) -> GroupParameters:
    """Build group parameters from ``CPAUTH_*`` variables, defaulting each one."""

    env = os.environ if environ is None else environ
    defaults = GroupParameters.default()
    values = {}
    for field in ("bit_size", "p", "q", "g", "h"):
        name = ENV_PREFIX + field.upper()
        raw = env.get(name)
        values[field] = getattr(defaults, field) if raw is None else _parse_int(name, raw)
    return GroupParameters(**values)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    ttl_raw = env.get(ENV_PREFIX + "CHALLENGE_TTL")
    ttl: Optional[float] = None
    if ttl_raw:
        try:
            ttl = float(ttl_raw)
        except ValueError as exc:
            raise ConfigurationError("CPAUTH_CHALLENGE_TTL must be a number of seconds") from exc
        if not math.isfinite(ttl) or ttl <= 0:
            raise ConfigurationError("CPAUTH_CHALLENGE_TTL must be a positive finite number")
    return Settings(
        challenge_ttl=ttl,
        server_url=env.get(ENV_PREFIX + "SERVER_URL", DEFAULT_SERVER_URL),
    )


@lru_cache(maxsize=None)
def get_parameters() -> GroupParameters:
    """Process-wide group parameters, resolved on first use."""

    return load_parameters()


__all__ = ["GroupParameters", "Settings", "get_parameters", "load_parameters", "load_settings"]
