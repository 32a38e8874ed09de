"""Core arithmetic for the Chaum-Pedersen identification protocol."""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from typing import Optional

from .config import GroupParameters, get_parameters
from .exceptions import VerificationFailed


@dataclass(frozen=True)
class Commitment:
    """Pair of group elements ``(g^k mod p, h^k mod p)`` for an exponent ``k``."""

    r1: int
    r2: int


class ChaumPedersen:
    """Prover and verifier arithmetic over a fixed prime-order subgroup.

    Group elements are always reduced modulo ``p`` and exponents modulo
    ``q``. The instance holds no state besides the parameters, so it can be
    shared between threads.
    """

    def __init__(self, parameters: Optional[GroupParameters] = None) -> None:
        self.parameters = parameters or get_parameters()

    def generate_random(self) -> int:
        """Uniform integer in ``[0, 2**bit_size)`` from the OS CSPRNG."""

        return secrets.randbits(self.parameters.bit_size)

    def commit(self, k: int) -> Commitment:
        params = self.parameters
        return Commitment(r1=pow(params.g, k, params.p), r2=pow(params.h, k, params.p))

    # Registration publishes (g^x, h^x), the same computation as a round commitment.
    public_commitment = commit

    def solve_challenge(self, x: int, k: int, c: int) -> int:
        # Python's % already yields a value in [0, q) for positive q.
        return (k - c * x) % self.parameters.q

    def verify(self, y1: int, y2: int, r1: int, r2: int, s: int, c: int) -> None:
        """Raise :class:`VerificationFailed` unless ``(r1, r2)`` is reproduced."""

        params = self.parameters
        expected_r1 = (pow(params.g, s, params.p) * pow(y1, c, params.p)) % params.p
        expected_r2 = (pow(params.h, s, params.p) * pow(y2, c, params.p)) % params.p
        if expected_r1 != r1 or expected_r2 != r2:
            raise VerificationFailed()

    def is_valid(self, y1: int, y2: int, r1: int, r2: int, s: int, c: int) -> bool:
        try:
            self.verify(y1, y2, r1, r2, s, c)
        except VerificationFailed:
            return False
        return True


def derive_secret(password: str) -> int:
    """Derive the long-lived secret ``x`` from a password."""

    digest = hashlib.blake2b(password.encode("utf-8"), digest_size=32).digest()
    return int.from_bytes(digest, "big")


__all__ = ["ChaumPedersen", "Commitment", "derive_secret"]
