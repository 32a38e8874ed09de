"""Prover side: derives the secret from a password and talks to the service."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .config import load_settings
from .crypto import ChaumPedersen, derive_secret
from .encoding import hex_to_int, int_to_hex
from .exceptions import ClientError

logger = logging.getLogger(__name__)


class ChaumPedersenClient:
    """Registers and logs in users without ever sending the password.

    ``http`` may be any ``httpx.Client``, including FastAPI's ``TestClient``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        http: Optional[httpx.Client] = None,
        engine: Optional[ChaumPedersen] = None,
        timeout: float = 10.0,
    ) -> None:
        if http is None:
            http = httpx.Client(base_url=base_url or load_settings().server_url, timeout=timeout)
            self._owns_http = True
        else:
            self._owns_http = False
        self.http = http
        self.engine = engine or ChaumPedersen()

    def __enter__(self) -> "ChaumPedersenClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def _post(self, path: str, payload: Dict[str, str]) -> Dict[str, Any]:
        response = self.http.post(path, json=payload)
        return self._decode(response)

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        if response.is_success:
            return response.json()
        try:
            body = response.json()
        except ValueError:
            body = {"detail": response.text}
        raise ClientError(response.status_code, str(body.get("detail")), body.get("error"))

    def register(self, user: str, password: str) -> None:
        x = derive_secret(password)
        commitment = self.engine.public_commitment(x)
        logger.info("Registering user %s", user)
        self._post(
            "/register",
            {"user": user, "y1": int_to_hex(commitment.r1), "y2": int_to_hex(commitment.r2)},
        )

    def login(self, user: str, password: str) -> str:
        """Run one challenge round and return the granted session id."""

        x = derive_secret(password)
        k = self.engine.generate_random()
        commitment = self.engine.commit(k)
        challenge = self._post(
            "/authentication/challenge",
            {"user": user, "r1": int_to_hex(commitment.r1), "r2": int_to_hex(commitment.r2)},
        )
        logger.debug("Received challenge %s", challenge["auth_id"])
        c = hex_to_int(challenge["c"], field="c")
        s = self.engine.solve_challenge(x, k, c)
        answer = self._post(
            "/authentication/answer",
            {"auth_id": challenge["auth_id"], "s": int_to_hex(s)},
        )
        logger.info("User %s logged in", user)
        return answer["session_id"]

    def session_user(self, session_id: str) -> str:
        return self._decode(self.http.get(f"/sessions/{session_id}"))["user"]

    def parameters(self) -> Dict[str, Any]:
        return self._decode(self.http.get("/parameters"))


__all__ = ["ChaumPedersenClient"]
