"""FastAPI-powered Chaum-Pedersen authentication service."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .auth import AuthenticationService
from .config import load_settings
from .encoding import hex_to_int, int_to_hex
from .exceptions import (
    AuthError,
    ChallengeNotFound,
    EncodingError,
    SessionNotFound,
    StateInvariantError,
    UserNotFound,
    VerificationFailed,
)

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    UserNotFound: 404,
    ChallengeNotFound: 404,
    SessionNotFound: 404,
    VerificationFailed: 401,
    EncodingError: 400,
    StateInvariantError: 500,
}


class RegisterRequest(BaseModel):
    user: str = Field(min_length=1)
    y1: str = Field(min_length=1)
    y2: str = Field(min_length=1)


class RegisterResponse(BaseModel):
    pass


class ChallengeRequest(BaseModel):
    user: str = Field(min_length=1)
    r1: str = Field(min_length=1)
    r2: str = Field(min_length=1)


class ChallengeResponse(BaseModel):
    auth_id: str
    c: str


class AnswerRequest(BaseModel):
    auth_id: str = Field(min_length=1)
    s: str = Field(min_length=1)


class AnswerResponse(BaseModel):
    session_id: str


class SessionResponse(BaseModel):
    session_id: str
    user: str


class ParametersResponse(BaseModel):
    bit_size: int
    p: str
    q: str
    g: str
    h: str


def _status_for(exc: AuthError) -> int:
    for error_type, status in _STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status
    return 500


def create_app(service: Optional[AuthenticationService] = None) -> FastAPI:
    if service is None:
        service = AuthenticationService(challenge_ttl=load_settings().challenge_ttl)

    app = FastAPI(title="CPAuth", description="Chaum-Pedersen zero-knowledge authentication")
    app.state.service = service

    @app.exception_handler(AuthError)
    async def _auth_error(request: Request, exc: AuthError) -> JSONResponse:
        status = _status_for(exc)
        if status >= 500:
            logger.error("Internal error on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    # Plain functions run on the thread pool; modpow is CPU bound.
    @app.post("/register", response_model=RegisterResponse)
    def register(request: RegisterRequest) -> RegisterResponse:
        service.register(
            request.user,
            hex_to_int(request.y1, field="y1"),
            hex_to_int(request.y2, field="y2"),
        )
        return RegisterResponse()

    @app.post("/authentication/challenge", response_model=ChallengeResponse)
    def create_challenge(request: ChallengeRequest) -> ChallengeResponse:
        issued = service.issue_challenge(
            request.user,
            hex_to_int(request.r1, field="r1"),
            hex_to_int(request.r2, field="r2"),
        )
        return ChallengeResponse(auth_id=issued.auth_id, c=int_to_hex(issued.c))

    @app.post("/authentication/answer", response_model=AnswerResponse)
    def verify_answer(request: AnswerRequest) -> AnswerResponse:
        session_id = service.verify_answer(request.auth_id, hex_to_int(request.s, field="s"))
        return AnswerResponse(session_id=session_id)

    @app.get("/sessions/{session_id}", response_model=SessionResponse)
    def session(session_id: str) -> SessionResponse:
        return SessionResponse(session_id=session_id, user=service.lookup_session(session_id))

    @app.get("/parameters", response_model=ParametersResponse)
    def parameters() -> ParametersResponse:
        return ParametersResponse(**service.engine.parameters.to_dict())

    return app


app = create_app()


__all__ = ["app", "create_app"]
