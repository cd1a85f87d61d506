"""FastAPI auth dependencies.

Authentication is an explicit pipeline: an ordered tuple of stages,
each taking (request, context) and returning the enriched context. A
stage rejects the request by raising NoToken or InvalidToken, which
stops the pipeline; the error handler in main.py renders the response.

    load_body → extract_token → verify

The token may arrive as a `token` field in the JSON body or as an
`Authorization: Bearer` header. If both are present they must agree.
"""

import json
import uuid
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Sequence

import structlog
from fastapi import Request

from inkpot.auth.jwt import user_id_from_token
from inkpot.errors import InvalidToken, NoToken

logger = structlog.get_logger()


@dataclass
class CurrentIdentity:
    """The authenticated requester. All blog queries are scoped by user_id."""

    user_id: uuid.UUID


@dataclass
class AuthContext:
    """State threaded through the auth pipeline."""

    body: dict = field(default_factory=dict)
    token: Optional[str] = None
    user_id: Optional[uuid.UUID] = None


AuthStage = Callable[[Request, AuthContext], Awaitable[AuthContext]]


async def read_json_body(request: Request) -> dict:
    """Parse the request body as a JSON object.

    Starlette caches the raw body on the request, so the auth pipeline and
    the route handler can both call this. Empty, unparseable, or non-object
    bodies are treated as {}; shape validation then reports the missing
    fields.
    """
    raw = await request.body()
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        logger.info("request.body_unparseable", path=request.url.path)
        return {}
    if not isinstance(data, dict):
        logger.info("request.body_not_object", path=request.url.path)
        return {}
    return data


# ─── Stages ─────────────────────────────────────────────


async def load_body(request: Request, ctx: AuthContext) -> AuthContext:
    ctx.body = await read_json_body(request)
    return ctx


async def extract_token(request: Request, ctx: AuthContext) -> AuthContext:
    body_token = ctx.body.get("token")
    if body_token is not None and not isinstance(body_token, str):
        raise InvalidToken()

    header_token = None
    authorization = request.headers.get("Authorization", "")
    if authorization.startswith("Bearer "):
        header_token = authorization[7:].strip()

    if body_token and header_token and body_token != header_token:
        raise InvalidToken("Conflicting tokens in body and header.")

    ctx.token = body_token or header_token
    if not ctx.token:
        raise NoToken()
    return ctx


async def verify(request: Request, ctx: AuthContext) -> AuthContext:
    ctx.user_id = user_id_from_token(ctx.token)
    return ctx


AUTH_PIPELINE: tuple[AuthStage, ...] = (load_body, extract_token, verify)


async def run_pipeline(
    stages: Sequence[AuthStage], request: Request, ctx: AuthContext
) -> AuthContext:
    """Run stages in order. The first stage to raise short-circuits the rest."""
    for stage in stages:
        ctx = await stage(request, ctx)
    return ctx


# ─── Dependency ─────────────────────────────────────────


async def get_current_user(request: Request) -> CurrentIdentity:
    """Resolve the requester (required; 401 if the token is missing or bad)."""
    try:
        ctx = await run_pipeline(AUTH_PIPELINE, request, AuthContext())
    except (NoToken, InvalidToken) as e:
        logger.info("auth.rejected", reason=e.message, path=request.url.path)
        raise
    structlog.contextvars.bind_contextvars(user_id=str(ctx.user_id))
    return CurrentIdentity(user_id=ctx.user_id)
