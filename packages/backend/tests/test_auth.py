"""Token service, password hashing, and the auth pipeline.

Covers:
1. Token issue/verify, expiry, tampering, wrong secret, wrong type
2. bcrypt hash/verify
3. Pipeline short-circuiting
4. Token transport: header, body field, both, conflicting, none
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt as pyjwt
import pytest

from inkpot.auth.dependencies import AuthContext, run_pipeline
from inkpot.auth.jwt import create_access_token, user_id_from_token, verify_token
from inkpot.auth.password import hash_password, verify_password
from inkpot.config import settings
from inkpot.errors import InvalidToken, NoToken


# ═══════════════════════════════════════════════════════════
# Token service
# ═══════════════════════════════════════════════════════════


def test_token_round_trip():
    uid = uuid.uuid4()
    token = create_access_token(str(uid))
    assert user_id_from_token(token) == uid
    payload = verify_token(token)
    assert payload["type"] == "access"
    assert payload["exp"] > payload["iat"]


def test_expired_token_rejected():
    token = create_access_token(str(uuid.uuid4()), expires_delta=timedelta(seconds=-1))
    with pytest.raises(InvalidToken) as exc:
        verify_token(token)
    assert exc.value.message == "Token has expired."


def test_tampered_token_rejected():
    token = create_access_token(str(uuid.uuid4()))
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[:-2] + ("AA" if signature[-2:] != "AA" else "BB")])
    with pytest.raises(InvalidToken):
        verify_token(tampered)


def test_wrong_secret_rejected():
    token = pyjwt.encode(
        {
            "sub": str(uuid.uuid4()),
            "type": "access",
            "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        },
        "some-other-secret",
        algorithm="HS256",
    )
    with pytest.raises(InvalidToken):
        verify_token(token)


def test_wrong_token_type_rejected():
    token = pyjwt.encode(
        {
            "sub": str(uuid.uuid4()),
            "type": "refresh",
            "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        },
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(InvalidToken):
        verify_token(token)


def test_missing_expiry_rejected():
    token = pyjwt.encode(
        {"sub": str(uuid.uuid4()), "type": "access"},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(InvalidToken):
        verify_token(token)


def test_non_uuid_subject_rejected():
    token = create_access_token("not-a-user-id")
    with pytest.raises(InvalidToken):
        user_id_from_token(token)


@pytest.mark.parametrize("garbage", ["", "abc", "a.b.c"])
def test_malformed_token_rejected(garbage):
    with pytest.raises(InvalidToken):
        verify_token(garbage)


# ═══════════════════════════════════════════════════════════
# Passwords
# ═══════════════════════════════════════════════════════════


def test_password_hash_and_verify():
    hashed = hash_password("correct horse", rounds=4)
    assert hashed.startswith("$2")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("battery staple", hashed)


def test_password_hashes_are_salted():
    assert hash_password("same", rounds=4) != hash_password("same", rounds=4)


def test_verify_against_garbage_hash():
    assert not verify_password("anything", "not-a-bcrypt-hash")


# ═══════════════════════════════════════════════════════════
# Pipeline
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_pipeline_short_circuits():
    calls = []

    async def first(request, ctx):
        calls.append("first")
        return ctx

    async def reject(request, ctx):
        calls.append("reject")
        raise NoToken()

    async def never(request, ctx):
        calls.append("never")
        return ctx

    with pytest.raises(NoToken):
        await run_pipeline([first, reject, never], None, AuthContext())
    assert calls == ["first", "reject"]


@pytest.mark.asyncio
async def test_pipeline_threads_context():
    async def set_token(request, ctx):
        ctx.token = "t"
        return ctx

    ctx = await run_pipeline([set_token], None, AuthContext())
    assert ctx.token == "t"


# ═══════════════════════════════════════════════════════════
# Token transport (real pipeline over HTTP)
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_no_token_is_401(unauthenticated_client):
    r = await unauthenticated_client.get("/api/v1/blog/myblogs")
    assert r.status_code == 401
    assert r.json()["detail"] == "Access denied. No token provided."
    assert r.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_invalid_token_is_401(unauthenticated_client):
    r = await unauthenticated_client.get(
        "/api/v1/blog/myblogs",
        headers={"Authorization": "Bearer invalid_token_here"},
    )
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid token."
    assert r.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_expired_token_is_401(unauthenticated_client, signup):
    token = await signup()
    expired = create_access_token(
        str(user_id_from_token(token)), expires_delta=timedelta(seconds=-1)
    )
    r = await unauthenticated_client.get(
        "/api/v1/blog/myblogs",
        headers={"Authorization": f"Bearer {expired}"},
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_token_in_body(unauthenticated_client, signup):
    token = await signup()
    r = await unauthenticated_client.post(
        "/api/v1/blog/create",
        json={"title": "T", "description": "D", "token": token},
    )
    assert r.status_code == 201

    r = await unauthenticated_client.request(
        "GET", "/api/v1/blog/myblogs", json={"token": token}
    )
    assert r.status_code == 200
    assert len(r.json()["blogs"]) == 1


@pytest.mark.asyncio
async def test_same_token_in_body_and_header(unauthenticated_client, signup):
    token = await signup()
    r = await unauthenticated_client.post(
        "/api/v1/blog/create",
        json={"title": "T", "description": "D", "token": token},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert r.status_code == 201


@pytest.mark.asyncio
async def test_conflicting_tokens_rejected(unauthenticated_client, signup):
    alice = await signup()
    bob = await signup()
    r = await unauthenticated_client.post(
        "/api/v1/blog/create",
        json={"title": "T", "description": "D", "token": alice},
        headers={"Authorization": f"Bearer {bob}"},
    )
    assert r.status_code == 401
    assert r.json()["detail"] == "Conflicting tokens in body and header."


@pytest.mark.asyncio
async def test_non_string_body_token_rejected(unauthenticated_client):
    r = await unauthenticated_client.post(
        "/api/v1/blog/create",
        json={"title": "T", "description": "D", "token": 12345},
    )
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid token."


@pytest.mark.asyncio
async def test_auth_runs_before_validation(unauthenticated_client):
    """An unauthenticated bad body is a 401, not a 400."""
    r = await unauthenticated_client.post("/api/v1/blog/create", json={"title": ""})
    assert r.status_code == 401
