"""User API: signup and signin.

- POST /user/signup → create an account, returns a token
- POST /user/signin → email/password → token

Both routes are open. Bodies are validated by the pure functions in
inkpot.schemas.user before the store is touched.
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inkpot.auth.dependencies import read_json_body
from inkpot.auth.jwt import create_access_token
from inkpot.db.engine import get_db
from inkpot.errors import InvalidCredentials
from inkpot.schemas.user import validate_signin, validate_signup
from inkpot.services.user_service import UserService

logger = structlog.get_logger()

router = APIRouter(prefix="/user")


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


@router.post("/signup")
async def signup(
    body: dict = Depends(read_json_body),
    svc: UserService = Depends(_svc),
):
    """Create a user account and sign it in."""
    fields = validate_signup(body)
    user = await svc.create_user(fields)
    return {
        "message": "User created successfully",
        "token": create_access_token(str(user.id)),
    }


@router.post("/signin")
async def signin(
    body: dict = Depends(read_json_body),
    svc: UserService = Depends(_svc),
):
    """Exchange email and password for a token."""
    creds = validate_signin(body)
    user = await svc.verify_credentials(creds.email, creds.password)
    if user is None:
        logger.info("user.signin_rejected")
        raise InvalidCredentials()
    return {"token": create_access_token(str(user.id))}
