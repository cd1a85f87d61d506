"""User service: the credential store.

Signup creates a user with a bcrypt hash; signin checks credentials.
Both return ORM users; token issuance is the API layer's job.
"""

from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inkpot.auth.password import hash_password, verify_password
from inkpot.config import settings
from inkpot.db.models import User
from inkpot.errors import DuplicateEmail
from inkpot.schemas.user import SignupInput

logger = structlog.get_logger()


class UserService:
    """Business logic for user accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def create_user(self, fields: SignupInput) -> User:
        """Create a user. Raises DuplicateEmail if the email is taken.

        The pre-check gives a clean error in the common case; the unique
        constraint catches the race between two concurrent signups.
        """
        if await self.get_by_email(fields.email):
            raise DuplicateEmail()

        user = User(
            first_name=fields.first_name,
            last_name=fields.last_name,
            email=fields.email,
            password_hash=hash_password(fields.password, rounds=settings.bcrypt_rounds),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateEmail()

        logger.info("user.created", user_id=str(user.id))
        return user

    async def verify_credentials(self, email: str, password: str) -> Optional[User]:
        """Return the user if email/password match, else None."""
        user = await self.get_by_email(email.strip().lower())
        if not user or not verify_password(password, user.password_hash):
            return None
        return user
