"""
Marknote Backend — Auth Service
===============================

What:  Account registration, credential checks, and session identity lookup.
Who:   Called by the auth router; the notes routes only see the user id that
       the session dependency resolves.

The same AuthenticationRequiredError is raised for an unknown email and a
wrong password, so login responses never reveal which accounts exist.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from marknote.exceptions import (
    AuthenticationRequiredError,
    DatabaseError,
    MarknoteError,
    ValidationError,
)
from marknote.models.user import User
from marknote.schemas.auth import LoginRequest, RegisterRequest, UserResponse
from marknote.services.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """Stateless account operations; every call receives its own session."""

    async def register(self, db: AsyncSession, payload: RegisterRequest) -> UserResponse:
        """
        Create an account.

        Raises:
            ValidationError: email already registered (→ 400)
            DatabaseError: insert failed for any other reason (→ 500)
        """
        try:
            if await self._find_by_email(db, payload.email) is not None:
                raise ValidationError(
                    message="An account with this email already exists",
                    field="email",
                )

            user = User(
                name=payload.name,
                email=payload.email,
                password_hash=hash_password(payload.password),
            )
            db.add(user)
            await db.flush()
            logger.info("User registered: %s", user.id)
            return UserResponse.model_validate(user)

        except MarknoteError:
            raise
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            raise ValidationError(
                message="An account with this email already exists",
                field="email",
            )
        except Exception as e:
            logger.error("Database error registering user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the account. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def authenticate(self, db: AsyncSession, payload: LoginRequest) -> UserResponse:
        """
        Verify credentials and return the matching user.

        Raises:
            AuthenticationRequiredError: unknown email or wrong password (→ 401)
        """
        try:
            user = await self._find_by_email(db, payload.email)
        except Exception as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not log in. Please try again.",
                context={"error_type": type(e).__name__},
            )

        if user is None or not verify_password(payload.password, user.password_hash):
            logger.info("Failed login attempt for %s", payload.email)
            raise AuthenticationRequiredError(message="Invalid email or password")

        return UserResponse.model_validate(user)

    async def get_user(self, db: AsyncSession, user_id: UUID) -> UserResponse:
        """
        Resolve the user behind a session.

        Raises:
            AuthenticationRequiredError: the account no longer exists (→ 401)
        """
        try:
            result = await db.execute(select(User).where(User.id == user_id))
            user = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not load the current user. Please try again.",
                context={"user_id": str(user_id)},
            )

        if user is None:
            raise AuthenticationRequiredError()
        return UserResponse.model_validate(user)

    async def _find_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = AuthService()
