"""User service — the credential store.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the database. The CLI reuses
the same service for admin tasks (set-role) without going through HTTP.

bcrypt is CPU-bound and deliberately slow, so hashing and checking run
in the thread pool instead of on the event loop.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from gamehound.auth.password import hash_password, verify_password
from gamehound.db.models import USER_ROLES, User
from gamehound.errors import AuthError, ConflictError, NotFoundError, ValidationError

logger = structlog.get_logger()

# Same message for "no such email" and "wrong password"
INVALID_CREDENTIALS = "Invalid credentials"


class UserService:
    """Registration, login, and user lookups."""

    def __init__(self, db: AsyncSession, bcrypt_rounds: int = 12):
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    async def get_user(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def register(self, email: str | None, password: str | None, name: str | None) -> User:
        """Create a user with a bcrypt-hashed password.

        Raises ValidationError if any field is missing or empty, and
        ConflictError if the email is taken — whether that is caught by
        the lookup or by the unique constraint on insert.
        """
        if not email or not password or not name:
            raise ValidationError("Email, password and name are required")

        if await self.get_by_email(email):
            raise ConflictError("User already exists")

        password_hash = await run_in_threadpool(
            hash_password, password, self.bcrypt_rounds
        )
        user = User(email=email, password_hash=password_hash, name=name)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            await self.db.rollback()
            raise ConflictError("User already exists")

        logger.info("auth.registered", user_id=user.id)
        return user

    async def authenticate(self, email: str | None, password: str | None) -> User:
        """Check credentials and return the user.

        Unknown email and wrong password raise the same AuthError so a
        caller cannot probe which emails are registered.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self.get_by_email(email)
        if not user:
            logger.info("auth.login_failed", reason="unknown_email")
            raise AuthError(INVALID_CREDENTIALS)

        if not await run_in_threadpool(verify_password, password, user.password_hash):
            logger.info("auth.login_failed", reason="bad_password", user_id=user.id)
            raise AuthError(INVALID_CREDENTIALS)

        logger.info("auth.login", user_id=user.id)
        return user

    async def set_role(self, email: str, role: str) -> User:
        """Change a user's role (admin operation, CLI only)."""
        if role not in USER_ROLES:
            raise ValidationError(
                f"Unknown role '{role}' (expected one of: {', '.join(USER_ROLES)})"
            )
        user = await self.get_by_email(email)
        if not user:
            raise NotFoundError(f"No user with email {email}")

        user.role = role
        await self.db.commit()
        logger.info("users.role_changed", user_id=user.id, role=role)
        return user
