"""
DogPatch Backend - User Service
================================

What:  Registration, lookup, login and profile updates for users.
How:   Works on the request's AsyncSession and flushes its writes; the
       session dependency commits when the request succeeds.
Who:   Called by the users router and the seed routine.

Email handling:
    Emails are compared and stored trimmed and lowercased, so every lookup
    here is an exact match on the normalized value.
"""

import logging
from typing import Optional
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dogpatch.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from dogpatch.models.rating import DEFAULT_REVIEW_VALUE
from dogpatch.models.token import Token
from dogpatch.models.user import User
from dogpatch.schemas.user import UserCreate, UserUpdate
from dogpatch.security import generate_token, hash_password, verify_password
from dogpatch.services.image_service import PROFILE_IMAGES, image_service

logger = logging.getLogger(__name__)

# Update fields whose columns are NOT NULL
REQUIRED_FIELDS = ("email", "name", "password")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def check_email_format(email: str) -> None:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(message=str(e), field="email", context={"email": email})


class UserService:
    """
    Business logic for users.

    Error Handling Strategy:
        Our own exceptions propagate unchanged. SQLAlchemy errors are wrapped
        in PersistenceError so no SQL ever reaches a client.
    """

    async def find_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == normalize_email(email)))
        return result.scalar_one_or_none()

    async def register_user(self, db: AsyncSession, payload: UserCreate) -> User:
        """
        Create a user with zero reviews and the default average.

        Raises:
            ValidationError: email, name or password missing, or email malformed
            ConflictError: the email is already registered
        """
        email = normalize_email(payload.email)
        if not email or not payload.name or not payload.password:
            raise ValidationError(message="email, name, password required")
        check_email_format(email)

        try:
            if await self.find_by_email(db, email) is not None:
                raise ConflictError(
                    message="Email is already registered",
                    context={"email": email},
                )

            user = User(
                about=payload.about,
                email=email,
                name=payload.name,
                password=hash_password(payload.password),
                profile_image_url=payload.profile_image_url,
                review_count=0,
                review_rating_average=DEFAULT_REVIEW_VALUE,
            )
            db.add(user)
            await db.flush()
            logger.info("User registered: %s", user.id)
            return user

        except SQLAlchemyError as e:
            logger.error("Database error registering %s: %s", email, str(e), exc_info=True)
            raise PersistenceError(context={"error_type": type(e).__name__})

    async def get_user(self, db: AsyncSession, user_id: UUID) -> User:
        """
        Raises:
            NotFoundError: no user with `user_id`
        """
        try:
            user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise PersistenceError(context={"user_id": str(user_id)})

        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return user

    async def search_by_email(self, db: AsyncSession, email: Optional[str]) -> User:
        """Case-insensitive exact match on email."""
        if email is None or not email.strip():
            raise ValidationError(message="Missing email query parameter", field="email")

        try:
            user = await self.find_by_email(db, email)
        except SQLAlchemyError as e:
            logger.error("Database error searching users: %s", str(e))
            raise PersistenceError(context={"error_type": type(e).__name__})

        if user is None:
            raise NotFoundError(resource="user", context={"email": normalize_email(email)})
        return user

    async def login(self, db: AsyncSession, email: str, password: str) -> Token:
        """
        Exchange Basic credentials for a new bearer token.

        Unknown email and wrong password produce the same error.
        """
        try:
            user = await self.find_by_email(db, email)
            if user is None or not verify_password(password, user.password):
                raise AuthenticationError(message="Invalid email or password", scheme="Basic")

            token = Token(token=generate_token(), user_id=user.id)
            db.add(token)
            await db.flush()
            logger.info("Token issued for user %s", user.id)
            return token

        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise PersistenceError(context={"error_type": type(e).__name__})

    async def update_user(self, db: AsyncSession, user: User, update: UserUpdate) -> User:
        """
        Apply a sparse update to `user`.

        Only the fields present in the request body are touched. An empty
        string is a value like any other and is stored as-is; null clears
        the optional fields (about, profile_image_url) and is rejected for
        the required ones.

        Raises:
            ValidationError: null for a required field, or a malformed email
            ConflictError: another user already has the new email
        """
        changes = update.model_dump(exclude_unset=True)

        for field in REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(message=f"{field} cannot be null", field=field)

        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
            if changes["email"]:
                check_email_format(changes["email"])

        if "password" in changes:
            changes["password"] = hash_password(changes["password"])

        try:
            if "email" in changes:
                result = await db.execute(
                    select(User.id).where(User.email == changes["email"], User.id != user.id)
                )
                if result.first() is not None:
                    raise ConflictError(
                        message="Email is already registered",
                        context={"email": changes["email"]},
                    )

            for field, value in changes.items():
                setattr(user, field, value)
            await db.flush()
            logger.info("User %s updated: %s", user.id, sorted(changes))
            return user

        except SQLAlchemyError as e:
            logger.error("Database error updating user %s: %s", user.id, str(e), exc_info=True)
            raise PersistenceError(context={"user_id": str(user.id)})

    async def upload_profile_image(
        self,
        db: AsyncSession,
        user: User,
        filename: str,
        content: bytes,
    ) -> User:
        """Store a new profile image and point `profile_image_url` at it."""
        locator = await image_service.store_upload(user.id, PROFILE_IMAGES, filename, content)

        try:
            user.profile_image_url = locator
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error saving profile image for %s: %s", user.id, str(e))
            raise PersistenceError(context={"user_id": str(user.id)})

        return user


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
