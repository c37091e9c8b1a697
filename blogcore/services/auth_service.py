"""
Auth service: issues credential pairs and resolves the acting user.

Login failures never reveal whether the email exists: an unknown email
and a wrong password raise the same ``Unauthorized("Invalid credentials")``.

``refresh`` re-issues a pair for any resolvable user id; the presented
refresh token itself is not inspected beyond the bearer check done by
the request dependency.
"""
import logging
import uuid
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from blogcore.config import settings
from blogcore.exceptions import Unauthorized
from blogcore.models import User, UserRole
from blogcore.schemas import (
    AuthResponse,
    RegisterRequest,
    TokenPair,
    UserCreate,
    UserResponse,
)
from blogcore.security import create_token, verify_password
from blogcore.services import user_service

logger = logging.getLogger(__name__)


def generate_tokens(user: User) -> TokenPair:
    """Sign ``{sub, email, role}`` twice: a short-lived access token and a 7-day refresh token."""
    claims = {"sub": str(user.id), "email": user.email, "role": user.role.value}
    return TokenPair(
        access_token=create_token(
            claims, timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        ),
        refresh_token=create_token(
            claims, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
        ),
    )


def _auth_response(user: User) -> AuthResponse:
    tokens = generate_tokens(user)
    return AuthResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        user=UserResponse.model_validate(user),
    )


async def register(db: AsyncSession, data: RegisterRequest) -> AuthResponse:
    """Create a regular user account and sign it in."""
    user = await user_service.create_user(
        db,
        UserCreate(
            email=data.email,
            first_name=data.first_name,
            last_name=data.last_name,
            password=data.password,
            role=UserRole.USER,
        ),
    )
    return _auth_response(user)


async def login(db: AsyncSession, email: str, password: str) -> AuthResponse:
    user = await user_service.get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise Unauthorized("Invalid credentials")

    logger.info("User logged in id=%s", user.id)
    return _auth_response(user)


async def refresh(db: AsyncSession, user_id: uuid.UUID) -> AuthResponse:
    user = await validate_user(db, user_id)
    return _auth_response(user)


async def validate_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    """Resolve the subject of a verified token, or raise ``Unauthorized``."""
    user = await db.get(User, user_id)
    if user is None:
        raise Unauthorized("User not found")
    return user
