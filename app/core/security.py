"""Security utilities: JWT issue/verify, request identity, RBAC."""

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from bson import ObjectId
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel

from app.config import settings
from app.core.exceptions import AuthenticationException, AuthorizationException
from app.db.mongo import get_db
from app.models.user import USERS

logger = logging.getLogger(__name__)

# Bearer header is optional because the token may also arrive as a cookie
security = HTTPBearer(auto_error=False)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class Role(str, Enum):
    """User roles."""

    USER = "user"
    ADMIN = "admin"


class UserContext(BaseModel):
    """Identity attached to an authenticated request."""

    id: str
    email: str
    name: Optional[str] = None
    role: str = Role.USER.value

    @property
    def is_admin(self) -> bool:
        return can_access_any_owner(self.role)


def can_access_any_owner(role: str) -> bool:
    """Whether the role may act on records owned by other users."""
    return role == Role.ADMIN.value


def _secret_for(token_type: str) -> str:
    return settings.JWT_REFRESH_SECRET if token_type == REFRESH_TOKEN else settings.JWT_ACCESS_SECRET


def _create_token(subject: str, role: str, token_type: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": str(subject),
        "role": role or Role.USER.value,
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(to_encode, _secret_for(token_type), algorithm=settings.ALGORITHM)


def create_access_token(subject: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    return _create_token(subject, role, ACCESS_TOKEN, expires_delta or settings.ACCESS_TOKEN_TTL)


def create_refresh_token(subject: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT refresh token."""
    return _create_token(subject, role, REFRESH_TOKEN, expires_delta or settings.REFRESH_TOKEN_TTL)


def decode_token(token: str, token_type: str = ACCESS_TOKEN) -> dict:
    """Decode and verify a JWT of the given type."""
    try:
        payload = jwt.decode(token, _secret_for(token_type), algorithms=[settings.ALGORITHM])
    except JWTError:
        raise AuthenticationException("Invalid or expired token")

    if payload.get("type") != token_type:
        raise AuthenticationException("Invalid token type")
    return payload


def extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Bearer header first, then the auth cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.AUTH_COOKIE_NAME)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> UserContext:
    """Get current authenticated user from the bearer token or cookie."""
    token = extract_token(request, credentials)
    if not token:
        raise AuthenticationException("Access token required")

    payload = decode_token(token)

    user_id = payload.get("sub")
    if not user_id or not ObjectId.is_valid(user_id):
        raise AuthenticationException("Invalid token subject")

    user = await db[USERS].find_one({"_id": ObjectId(user_id)})
    if user is None:
        raise AuthenticationException("User not found")

    current_user = UserContext(
        id=str(user["_id"]),
        email=user["email"],
        name=user.get("name"),
        role=user.get("role", Role.USER.value),
    )
    request.state.user = current_user
    return current_user


async def get_current_user_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> Optional[UserContext]:
    """Like get_current_user, but anonymous requests resolve to None."""
    try:
        return await get_current_user(request, credentials, db)
    except AuthenticationException:
        return None


def require_role(*allowed_roles: Role):
    """Dependency to check if user has required role."""

    async def role_checker(current_user: UserContext = Depends(get_current_user)) -> UserContext:
        if current_user.role in [role.value for role in allowed_roles]:
            return current_user

        logger.warning("User %s denied: role %s not in %s", current_user.id, current_user.role, allowed_roles)
        raise AuthorizationException(
            f"Insufficient permissions. Required: {[r.value for r in allowed_roles]}"
        )

    return role_checker
