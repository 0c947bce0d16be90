"""Authentication endpoints: Google sign-in, token refresh, logout, profile."""

import logging
from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.config import settings
from app.core.deps import get_db
from app.core.exceptions import AuthenticationException, AuthorizationException, ResourceNotFoundException
from app.core.rate_limit import limiter
from app.core.security import (
    REFRESH_TOKEN,
    UserContext,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_current_user,
    get_current_user_optional,
)
from app.models.user import USERS, public_profile
from app.schemas.auth import GoogleLoginRequest, LoginResponse, RefreshRequest, RefreshResponse, UserProfile
from app.services.auth_service import get_or_create_google_user, verify_google_credential

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/google", response_model=LoginResponse)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def login_google(
    request: Request,
    payload: GoogleLoginRequest,
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """Sign in with a Google id token; first sign-in registers the user."""
    logger.info("Google login attempt received")
    claims = await verify_google_credential(payload.credential)
    user = await get_or_create_google_user(db, claims)

    user_id = str(user["_id"])
    role = user.get("role", "user")
    return LoginResponse(
        message="Google authentication successful",
        accessToken=create_access_token(user_id, role),
        refreshToken=create_refresh_token(user_id, role),
        user=UserProfile(**public_profile(user)),
    )


@router.post("/refresh", response_model=RefreshResponse)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def refresh_token(request: Request, payload: Optional[RefreshRequest] = None):
    """Exchange a refresh token for a new access token."""
    token = payload.refresh_token if payload else None
    if not token:
        raise AuthenticationException("Missing refresh token")

    try:
        claims = decode_token(token, REFRESH_TOKEN)
    except AuthenticationException:
        raise AuthorizationException("Invalid refresh token")

    return RefreshResponse(accessToken=create_access_token(claims["sub"], claims.get("role", "user")))


@router.post("/logout")
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def logout(request: Request, current_user: Optional[UserContext] = Depends(get_current_user_optional)):
    """Stateless acknowledgement; clients discard their tokens."""
    if current_user:
        logger.info("User %s logged out", current_user.id)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me")
async def me(
    current_user: UserContext = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """Profile of the authenticated user."""
    user = await db[USERS].find_one({"_id": ObjectId(current_user.id)})
    if not user:
        raise ResourceNotFoundException("User")
    return {"success": True, **public_profile(user)}
