"""Google sign-in: id-token verification and user create-or-link."""

import logging
from typing import Any, Dict

from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token
from motor.motor_asyncio import AsyncIOMotorDatabase
from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.core.exceptions import AppException, AuthenticationException, ServiceUnavailableException
from app.core.security import Role
from app.models.user import USERS
from app.utils.helpers import normalize_email, utcnow

logger = logging.getLogger(__name__)


async def verify_google_credential(credential: str) -> Dict[str, Any]:
    """Verify a Google id token against the configured client id.

    The Google library fetches signing certificates over blocking HTTP, so the
    call runs in the threadpool.
    """
    if not settings.GOOGLE_CLIENT_ID:
        logger.error("Google client ID is not configured")
        raise AppException("Google client ID is not configured")

    try:
        payload = await run_in_threadpool(
            google_id_token.verify_oauth2_token,
            credential,
            google_requests.Request(),
            settings.GOOGLE_CLIENT_ID,
        )
    except ValueError as e:
        logger.warning(f"Invalid Google token: {str(e)}")
        raise AuthenticationException(f"Invalid Google token: {str(e)}")
    except Exception as e:
        logger.error(f"Google token verification failed: {type(e).__name__}: {str(e)}", exc_info=True)
        raise ServiceUnavailableException("Google token verification failed")

    if not payload.get("email"):
        raise AuthenticationException("Google token missing email")

    return payload


async def get_or_create_google_user(db: AsyncIOMotorDatabase, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Find the user by email or Google id; create or link as needed."""
    email = normalize_email(payload["email"])
    google_id = payload.get("sub")
    picture = payload.get("picture")

    users = db[USERS]
    user = await users.find_one({"$or": [{"email": email}, {"googleId": google_id}]})

    if user is None:
        now = utcnow()
        user = {
            "googleId": google_id,
            "name": payload.get("name") or email.split("@")[0],
            "email": email,
            "profilePicture": picture,
            "role": Role.USER.value,
            "isVerified": True,
            "createdAt": now,
            "updatedAt": now,
        }
        result = await users.insert_one(user)
        user["_id"] = result.inserted_id
        logger.info(f"Registered new user from Google: {email}")
    elif not user.get("googleId"):
        changes = {
            "googleId": google_id,
            "profilePicture": picture,
            "isVerified": True,
            "updatedAt": utcnow(),
        }
        await users.update_one({"_id": user["_id"]}, {"$set": changes})
        user.update(changes)
        logger.info(f"Linked Google account to existing user: {email}")

    return user
