"""Authentication schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import CamelModel


class GoogleLoginRequest(CamelModel):
    """Google Identity Services credential (an id token)."""

    # The Google client posts extra fields such as clientId and select_by
    model_config = ConfigDict(extra="ignore")

    credential: str = Field(..., min_length=1)


class RefreshRequest(CamelModel):
    model_config = ConfigDict(extra="ignore")

    refresh_token: Optional[str] = None


class UserProfile(BaseModel):
    id: str
    email: str
    role: str
    name: Optional[str] = None
    profilePicture: Optional[str] = None
    isVerified: bool = True


class LoginResponse(BaseModel):
    success: bool = True
    message: str
    accessToken: str
    refreshToken: str
    user: UserProfile


class RefreshResponse(BaseModel):
    success: bool = True
    accessToken: str
