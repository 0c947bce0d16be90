"""Dependency functions for FastAPI routes."""

from fastapi import Depends

from app.core.security import UserContext, get_current_user
from app.db.mongo import get_db
from app.services.query_builder import OwnerScope

__all__ = ["get_db", "get_owner_scope"]


async def get_owner_scope(current_user: UserContext = Depends(get_current_user)) -> OwnerScope:
    """Owner scope for the authenticated caller."""
    return OwnerScope.for_user(current_user)
