"""Request dependencies: database client and the authenticated driver."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import DriverIdentity
from ..services.matching.policy import is_driver_role

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_db():
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not configured. Set FM_SUPABASE_URL and FM_SUPABASE_KEY.",
        )
    return client


def get_current_driver(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    client=Depends(get_db),
) -> DriverIdentity:
    """Resolve the bearer token to the caller's driver-like profile."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authorization required")

    try:
        response = client.auth.get_user(credentials.credentials)
    except Exception as exc:
        logger.info(f"Token validation failed: {exc}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials") from exc

    user = getattr(response, "user", None)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    try:
        profiles = (
            client.table("profiles")
            .select("id, user_id, role, active_mode")
            .eq("user_id", user.id)
            .execute()
        ).data or []
    except Exception as exc:
        logger.exception(f"Failed to load profiles for user {user.id}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Matching temporarily unavailable, please retry",
        ) from exc

    for profile in profiles:
        role = profile.get("active_mode") or profile.get("role")
        if is_driver_role(role, settings.driver_roles):
            return DriverIdentity(profile_id=str(profile["id"]), user_id=str(user.id), role=str(role).upper())

    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Only drivers and carriers can access matching",
    )
