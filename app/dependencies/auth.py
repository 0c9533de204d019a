from typing import Optional

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.config import settings
from app.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from app.core.security import decode_access_token
from app.dependencies.database import get_db
from app.models.user import User
from app.services import subscription_service

logger = structlog.get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolves the bearer token to a User. Every other gate depends on this one.
    """
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationError()

    user_id = decode_access_token(credentials.credentials)
    user = await db.get(User, user_id)
    if user is None:
        logger.warning("token_user_missing", user_id=str(user_id))
        raise AuthenticationError()

    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return user

async def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise AuthorizationError("Access denied: Admin rights required")
    return current_user

async def require_active_subscription(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> User:
    # Always re-read: expiry or an admin deactivation can happen between requests
    subscription = await subscription_service.get_for_broker(db, current_user.id)
    if subscription is None or not subscription.is_active:
        raise AuthorizationError("Access denied: Active subscription required")
    return current_user

async def require_location_access(
    latitude: Optional[str] = Query(None),
    longitude: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> User:
    if not latitude or not longitude:
        raise ValidationError("Location coordinates required")
    try:
        lat, lon = float(latitude), float(longitude)
    except ValueError:
        raise ValidationError("Location coordinates required")

    has_access = await subscription_service.has_location_access(
        db,
        current_user.id,
        lat,
        lon,
        enforce_radius=settings.LOCATION_ACCESS_ENFORCE_RADIUS,
    )
    if not has_access:
        raise AuthorizationError("Access denied: Location not in subscription")
    return current_user
