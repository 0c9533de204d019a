from typing import List
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import structlog

from app.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from app.core.security import hash_password, verify_password
from app.models.user import AccountStatus, User
from app.schemas.user import SignupRequest
from app.utils.geo import valid_coordinates

logger = structlog.get_logger(__name__)

BROKER_STATUSES = {status.value for status in AccountStatus}


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(db: AsyncSession, email: str):
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def register_user(db: AsyncSession, data: SignupRequest) -> User:
    """
    Creates a broker account. Admin accounts are never created through
    signup.
    """
    if data.password != data.confirm_password:
        raise ValidationError("Passwords do not match", fields=["confirmPassword"])

    if not valid_coordinates(data.latitude, data.longitude):
        raise ValidationError("Invalid coordinates", fields=["latitude", "longitude"])

    if await get_user_by_email(db, data.email) is not None:
        raise ValidationError("Email already registered", fields=["email"])

    user = User(
        full_name=data.full_name,
        email=normalize_email(data.email),
        phone=data.phone,
        rera_number=data.rera_number,
        state=data.state,
        city=data.city,
        password_hash=hash_password(data.password),
        is_admin=False,
        status=AccountStatus.ACTIVE,
        latitude=data.latitude,
        longitude=data.longitude,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info("user_registered", user_id=str(user.id))
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("login_failed", email=normalize_email(email))
        raise AuthenticationError("Invalid credentials")

    if user.status == AccountStatus.INACTIVE:
        raise AuthorizationError("Account is inactive")

    logger.info("login_succeeded", user_id=str(user.id))
    return user


async def list_brokers(db: AsyncSession) -> List[User]:
    result = await db.execute(
        select(User)
        .where(User.is_admin.is_(False))
        .options(selectinload(User.subscription))
        .order_by(User.created_at.desc())
    )
    return result.scalars().all()


async def get_broker(db: AsyncSession, broker_id: UUID) -> User:
    result = await db.execute(
        select(User)
        .where(User.id == broker_id)
        .options(selectinload(User.subscription))
        .execution_options(populate_existing=True)
    )
    broker = result.scalar_one_or_none()
    if broker is None:
        raise NotFoundError("Broker not found")
    return broker


async def set_broker_status(db: AsyncSession, broker_id: UUID, status: str) -> User:
    if status not in BROKER_STATUSES:
        raise ValidationError("Invalid status", fields=["status"])

    broker = await get_broker(db, broker_id)
    broker.status = AccountStatus(status)
    await db.commit()

    logger.info("broker_status_changed", broker_id=str(broker_id), status=status)
    return await get_broker(db, broker_id)


async def count_brokers(db: AsyncSession) -> int:
    total = await db.scalar(select(func.count(User.id)).where(User.is_admin.is_(False)))
    return total or 0
