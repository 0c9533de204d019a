import time
from datetime import timedelta
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.models.base import utcnow
from app.models.subscription import Subscription, SubscriptionPaymentStatus, SubscriptionStatus
from app.models.user import User
from app.schemas.subscription import LocationInput
from app.utils.geo import haversine_meters

logger = structlog.get_logger(__name__)

ADMIN_SETTABLE_STATUSES = {SubscriptionStatus.ACTIVE.value, SubscriptionStatus.INACTIVE.value}


def calculate_price(location_count: int) -> int:
    return location_count * settings.PRICE_PER_LOCATION


def generate_transaction_id() -> str:
    # Payment completion is simulated; a gateway would supply this reference
    return f"TRANS_{int(time.time() * 1000)}_{uuid4().hex[:8]}"


async def get_for_broker(db: AsyncSession, broker_id: UUID) -> Optional[Subscription]:
    result = await db.execute(
        select(Subscription)
        .where(Subscription.broker_id == broker_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def upsert_for_broker(db: AsyncSession, broker: User, locations: List[LocationInput]) -> Subscription:
    """
    Creates the broker's subscription or replaces the existing one's
    locations wholesale. Any change puts the subscription back to pending
    until the payment is made again.
    """
    if not locations:
        raise ValidationError("Please select at least one location", fields=["locations"])

    formatted_locations = [
        {
            "name": location.name,
            "latitude": location.latitude,
            "longitude": location.longitude,
            "radius": location.radius or settings.DEFAULT_RADIUS_METERS,
            "price": settings.PRICE_PER_LOCATION,
        }
        for location in locations
    ]
    start_date = utcnow()
    end_date = start_date + timedelta(days=settings.SUBSCRIPTION_DAYS)

    subscription = await get_for_broker(db, broker.id)
    if subscription is None:
        subscription = Subscription(broker_id=broker.id, payment_history=[])
        db.add(subscription)

    subscription.locations = formatted_locations
    subscription.total_price = calculate_price(len(formatted_locations))
    subscription.start_date = start_date
    subscription.end_date = end_date
    subscription.status = SubscriptionStatus.PENDING
    subscription.payment_status = SubscriptionPaymentStatus.PENDING

    await db.commit()
    await db.refresh(subscription)

    logger.info(
        "subscription_saved",
        subscription_id=str(subscription.id),
        broker_id=str(broker.id),
        location_count=len(formatted_locations),
        total_price=subscription.total_price,
    )
    return subscription


async def complete_payment(db: AsyncSession, broker: User) -> Subscription:
    subscription = await get_for_broker(db, broker.id)
    if subscription is None:
        raise NotFoundError("Subscription not found")

    entry = {
        "amount": subscription.total_price,
        "date": utcnow().isoformat(),
        "status": SubscriptionPaymentStatus.COMPLETED.value,
        "transaction_id": generate_transaction_id(),
    }
    subscription.payment_status = SubscriptionPaymentStatus.COMPLETED
    subscription.status = SubscriptionStatus.ACTIVE
    # A new list so the JSON column is flagged as changed; entries are never edited
    subscription.payment_history = [*(subscription.payment_history or []), entry]

    await db.commit()
    await db.refresh(subscription)

    logger.info(
        "subscription_payment_completed",
        subscription_id=str(subscription.id),
        amount=entry["amount"],
        transaction_id=entry["transaction_id"],
    )
    return subscription


async def set_status(db: AsyncSession, subscription_id: UUID, status: str) -> Subscription:
    if status not in ADMIN_SETTABLE_STATUSES:
        raise ValidationError("Invalid status", fields=["status"])

    subscription = await db.get(Subscription, subscription_id)
    if subscription is None:
        raise NotFoundError("Subscription not found")

    subscription.status = SubscriptionStatus(status)
    await db.commit()
    await db.refresh(subscription)

    logger.info("subscription_status_changed", subscription_id=str(subscription.id), status=status)
    return subscription


async def list_subscriptions(db: AsyncSession) -> List[Subscription]:
    result = await db.execute(select(Subscription).order_by(Subscription.created_at.desc()))
    return result.scalars().all()


async def has_location_access(
    db: AsyncSession,
    broker_id: UUID,
    latitude: float,
    longitude: float,
    enforce_radius: bool = True,
) -> bool:
    """
    True when the broker's current (active, unexpired) subscription covers
    the point. With ``enforce_radius`` off, any current subscription grants
    access to every point.
    """
    subscription = await get_for_broker(db, broker_id)
    if subscription is None or not subscription.is_current(utcnow()):
        return False

    if not enforce_radius:
        return True

    return any(
        haversine_meters(location["latitude"], location["longitude"], latitude, longitude)
        <= location.get("radius", settings.DEFAULT_RADIUS_METERS)
        for location in subscription.locations or []
    )


async def subscription_analytics(db: AsyncSession) -> List[dict]:
    result = await db.execute(
        select(
            Subscription.status,
            func.count(Subscription.id),
            func.coalesce(func.sum(Subscription.total_price), 0),
        ).group_by(Subscription.status)
    )
    return [
        {"status": status, "count": count, "total_revenue": revenue}
        for status, count, revenue in result.all()
    ]


async def count_active(db: AsyncSession) -> int:
    total = await db.scalar(
        select(func.count(Subscription.id)).where(Subscription.status == SubscriptionStatus.ACTIVE)
    )
    return total or 0


async def expire_subscriptions(db: AsyncSession) -> int:
    """Marks active subscriptions whose validity window has ended as inactive."""
    result = await db.execute(
        update(Subscription)
        .where(
            Subscription.status == SubscriptionStatus.ACTIVE,
            Subscription.end_date <= utcnow(),
        )
        .values(status=SubscriptionStatus.INACTIVE, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount or 0
