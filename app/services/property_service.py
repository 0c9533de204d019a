from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic.alias_generators import to_camel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.config import settings
from app.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.models.base import utcnow
from app.models.property import (BUDGET_FIELDS, Property, PropertyCategory, PropertyStatus,
                                 TransactionType)
from app.models.user import User
from app.schemas.property import PropertyUpdate
from app.utils.geo import bounding_box, haversine_meters

logger = structlog.get_logger(__name__)

# Columns every listing needs whatever its transaction type
COMMON_REQUIRED_FIELDS = (
    "category", "type", "building_or_society", "road_or_location",
    "station", "property_type", "latitude", "longitude",
)

REVIEW_DECISIONS = {PropertyStatus.APPROVED.value, PropertyStatus.REJECTED.value}


@dataclass
class PropertyFilters:
    category: PropertyCategory = PropertyCategory.RESIDENTIAL
    type: Optional[TransactionType] = None
    property_type: Optional[str] = None
    station: Optional[str] = None
    sub_location: Optional[str] = None
    is_cosmo: Optional[bool] = None
    min_budget: Optional[Decimal] = None
    max_budget: Optional[Decimal] = None


def ensure_type_requirements(prop: Property):
    """Raises ValidationError naming every required field the listing lacks."""
    missing = [name for name in COMMON_REQUIRED_FIELDS if getattr(prop, name) is None]
    if prop.type is not None:
        missing.extend(prop.missing_required_fields())
    if missing:
        fields = [to_camel(name) for name in missing]
        kind = prop.type.value if prop.type is not None else "this"
        raise ValidationError(
            f"Missing required fields for {kind} property: {', '.join(fields)}",
            fields=fields,
        )


def _check_owner_or_admin(prop: Property, actor: User, action: str):
    if prop.owner_id != actor.id and not actor.is_admin:
        raise AuthorizationError(f"Not authorized to {action} this property")


async def get_property(db: AsyncSession, property_id: UUID) -> Property:
    prop = await db.get(Property, property_id)
    if prop is None:
        raise NotFoundError("Property not found")
    return prop


async def create_property(db: AsyncSession, payload, owner: User) -> Property:
    data = payload.model_dump(exclude={"type"})
    prop = Property(
        **data,
        type=TransactionType(payload.type),
        owner_id=owner.id,
        status=PropertyStatus.PENDING,
    )
    ensure_type_requirements(prop)

    db.add(prop)
    await db.commit()
    await db.refresh(prop)

    logger.info(
        "property_created",
        property_id=str(prop.id),
        owner_id=str(owner.id),
        type=prop.type.value,
        category=prop.category.value,
    )
    return prop


async def list_properties(db: AsyncSession, filters: PropertyFilters) -> List[Property]:
    """Approved listings only, newest first."""
    query = select(Property).where(
        Property.status == PropertyStatus.APPROVED,
        Property.category == filters.category,
    )

    if filters.type:
        query = query.where(Property.type == filters.type)
    if filters.property_type:
        query = query.where(Property.property_type == filters.property_type)
    if filters.station:
        query = query.where(Property.station == filters.station)
    if filters.sub_location:
        query = query.where(Property.sub_location == filters.sub_location)
    if filters.is_cosmo is not None:
        query = query.where(Property.is_cosmo == filters.is_cosmo)

    if filters.min_budget is not None or filters.max_budget is not None:
        budget_column = getattr(Property, BUDGET_FIELDS.get(filters.type, "total_package"))
        if filters.min_budget is not None:
            query = query.where(budget_column >= filters.min_budget)
        if filters.max_budget is not None:
            query = query.where(budget_column <= filters.max_budget)

    result = await db.execute(query.order_by(Property.created_at.desc()))
    return result.scalars().all()


async def list_owner_properties(db: AsyncSession, owner_id: UUID) -> List[Property]:
    result = await db.execute(
        select(Property)
        .where(Property.owner_id == owner_id)
        .order_by(Property.created_at.desc())
    )
    return result.scalars().all()


async def list_pending_properties(db: AsyncSession) -> List[Property]:
    result = await db.execute(
        select(Property)
        .where(Property.status == PropertyStatus.PENDING)
        .order_by(Property.created_at.desc())
    )
    return result.scalars().all()


async def update_property(db: AsyncSession, property_id: UUID, changes: PropertyUpdate, actor: User) -> Property:
    """
    Applies a partial update. A broker editing their own listing always
    sends it back to review; only an admin may set the status directly.
    """
    prop = await get_property(db, property_id)
    _check_owner_or_admin(prop, actor, "update")

    updates = changes.model_dump(exclude_unset=True)
    for key, value in updates.items():
        setattr(prop, key, value)

    if not actor.is_admin:
        prop.status = PropertyStatus.PENDING
    elif updates.get("status") in (PropertyStatus.APPROVED, PropertyStatus.REJECTED):
        # An admin moderating through an edit leaves the same trail as a review
        prop.reviewed_at = utcnow()
        prop.reviewed_by_id = actor.id

    try:
        ensure_type_requirements(prop)
    except ValidationError:
        await db.rollback()
        raise

    await db.commit()
    await db.refresh(prop)

    logger.info(
        "property_updated",
        property_id=str(prop.id),
        actor_id=str(actor.id),
        status=prop.status.value,
    )
    return prop


async def delete_property(db: AsyncSession, property_id: UUID, actor: User):
    prop = await get_property(db, property_id)
    _check_owner_or_admin(prop, actor, "delete")

    await db.delete(prop)
    await db.commit()
    logger.info("property_deleted", property_id=str(property_id), actor_id=str(actor.id))


async def review_property(
    db: AsyncSession,
    property_id: UUID,
    decision: str,
    remarks: Optional[str],
    reviewer: User,
) -> Property:
    if decision not in REVIEW_DECISIONS:
        raise ValidationError("Invalid status", fields=["status"])

    prop = await get_property(db, property_id)
    prop.status = PropertyStatus(decision)
    prop.admin_remarks = remarks
    prop.reviewed_at = utcnow()
    prop.reviewed_by_id = reviewer.id

    await db.commit()
    await db.refresh(prop)

    logger.info(
        "property_reviewed",
        property_id=str(prop.id),
        reviewer_id=str(reviewer.id),
        decision=decision,
    )
    return prop


async def find_nearby(
    db: AsyncSession,
    latitude: float,
    longitude: float,
    radius: float = None,
) -> List[Property]:
    """
    Approved listings within ``radius`` meters of the point, nearest first.
    Each returned row carries a transient ``distance_meters`` attribute.
    """
    radius = radius if radius is not None else settings.DEFAULT_RADIUS_METERS
    min_lat, max_lat, min_lon, max_lon = bounding_box(latitude, longitude, radius)

    query = select(Property).where(
        Property.status == PropertyStatus.APPROVED,
        Property.latitude.between(min_lat, max_lat),
    )
    # The longitude window is skipped when it wraps the antimeridian
    if min_lon >= -180 and max_lon <= 180:
        query = query.where(Property.longitude.between(min_lon, max_lon))

    result = await db.execute(query)
    nearby = []
    for prop in result.scalars().all():
        distance = haversine_meters(latitude, longitude, prop.latitude, prop.longitude)
        if distance <= radius:
            prop.distance_meters = distance
            nearby.append(prop)

    nearby.sort(key=lambda prop: prop.distance_meters)
    return nearby


async def list_stations(db: AsyncSession) -> List[str]:
    result = await db.execute(select(Property.station).distinct().order_by(Property.station))
    return result.scalars().all()


async def list_sub_locations(db: AsyncSession, station: str) -> List[str]:
    result = await db.execute(
        select(Property.sub_location)
        .where(Property.station == station, Property.sub_location.is_not(None))
        .distinct()
        .order_by(Property.sub_location)
    )
    return result.scalars().all()


async def search_locations(db: AsyncSession, query: str) -> dict:
    pattern = f"%{query}%"
    stations = await db.execute(
        select(Property.station)
        .where(Property.station.ilike(pattern))
        .distinct()
        .order_by(Property.station)
    )
    sub_locations = await db.execute(
        select(Property.sub_location)
        .where(Property.sub_location.ilike(pattern))
        .distinct()
        .order_by(Property.sub_location)
    )
    return {
        "stations": stations.scalars().all(),
        "sub_locations": sub_locations.scalars().all(),
    }


async def count_properties(db: AsyncSession, status: PropertyStatus = None) -> int:
    query = select(func.count(Property.id))
    if status is not None:
        query = query.where(Property.status == status)
    total = await db.scalar(query)
    return total or 0


async def property_analytics(db: AsyncSession) -> List[dict]:
    result = await db.execute(
        select(Property.category, Property.type, Property.status, func.count(Property.id))
        .group_by(Property.category, Property.type, Property.status)
    )
    return [
        {"category": category, "type": kind, "status": status, "count": count}
        for category, kind, status, count in result.all()
    ]
