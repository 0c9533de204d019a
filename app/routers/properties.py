from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.dependencies.auth import get_current_admin, get_current_user, require_active_subscription
from app.dependencies.database import get_db
from app.models.property import PropertyCategory, TransactionType
from app.models.user import User
from app.schemas.common import ApiResponse, MessageResponse
from app.schemas.property import PropertyCreate, PropertyResponse, PropertyReview, PropertyUpdate
from app.services import property_service
from app.services.property_service import PropertyFilters

logger = structlog.get_logger(__name__)

router = APIRouter()

@router.get("", response_model=ApiResponse[List[PropertyResponse]])
async def list_properties(
    category: PropertyCategory = PropertyCategory.RESIDENTIAL,
    type: Optional[TransactionType] = None,
    property_type: Optional[str] = Query(None, alias="propertyType"),
    station: Optional[str] = None,
    sub_location: Optional[str] = Query(None, alias="subLocation"),
    min_budget: Optional[Decimal] = Query(None, alias="minBudget"),
    max_budget: Optional[Decimal] = Query(None, alias="maxBudget"),
    is_cosmo: Optional[str] = Query(None, alias="isCosmo"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_active_subscription),
):
    """
    Approved listings matching every supplied filter, newest first. The
    budget bounds apply to rent, expected price or total package depending
    on ``type``.
    """
    filters = PropertyFilters(
        category=category,
        type=type,
        property_type=property_type,
        station=station,
        sub_location=sub_location,
        is_cosmo=None if is_cosmo is None else is_cosmo == "true",
        min_budget=min_budget,
        max_budget=max_budget,
    )
    properties = await property_service.list_properties(db, filters)
    return {"success": True, "count": len(properties), "data": properties}

@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[PropertyResponse])
async def create_property(
    payload: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    prop = await property_service.create_property(db, payload, current_user)
    return {"success": True, "data": prop}

@router.get("/my-inventory", response_model=ApiResponse[List[PropertyResponse]])
async def my_inventory(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    properties = await property_service.list_owner_properties(db, current_user.id)
    return {"success": True, "count": len(properties), "data": properties}

@router.get("/pending", response_model=ApiResponse[List[PropertyResponse]])
async def pending_properties(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    properties = await property_service.list_pending_properties(db)
    return {"success": True, "count": len(properties), "data": properties}

@router.put("/{property_id}", response_model=ApiResponse[PropertyResponse])
async def update_property(
    property_id: UUID,
    changes: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    prop = await property_service.update_property(db, property_id, changes, current_user)
    return {"success": True, "data": prop}

@router.delete("/{property_id}", response_model=MessageResponse)
async def delete_property(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    await property_service.delete_property(db, property_id, current_user)
    return {"success": True, "message": "Property deleted successfully"}

@router.patch("/{property_id}/status", response_model=ApiResponse[PropertyResponse])
async def review_property(
    property_id: UUID,
    review: PropertyReview,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    prop = await property_service.review_property(
        db, property_id, review.status, review.remarks, current_admin
    )
    return {"success": True, "data": prop}
