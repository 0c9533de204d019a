from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.dependencies.auth import get_current_admin, get_current_user
from app.dependencies.database import get_db
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.subscription import (PricingInfo, SubscriptionAdminResponse, SubscriptionCreate,
                                      SubscriptionResponse)
from app.schemas.user import StatusUpdate
from app.services import subscription_service

router = APIRouter()

@router.get("/pricing", response_model=ApiResponse[PricingInfo])
async def pricing():
    return {
        "success": True,
        "data": {
            "base_price": settings.PRICE_PER_LOCATION,
            "currency": settings.PRICE_CURRENCY,
            "validity_days": settings.SUBSCRIPTION_DAYS,
            "description": f"Price per location for {settings.SUBSCRIPTION_DAYS} days subscription",
        },
    }

@router.get("/my-subscription", response_model=ApiResponse[Optional[SubscriptionResponse]])
async def my_subscription(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    subscription = await subscription_service.get_for_broker(db, current_user.id)
    return {"success": True, "data": subscription}

@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[SubscriptionResponse])
async def save_subscription(
    payload: SubscriptionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Creates the caller's subscription or replaces its locations. The
    subscription stays pending until the payment is completed.
    """
    subscription = await subscription_service.upsert_for_broker(db, current_user, payload.locations)
    return {"success": True, "data": subscription}

@router.post("/complete-payment", response_model=ApiResponse[SubscriptionResponse])
async def complete_payment(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    subscription = await subscription_service.complete_payment(db, current_user)
    return {"success": True, "data": subscription}

@router.get("", response_model=ApiResponse[List[SubscriptionAdminResponse]])
async def list_subscriptions(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    subscriptions = await subscription_service.list_subscriptions(db)
    return {"success": True, "count": len(subscriptions), "data": subscriptions}

@router.patch("/{subscription_id}/status", response_model=ApiResponse[SubscriptionResponse])
async def update_subscription_status(
    subscription_id: UUID,
    update: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    subscription = await subscription_service.set_status(db, subscription_id, update.status)
    return {"success": True, "data": subscription}
