from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies.auth import get_current_admin
from app.dependencies.database import get_db
from app.models.property import PropertyStatus
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.property import PropertyAnalyticsItem, PropertyResponse, PropertyReview
from app.schemas.subscription import SubscriptionAnalyticsItem
from app.schemas.user import BrokerDetail, BrokerResponse, DashboardStats, StatusUpdate
from app.services import property_service, subscription_service, user_service

# Every route here is admin-only
router = APIRouter(dependencies=[Depends(get_current_admin)])

@router.get("/stats", response_model=ApiResponse[DashboardStats])
async def dashboard_stats(db: AsyncSession = Depends(get_db)):
    return {
        "success": True,
        "data": {
            "total_brokers": await user_service.count_brokers(db),
            "total_properties": await property_service.count_properties(db),
            "pending_properties": await property_service.count_properties(db, PropertyStatus.PENDING),
            "active_subscriptions": await subscription_service.count_active(db),
        },
    }

@router.get("/brokers", response_model=ApiResponse[List[BrokerResponse]])
async def list_brokers(db: AsyncSession = Depends(get_db)):
    brokers = await user_service.list_brokers(db)
    return {"success": True, "count": len(brokers), "data": brokers}

@router.get("/brokers/{broker_id}", response_model=ApiResponse[BrokerDetail])
async def broker_detail(broker_id: UUID, db: AsyncSession = Depends(get_db)):
    broker = await user_service.get_broker(db, broker_id)
    properties = await property_service.list_owner_properties(db, broker.id)
    return {"success": True, "data": {"broker": broker, "properties": properties}}

@router.patch("/brokers/{broker_id}/status", response_model=ApiResponse[BrokerResponse])
async def update_broker_status(
    broker_id: UUID,
    update: StatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    broker = await user_service.set_broker_status(db, broker_id, update.status)
    return {"success": True, "data": broker}

@router.get("/pending-properties", response_model=ApiResponse[List[PropertyResponse]])
async def pending_properties(db: AsyncSession = Depends(get_db)):
    properties = await property_service.list_pending_properties(db)
    return {"success": True, "count": len(properties), "data": properties}

@router.patch("/properties/{property_id}/review", response_model=ApiResponse[PropertyResponse])
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

@router.get("/subscription-analytics", response_model=ApiResponse[List[SubscriptionAnalyticsItem]])
async def subscription_analytics(db: AsyncSession = Depends(get_db)):
    return {"success": True, "data": await subscription_service.subscription_analytics(db)}

@router.get("/property-analytics", response_model=ApiResponse[List[PropertyAnalyticsItem]])
async def property_analytics(db: AsyncSession = Depends(get_db)):
    return {"success": True, "data": await property_service.property_analytics(db)}
