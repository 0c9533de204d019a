from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ValidationError
from app.dependencies.auth import get_current_user, require_location_access
from app.dependencies.database import get_db
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.property import LocationSearchResult, NearbyPropertyResponse
from app.services import location_lookup, property_service

router = APIRouter()

@router.get("/states", response_model=ApiResponse[Any])
async def states():
    return {"success": True, "data": await location_lookup.fetch_states()}

@router.get("/cities/{state_code}", response_model=ApiResponse[Any])
async def cities(state_code: str):
    return {"success": True, "data": await location_lookup.fetch_cities(state_code)}

@router.get("/banners", response_model=ApiResponse[List[str]])
async def banners(location: Optional[str] = None):
    if not location:
        raise ValidationError("Location parameter is required", fields=["location"])
    return {"success": True, "data": await location_lookup.fetch_banners(location)}

@router.get("/stations", response_model=ApiResponse[List[str]])
async def stations(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"success": True, "data": await property_service.list_stations(db)}

@router.get("/sub-locations/{station}", response_model=ApiResponse[List[str]])
async def sub_locations(
    station: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"success": True, "data": await property_service.list_sub_locations(db, station)}

@router.get("/search", response_model=ApiResponse[LocationSearchResult])
async def search(
    query: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not query:
        raise ValidationError("Search query is required", fields=["query"])
    return {"success": True, "data": await property_service.search_locations(db, query)}

@router.get("/nearby", response_model=ApiResponse[List[NearbyPropertyResponse]])
async def nearby(
    latitude: float,
    longitude: float,
    radius: float = Query(settings.DEFAULT_RADIUS_METERS, gt=0),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_location_access),
):
    """
    Approved listings within ``radius`` meters of the point, nearest first.
    The point must lie inside one of the caller's subscribed coverage areas.
    """
    properties = await property_service.find_nearby(db, latitude, longitude, radius)
    return {"success": True, "count": len(properties), "data": properties}
