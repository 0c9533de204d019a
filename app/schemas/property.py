from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Literal, Optional, Union
from uuid import UUID

from pydantic import Field

from app.models.property import (Furnishing, Parking, PropertyCategory, PropertyStatus,
                                 TransactionType)
from app.schemas.common import CamelModel

Price = Annotated[Decimal, Field(gt=0, max_digits=14, decimal_places=2)]
NonEmpty = Annotated[str, Field(min_length=1)]


class PropertyBase(CamelModel):
    category: PropertyCategory
    building_or_society: NonEmpty
    road_or_location: NonEmpty
    station: NonEmpty
    sub_location: Optional[str] = None
    property_type: NonEmpty
    is_cosmo: bool = False
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    images: List[str] = []
    amenities: List[str] = []


class NewPropertyCreate(PropertyBase):
    type: Literal["new"]
    possession_date: date
    total_package: Price
    brochure_url: Optional[str] = None
    video_url: Optional[str] = None


class ResalePropertyCreate(PropertyBase):
    type: Literal["resale"]
    expected_price: Price
    floor_no: NonEmpty
    flat_no: NonEmpty
    contact_name: Optional[str] = None
    contact_number: Optional[str] = None
    is_direct: Optional[bool] = None


class RentalPropertyCreate(PropertyBase):
    type: Literal["rental"]
    rent: Price
    deposit: Price
    furnishing: Furnishing
    building_no: Optional[str] = None
    total_floors: Optional[int] = Field(default=None, ge=0)
    wing: Optional[str] = None
    property_age: Optional[int] = Field(default=None, ge=0)
    parking: Optional[Parking] = None
    available_from: Optional[date] = None
    ownership: Optional[str] = None
    master_bedrooms: Optional[int] = Field(default=None, ge=0)


# Any "status" sent by the caller is dropped here: new listings always start pending
PropertyCreate = Annotated[
    Union[NewPropertyCreate, ResalePropertyCreate, RentalPropertyCreate],
    Field(discriminator="type"),
]


class PropertyUpdate(CamelModel):
    category: Optional[PropertyCategory] = None
    type: Optional[TransactionType] = None
    status: Optional[PropertyStatus] = None
    building_or_society: Optional[NonEmpty] = None
    road_or_location: Optional[NonEmpty] = None
    station: Optional[NonEmpty] = None
    sub_location: Optional[str] = None
    property_type: Optional[NonEmpty] = None
    is_cosmo: Optional[bool] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    images: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    possession_date: Optional[date] = None
    total_package: Optional[Price] = None
    brochure_url: Optional[str] = None
    video_url: Optional[str] = None
    expected_price: Optional[Price] = None
    floor_no: Optional[NonEmpty] = None
    flat_no: Optional[NonEmpty] = None
    contact_name: Optional[str] = None
    contact_number: Optional[str] = None
    is_direct: Optional[bool] = None
    rent: Optional[Price] = None
    deposit: Optional[Price] = None
    furnishing: Optional[Furnishing] = None
    building_no: Optional[str] = None
    total_floors: Optional[int] = Field(default=None, ge=0)
    wing: Optional[str] = None
    property_age: Optional[int] = Field(default=None, ge=0)
    parking: Optional[Parking] = None
    available_from: Optional[date] = None
    ownership: Optional[str] = None
    master_bedrooms: Optional[int] = Field(default=None, ge=0)


class PropertyReview(CamelModel):
    status: str
    remarks: Optional[str] = None


class OwnerSummary(CamelModel):
    id: UUID
    full_name: str
    phone: str
    email: str


class PropertyResponse(CamelModel):
    id: UUID
    owner_id: UUID
    category: PropertyCategory
    type: TransactionType
    status: PropertyStatus
    building_or_society: str
    road_or_location: str
    station: str
    sub_location: Optional[str] = None
    property_type: str
    is_cosmo: bool
    latitude: float
    longitude: float
    images: List[str] = []
    amenities: List[str] = []
    possession_date: Optional[date] = None
    total_package: Optional[Decimal] = None
    brochure_url: Optional[str] = None
    video_url: Optional[str] = None
    expected_price: Optional[Decimal] = None
    floor_no: Optional[str] = None
    flat_no: Optional[str] = None
    contact_name: Optional[str] = None
    contact_number: Optional[str] = None
    is_direct: Optional[bool] = None
    rent: Optional[Decimal] = None
    deposit: Optional[Decimal] = None
    furnishing: Optional[Furnishing] = None
    building_no: Optional[str] = None
    total_floors: Optional[int] = None
    wing: Optional[str] = None
    property_age: Optional[int] = None
    parking: Optional[Parking] = None
    available_from: Optional[date] = None
    ownership: Optional[str] = None
    master_bedrooms: Optional[int] = None
    admin_remarks: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime
    owner: Optional[OwnerSummary] = None


class NearbyPropertyResponse(PropertyResponse):
    distance_meters: float


class PropertyAnalyticsItem(CamelModel):
    category: PropertyCategory
    type: TransactionType
    status: PropertyStatus
    count: int


class LocationSearchResult(CamelModel):
    stations: List[str]
    sub_locations: List[str]
