from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from app.models.subscription import SubscriptionPaymentStatus, SubscriptionStatus
from app.schemas.common import CamelModel


class LocationInput(CamelModel):
    name: str = Field(min_length=1)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    radius: Optional[float] = Field(default=None, gt=0)


class SubscriptionCreate(CamelModel):
    locations: List[LocationInput]


class CoverageLocation(CamelModel):
    name: str
    latitude: float
    longitude: float
    radius: float
    price: int


class PaymentRecord(CamelModel):
    amount: int
    date: datetime
    status: str
    transaction_id: str


class SubscriptionResponse(CamelModel):
    id: UUID
    broker_id: UUID
    locations: List[CoverageLocation]
    total_price: int
    status: SubscriptionStatus
    payment_status: SubscriptionPaymentStatus
    start_date: datetime
    end_date: datetime
    payment_history: List[PaymentRecord] = []
    is_active: bool
    created_at: datetime
    updated_at: datetime


class BrokerSummary(CamelModel):
    id: UUID
    full_name: str
    email: str
    phone: str


class SubscriptionAdminResponse(SubscriptionResponse):
    broker: Optional[BrokerSummary] = None


class PricingInfo(CamelModel):
    base_price: int
    currency: str
    validity_days: int
    description: str


class SubscriptionAnalyticsItem(CamelModel):
    status: SubscriptionStatus
    count: int
    total_revenue: int
