from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.user import AccountStatus
from app.schemas.common import CamelModel
from app.schemas.property import PropertyResponse
from app.schemas.subscription import SubscriptionResponse


class SignupRequest(CamelModel):
    full_name: str = Field(min_length=1)
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: str = Field(min_length=1)
    rera_number: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    password: str = Field(min_length=6)
    confirm_password: str
    latitude: float
    longitude: float


class LoginRequest(CamelModel):
    email: str
    password: str


class UserSummary(CamelModel):
    id: UUID
    full_name: str
    email: str
    is_admin: bool


class UserResponse(CamelModel):
    id: UUID
    full_name: str
    email: str
    phone: str
    rera_number: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    is_admin: bool
    status: AccountStatus
    latitude: float
    longitude: float
    created_at: datetime


class BrokerResponse(UserResponse):
    subscription: Optional[SubscriptionResponse] = None


class BrokerDetail(CamelModel):
    broker: BrokerResponse
    properties: List[PropertyResponse]


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    user: UserSummary


class StatusUpdate(BaseModel):
    status: str


class DashboardStats(CamelModel):
    total_brokers: int
    total_properties: int
    pending_properties: int
    active_subscriptions: int
