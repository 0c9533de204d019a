import enum
import uuid

from sqlalchemy import (Boolean, Column, Date, DateTime, Enum, Float, ForeignKey, Index,
                        Integer, JSON, Numeric, String, Text, Uuid)
from sqlalchemy.orm import relationship

from app.models.base import Base, enum_values, utcnow


class PropertyCategory(enum.Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    SHOPS = "shops"
    BUNGALOW = "bungalow"
    RAW_HOUSE = "rawHouse"
    VILLA = "villa"
    PENT_HOUSE = "pentHouse"
    PLOT = "plot"


class TransactionType(enum.Enum):
    NEW = "new"
    RESALE = "resale"
    RENTAL = "rental"


class PropertyStatus(enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Furnishing(enum.Enum):
    UNFURNISHED = "unfurnished"
    SEMIFURNISHED = "semifurnished"
    FURNISHED = "furnished"


class Parking(enum.Enum):
    NONE = "none"
    OPEN = "open"
    COVERED = "covered"


# Attribute names that must be set for each transaction type
TYPE_REQUIRED_FIELDS = {
    TransactionType.NEW: ("possession_date", "total_package"),
    TransactionType.RESALE: ("expected_price", "floor_no", "flat_no"),
    TransactionType.RENTAL: ("rent", "deposit", "furnishing"),
}

# Column the budget filter applies to, per transaction type
BUDGET_FIELDS = {
    TransactionType.NEW: "total_package",
    TransactionType.RESALE: "expected_price",
    TransactionType.RENTAL: "rent",
}


def _enum(enum_cls):
    return Enum(enum_cls, native_enum=False, values_callable=enum_values)


class Property(Base):
    __tablename__ = 'properties'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    category = Column(_enum(PropertyCategory), nullable=False)
    type = Column(_enum(TransactionType), nullable=False)
    status = Column(_enum(PropertyStatus), nullable=False, default=PropertyStatus.PENDING)

    building_or_society = Column(String(255), nullable=False)
    road_or_location = Column(String(255), nullable=False)
    station = Column(String(100), nullable=False)
    sub_location = Column(String(100), nullable=True)
    property_type = Column(String(50), nullable=False) # e.g. "1 BHK", "2.5 BHK"
    is_cosmo = Column(Boolean, nullable=False, default=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    images = Column(JSON, default=list)
    amenities = Column(JSON, default=list)

    # type == new
    possession_date = Column(Date, nullable=True)
    total_package = Column(Numeric(14, 2), nullable=True)
    brochure_url = Column(String(500), nullable=True)
    video_url = Column(String(500), nullable=True)

    # type == resale
    expected_price = Column(Numeric(14, 2), nullable=True)
    floor_no = Column(String(20), nullable=True)
    flat_no = Column(String(20), nullable=True)
    contact_name = Column(String(255), nullable=True)
    contact_number = Column(String(32), nullable=True)
    is_direct = Column(Boolean, nullable=True)

    # type == rental
    rent = Column(Numeric(14, 2), nullable=True)
    deposit = Column(Numeric(14, 2), nullable=True)
    furnishing = Column(_enum(Furnishing), nullable=True)
    building_no = Column(String(20), nullable=True)
    total_floors = Column(Integer, nullable=True)
    wing = Column(String(20), nullable=True)
    property_age = Column(Integer, nullable=True)
    parking = Column(_enum(Parking), nullable=True)
    available_from = Column(Date, nullable=True)
    ownership = Column(String(100), nullable=True)
    master_bedrooms = Column(Integer, nullable=True)

    # Moderation trail
    admin_remarks = Column(Text, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by_id = Column(Uuid, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    owner = relationship("User", foreign_keys=[owner_id], lazy="joined")

    __table_args__ = (
        Index('idx_properties_owner_id', owner_id),
        Index('idx_properties_category_type_status', category, type, status),
        Index('idx_properties_station_sub_location', station, sub_location),
        Index('idx_properties_lat_lon', latitude, longitude),
    )

    def missing_required_fields(self):
        """Names of the attributes this listing's transaction type requires but lacks."""
        required = TYPE_REQUIRED_FIELDS.get(self.type, ())
        return [name for name in required if not getattr(self, name)]
