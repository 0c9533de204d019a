import enum
import uuid

from sqlalchemy import Boolean, Column, DateTime, Enum, Float, Index, String, Uuid
from sqlalchemy.orm import relationship

from app.models.base import Base, enum_values, utcnow


class AccountStatus(enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class User(Base):
    __tablename__ = 'users'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    phone = Column(String(32), nullable=False)
    rera_number = Column(String(64), nullable=True)
    state = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    password_hash = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    status = Column(Enum(AccountStatus, native_enum=False, values_callable=enum_values),
                    nullable=False, default=AccountStatus.ACTIVE)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Loaded explicitly with selectinload where a response needs it
    subscription = relationship("Subscription", back_populates="broker", uselist=False, lazy="raise")

    __table_args__ = (
        Index('idx_users_is_admin', is_admin),
    )
