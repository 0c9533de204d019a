import enum
import uuid

from sqlalchemy import (Column, DateTime, Enum, ForeignKey, Index, Integer, JSON, Uuid,
                        event)
from sqlalchemy.orm import relationship

from app.models.base import Base, as_utc, enum_values, utcnow


class SubscriptionStatus(enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class SubscriptionPaymentStatus(enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class Subscription(Base):
    """
    A broker's coverage areas. ``locations`` is an ordered list of
    ``{name, latitude, longitude, radius, price}`` documents and
    ``payment_history`` an append-only list of
    ``{amount, date, status, transaction_id}`` documents.
    """
    __tablename__ = 'subscriptions'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    broker_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    locations = Column(JSON, nullable=False, default=list)
    total_price = Column(Integer, nullable=False, default=0)
    status = Column(Enum(SubscriptionStatus, native_enum=False, values_callable=enum_values),
                    nullable=False, default=SubscriptionStatus.PENDING)
    payment_status = Column(Enum(SubscriptionPaymentStatus, native_enum=False, values_callable=enum_values),
                            nullable=False, default=SubscriptionPaymentStatus.PENDING)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    payment_history = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    broker = relationship("User", back_populates="subscription", lazy="joined")

    __table_args__ = (
        Index('idx_subscriptions_status_end_date', status, end_date),
    )

    def calculate_total_price(self) -> int:
        return sum(location["price"] for location in self.locations or [])

    def is_active_at(self, now) -> bool:
        return (
            self.status == SubscriptionStatus.ACTIVE
            and self.payment_status == SubscriptionPaymentStatus.COMPLETED
            and as_utc(self.end_date) > now
        )

    @property
    def is_active(self) -> bool:
        return self.is_active_at(utcnow())

    def is_current(self, now) -> bool:
        """Active and not yet expired, regardless of payment status."""
        return self.status == SubscriptionStatus.ACTIVE and as_utc(self.end_date) > now


@event.listens_for(Subscription, "before_insert")
@event.listens_for(Subscription, "before_update")
def _refresh_total_price(mapper, connection, target):
    target.total_price = target.calculate_total_price()
