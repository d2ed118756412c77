"""
Customer address models

Saved delivery locations and the panchayats (local administrative areas) they
may point at.
"""

import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Text, Boolean, Integer, DateTime, Uuid, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, utcnow


DEFAULT_ADDRESS_LABEL = "Home"


class Panchayat(Base):
    """Local administrative area an address can be tied to"""

    __tablename__ = "panchayats"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    def __repr__(self):
        return f"<Panchayat(id={self.id}, name={self.name})>"


class CustomerAddress(TimestampMixin, Base):
    """Saved delivery address"""

    __tablename__ = "customer_addresses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    address_label: Mapped[Optional[str]] = mapped_column(
        String(50), default=DEFAULT_ADDRESS_LABEL
    )  # Home, Work, Other
    full_address: Mapped[str] = mapped_column(Text, nullable=False)
    landmark: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    panchayat_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("panchayats.id"), nullable=True
    )
    ward_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        # Listing order: default first, then newest
        Index("idx_customer_addresses_user", "user_id", "is_default", "created_at"),
        # Single default per user is enforced by the service, not by a partial
        # unique index, because the PostgREST backend cannot rely on one.
    )

    def __repr__(self):
        return (
            f"<CustomerAddress(id={self.id}, user_id={self.user_id}, "
            f"label={self.address_label}, is_default={self.is_default})>"
        )
