"""Booking platform ORM models read by the dashboard.

The tables are owned by the platform's CRUD services; the dashboard only
queries them:
- Location -> Community -> Package -> BookingHistory

Revenue is derived, never stored: ``package.price * total_participant`` for
bookings whose status is BOOKED.
"""

import datetime
import enum
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.shared.models import TimestampMixin


class BookingStatus(str, enum.Enum):
    """Lifecycle states of a booking."""

    PENDING = "PENDING"
    BOOKED = "BOOKED"
    REFUND_PENDING = "REFUND_PENDING"
    REFUNDED = "REFUNDED"
    REJECTED = "REJECTED"
    REFUND_REJECTED = "REFUND_REJECTED"


# Statuses reported as "cancelled" on dashboards
CANCELLED_STATUSES: frozenset[BookingStatus] = frozenset(
    {BookingStatus.REFUNDED, BookingStatus.REFUND_REJECTED}
)


class Location(TimestampMixin, Base):
    """Location of a community.

    Attributes:
        id: Primary key.
        province: Province name.
        region: Region name.
    """

    __tablename__ = "location"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    province: Mapped[str] = mapped_column(String(100), index=True)
    region: Mapped[str | None] = mapped_column(String(100), nullable=True)

    communities: Mapped[list["Community"]] = relationship(back_populates="location")


class Community(TimestampMixin, Base):
    """Tourism community that publishes packages.

    Attributes:
        id: Primary key.
        name: Community display name.
        admin_id: Account administering the community.
        location_id: Location (FK).
        is_deleted: Soft-delete flag.
    """

    __tablename__ = "community"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    admin_id: Mapped[int | None] = mapped_column(Integer, index=True, nullable=True)
    location_id: Mapped[int] = mapped_column(Integer, ForeignKey("location.id"), index=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)

    location: Mapped["Location"] = relationship(back_populates="communities")
    packages: Mapped[list["Package"]] = relationship(back_populates="community")


class Package(TimestampMixin, Base):
    """Bookable tour package.

    Attributes:
        id: Primary key.
        name: Package display name.
        price: Price per participant.
        community_id: Owning community (FK).
        created_by_id: Member account that created the package.
        is_deleted: Soft-delete flag.
    """

    __tablename__ = "package"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    community_id: Mapped[int] = mapped_column(Integer, ForeignKey("community.id"), index=True)
    created_by_id: Mapped[int | None] = mapped_column(Integer, index=True, nullable=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)

    community: Mapped["Community"] = relationship(back_populates="packages")
    bookings: Mapped[list["BookingHistory"]] = relationship(back_populates="package")

    __table_args__ = (CheckConstraint("price >= 0", name="ck_package_price_positive"),)


class BookingHistory(TimestampMixin, Base):
    """A tourist's booking of a package.

    Attributes:
        id: Primary key.
        package_id: Booked package (FK).
        tourist_id: Account that made the booking.
        booking_at: When the booking was made (timezone-aware).
        total_participant: Number of participants.
        status: Booking status.
    """

    __tablename__ = "booking_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    package_id: Mapped[int] = mapped_column(Integer, ForeignKey("package.id"), index=True)
    tourist_id: Mapped[int] = mapped_column(Integer, index=True)
    booking_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), index=True)
    total_participant: Mapped[int] = mapped_column(Integer, default=1)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus, name="booking_status"),
        default=BookingStatus.PENDING,
    )

    package: Mapped["Package"] = relationship(back_populates="bookings")

    __table_args__ = (
        # Dashboard queries filter by window and status together
        Index("ix_booking_history_booking_at_status", "booking_at", "status"),
        CheckConstraint("total_participant >= 1", name="ck_booking_history_participants"),
    )
