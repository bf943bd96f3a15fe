"""SQLAlchemy model for driver bookings."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from dispatch.infrastructure.database import Base
from dispatch.utils import now_in_app_naive_datetime


class BookingModel(Base):
    """Database representation of a driver's claim on a load."""

    __tablename__ = "booking"

    id = Column(Integer, primary_key=True, index=True)
    load_id = Column(
        Integer, ForeignKey("load.id", ondelete="CASCADE"), nullable=False, index=True
    )
    driver_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status = Column(String(20), nullable=False, default="Requested")
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    responded_at = Column(DateTime(), nullable=True)


__all__ = ["BookingModel"]
