"""SQLAlchemy model for driver location samples."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String

from dispatch.infrastructure.database import Base
from dispatch.utils import now_in_app_naive_datetime


class LocationUpdateModel(Base):
    """Append-only GPS sample reported by a driver."""

    __tablename__ = "location_update"

    id = Column(Integer, primary_key=True, index=True)
    driver_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    load_id = Column(
        Integer, ForeignKey("load.id", ondelete="SET NULL"), nullable=True, index=True
    )
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    reported_at = Column(
        DateTime(), nullable=False, default=now_in_app_naive_datetime, index=True
    )
    notes = Column(String(255), nullable=True)


__all__ = ["LocationUpdateModel"]
