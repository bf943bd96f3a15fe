"""SQLAlchemy model for shipment loads."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text

from dispatch.infrastructure.database import Base
from dispatch.utils import now_in_app_naive_datetime


class LoadModel(Base):
    """Database representation of a load and its lifecycle timestamps."""

    __tablename__ = "load"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assigned_driver_id = Column(
        Integer,
        ForeignKey("user.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    title = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    cargo_type = Column(String(60), nullable=True)
    weight_lbs = Column(Float, nullable=False, default=0.0)
    status = Column(String(20), nullable=False, default="Available", index=True)
    pickup_location = Column(String(256), nullable=False, default="")
    dropoff_location = Column(String(256), nullable=False, default="")
    pickup_latitude = Column(Float, nullable=True)
    pickup_longitude = Column(Float, nullable=True)
    dropoff_latitude = Column(Float, nullable=True)
    dropoff_longitude = Column(Float, nullable=True)
    pickup_date = Column(DateTime(), nullable=True)
    estimated_minutes = Column(Integer, nullable=True)
    delivery_sequence = Column(Integer, nullable=True)
    version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    accepted_at = Column(DateTime(), nullable=True)
    picked_up_at = Column(DateTime(), nullable=True)
    delivered_at = Column(DateTime(), nullable=True)
    completed_at = Column(DateTime(), nullable=True)


__all__ = ["LoadModel"]
