"""SQLAlchemy model for delivery ratings."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)

from dispatch.infrastructure.database import Base
from dispatch.utils import now_in_app_naive_datetime


class RatingModel(Base):
    """Customer rating of the driver who carried a load."""

    __tablename__ = "rating"
    __table_args__ = (
        UniqueConstraint("load_id", "customer_id", name="uq_rating_load_customer"),
    )

    id = Column(Integer, primary_key=True, index=True)
    load_id = Column(
        Integer, ForeignKey("load.id", ondelete="CASCADE"), nullable=False, index=True
    )
    customer_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    driver_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    stars = Column(Integer, nullable=False)
    comment = Column(String(500), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["RatingModel"]
