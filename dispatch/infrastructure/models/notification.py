"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from dispatch.infrastructure.database import Base
from dispatch.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    load_id = Column(
        Integer, ForeignKey("load.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title = Column(String(200), nullable=False)
    message = Column(String(500), nullable=False)
    category = Column(String(50), nullable=False, default="Info")
    action_url = Column(String(200), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["NotificationModel"]
