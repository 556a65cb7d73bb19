"""SQLAlchemy model for registered push tokens."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from fellowship.infrastructure.database import Base
from fellowship.utils import now_in_app_naive_datetime


class DeviceTokenModel(Base):
    """One push endpoint per user device."""

    __tablename__ = "device_token"
    __table_args__ = (
        UniqueConstraint("user_id", "device_id", name="uq_device_token_user_device"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    device_id = Column(String(255), nullable=False)
    token = Column(String(255), nullable=False)
    updated_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)

    user = relationship("UserModel", back_populates="device_tokens")


__all__ = ["DeviceTokenModel"]
