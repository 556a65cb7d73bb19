"""SQLAlchemy model for the user table."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from fellowship.infrastructure.database import Base
from fellowship.utils import now_in_app_naive_datetime


class UserModel(Base):
    """Database representation of a directory member."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(254), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)

    reset_otp_hash = Column(String(255), nullable=True)
    reset_otp_expires_at = Column(DateTime, nullable=True)
    reset_attempt_count = Column(Integer, nullable=False, default=0)
    reset_last_attempt_at = Column(DateTime, nullable=True)
    reset_failed_verifications = Column(Integer, nullable=False, default=0)

    device_tokens = relationship(
        "DeviceTokenModel",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DeviceTokenModel.id",
        lazy="selectin",
    )


__all__ = ["UserModel"]
