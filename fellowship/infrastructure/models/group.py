"""SQLAlchemy models for groups and their members."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from fellowship.infrastructure.database import Base
from fellowship.utils import now_in_app_naive_datetime

group_member_table = Table(
    "group_member",
    Base.metadata,
    Column(
        "group_id",
        Integer,
        ForeignKey("user_group.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class GroupModel(Base):
    """Database representation of a user group."""

    __tablename__ = "user_group"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    created_by = Column(Integer, ForeignKey("user.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)

    members = relationship("UserModel", secondary=group_member_table, lazy="selectin")


__all__ = ["GroupModel", "group_member_table"]
