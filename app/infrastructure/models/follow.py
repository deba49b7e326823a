"""SQLAlchemy model for follow relationships."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class FollowModel(Base):
    """Directed edge stating that ``follower_id`` follows ``following_id``."""

    __tablename__ = "follows"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
    )

    id = Column(Integer, primary_key=True, index=True)
    follower_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    following_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


__all__ = ["FollowModel"]
