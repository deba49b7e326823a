"""SQLAlchemy model for question and answer votes."""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class VoteModel(Base):
    """A single up or down vote cast by a user on a question or an answer."""

    __tablename__ = "votes"
    __table_args__ = (CheckConstraint("value IN (1, -1)", name="ck_votes_value"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    question_id = Column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=True, index=True
    )
    answer_id = Column(
        Integer, ForeignKey("answers.id", ondelete="CASCADE"), nullable=True, index=True
    )
    value = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


__all__ = ["VoteModel"]
