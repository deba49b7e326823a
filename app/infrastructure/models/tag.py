"""SQLAlchemy models for tags and the question/tag association."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table

from app.infrastructure.database import Base


question_tag_table = Table(
    "question_tags",
    Base.metadata,
    Column(
        "question_id",
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class TagModel(Base):
    """Database representation of a question tag."""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, unique=True)


__all__ = ["TagModel", "question_tag_table"]
