"""Persistence layer for follow relationships."""

from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.domain.entities import Follow
from app.infrastructure.models import FollowModel
from app.utils import ensure_app_timezone, now_in_app_naive_datetime


class FollowRepository:
    """Provide CRUD operations for :class:`Follow` edges."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_by_follower(self, follower_id: int) -> list[Follow]:
        query = (
            self.session.query(FollowModel)
            .filter(FollowModel.follower_id == follower_id)
            .order_by(FollowModel.created_at.desc(), FollowModel.id.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    def list_by_following(self, following_id: int) -> list[Follow]:
        query = (
            self.session.query(FollowModel)
            .filter(FollowModel.following_id == following_id)
            .order_by(FollowModel.created_at.desc(), FollowModel.id.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    def get_by_pair(self, follower_id: int, following_id: int) -> Follow | None:
        model = (
            self.session.query(FollowModel)
            .filter_by(follower_id=follower_id, following_id=following_id)
            .first()
        )
        return self._to_entity(model) if model else None

    def create(self, follower_id: int, following_id: int) -> Follow:
        model = FollowModel(
            follower_id=follower_id,
            following_id=following_id,
            created_at=now_in_app_naive_datetime(),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, follower_id: int, following_id: int) -> bool:
        deleted = (
            self.session.query(FollowModel)
            .filter_by(follower_id=follower_id, following_id=following_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return bool(deleted)

    def follower_count(self, user_id: int) -> int:
        return (
            self.session.query(func.count(FollowModel.id))
            .filter(FollowModel.following_id == user_id)
            .scalar()
            or 0
        )

    def following_count(self, user_id: int) -> int:
        return (
            self.session.query(func.count(FollowModel.id))
            .filter(FollowModel.follower_id == user_id)
            .scalar()
            or 0
        )

    @staticmethod
    def _to_entity(model: FollowModel) -> Follow:
        return Follow(
            id=model.id,
            follower_id=model.follower_id,
            following_id=model.following_id,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["FollowRepository"]
