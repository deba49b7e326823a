"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.domain.entities import User
from app.infrastructure.models import UserModel
from app.utils import ensure_app_naive_datetime, ensure_app_timezone, now_in_app_timezone


class UserRepository:
    """Provide CRUD operations for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_username(self, username: str) -> User | None:
        model = self.session.query(UserModel).filter_by(username=username).first()
        return self._to_entity(model) if model else None

    def get_many(self, user_ids: Sequence[int]) -> list[User]:
        if not user_ids:
            return []

        unique_ids = {int(user_id) for user_id in user_ids}
        query = (
            self.session.query(UserModel)
            .filter(UserModel.id.in_(unique_ids))
            .order_by(UserModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def search(self, text: str, *, limit: int = 50) -> list[User]:
        pattern = f"%{text}%"
        query = (
            self.session.query(UserModel)
            .filter(or_(UserModel.username.ilike(pattern), UserModel.email.ilike(pattern)))
            .order_by(UserModel.username)
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    def create(self, user: User) -> User:
        model = UserModel()
        model.username = user.username
        model.email = user.email
        model.password = user.password
        model.role = user.role
        model.bio = user.bio
        model.avatar_url = user.avatar_url
        model.created_at = ensure_app_naive_datetime(
            user.created_at or now_in_app_timezone()
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update_password(self, user_id: int, password_hash: str) -> User:
        model = self.session.get(UserModel, user_id)
        if model is None:
            msg = f"User with id {user_id} not found"
            raise ValueError(msg)
        model.password = password_hash
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            username=model.username,
            email=model.email,
            password=model.password,
            role=model.role,
            bio=model.bio,
            avatar_url=model.avatar_url,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["UserRepository"]
