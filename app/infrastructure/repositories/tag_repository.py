"""Persistence layer for tags."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.domain.entities import Tag
from app.infrastructure.models import TagModel, question_tag_table


class TagRepository:
    """Provide lookup and creation helpers for tags."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_all(self) -> list[Tag]:
        query = self.session.query(TagModel).order_by(TagModel.name)
        return [self._to_entity(model) for model in query.all()]

    def get_by_name(self, name: str) -> Tag | None:
        model = self._get_model_by_name(name)
        return self._to_entity(model) if model else None

    def create(self, name: str) -> Tag:
        model = TagModel(name=name.strip())
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_for_question(self, question_id: int) -> list[Tag]:
        query = (
            self.session.query(TagModel)
            .join(question_tag_table, question_tag_table.c.tag_id == TagModel.id)
            .filter(question_tag_table.c.question_id == question_id)
            .order_by(TagModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def get_or_create_models(self, names: Iterable[str]) -> list[TagModel]:
        """Return tag models for ``names`` creating the missing ones.

        Lookups are case-insensitive and duplicate names collapse into a single
        tag. New models are added to the session but not committed.
        """

        models: list[TagModel] = []
        seen: set[str] = set()
        for raw_name in names:
            name = (raw_name or "").strip()
            key = name.lower()
            if not name or key in seen:
                continue
            seen.add(key)
            model = self._get_model_by_name(name)
            if model is None:
                model = TagModel(name=name)
                self.session.add(model)
            models.append(model)
        return models

    def _get_model_by_name(self, name: str) -> TagModel | None:
        return (
            self.session.query(TagModel)
            .filter(func.lower(TagModel.name) == name.strip().lower())
            .first()
        )

    @staticmethod
    def _to_entity(model: TagModel) -> Tag:
        return Tag(id=model.id, name=model.name)


__all__ = ["TagRepository"]
