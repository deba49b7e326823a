"""Persistence helpers for direct messages."""

from __future__ import annotations

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session, joinedload

from app.domain.entities import ChatSummary, Message
from app.infrastructure.models import MessageModel, UserModel
from app.infrastructure.repositories.user_repository import UserRepository
from app.utils import ensure_app_timezone, now_in_app_naive_datetime


class MessageRepository:
    """Provide CRUD operations and conversation queries for messages."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, message_id: int) -> Message | None:
        model = self.session.get(MessageModel, message_id)
        return self._to_entity(model) if model else None

    def list_between(self, user_id: int, other_user_id: int) -> list[Message]:
        query = (
            self.session.query(MessageModel)
            .options(joinedload(MessageModel.sender))
            .filter(self._conversation_clause(user_id, other_user_id))
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def create(self, message: Message) -> Message:
        model = MessageModel(
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            content=message.content,
            read=False,
            created_at=now_in_app_naive_datetime(),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_read(self, message_id: int) -> bool:
        updated = (
            self.session.query(MessageModel)
            .filter(MessageModel.id == message_id)
            .update({MessageModel.read: True}, synchronize_session=False)
        )
        self.session.commit()
        return bool(updated)

    def mark_conversation_read(self, reader_id: int, other_user_id: int) -> list[int]:
        """Flag every unread message from ``other_user_id`` to ``reader_id`` as read.

        Returns the identifiers of the messages that changed state.
        """

        unread_filter = and_(
            MessageModel.sender_id == other_user_id,
            MessageModel.receiver_id == reader_id,
            MessageModel.read.is_(False),
        )
        message_ids = [
            message_id
            for (message_id,) in self.session.query(MessageModel.id)
            .filter(unread_filter)
            .order_by(MessageModel.id)
            .all()
        ]
        if not message_ids:
            return []
        self.session.query(MessageModel).filter(MessageModel.id.in_(message_ids)).update(
            {MessageModel.read: True}, synchronize_session=False
        )
        self.session.commit()
        return message_ids

    def unread_count(self, user_id: int) -> int:
        return (
            self.session.query(func.count(MessageModel.id))
            .filter(MessageModel.receiver_id == user_id, MessageModel.read.is_(False))
            .scalar()
            or 0
        )

    def recent_chats(self, user_id: int) -> list[ChatSummary]:
        """Return one summary per conversation partner, newest conversation first."""

        partner_ids: set[int] = set()
        for (receiver_id,) in (
            self.session.query(MessageModel.receiver_id)
            .filter(MessageModel.sender_id == user_id)
            .distinct()
        ):
            partner_ids.add(receiver_id)
        for (sender_id,) in (
            self.session.query(MessageModel.sender_id)
            .filter(MessageModel.receiver_id == user_id)
            .distinct()
        ):
            partner_ids.add(sender_id)
        if not partner_ids:
            return []

        unread_rows = (
            self.session.query(MessageModel.sender_id, func.count(MessageModel.id))
            .filter(
                MessageModel.receiver_id == user_id,
                MessageModel.read.is_(False),
                MessageModel.sender_id.in_(partner_ids),
            )
            .group_by(MessageModel.sender_id)
            .all()
        )
        unread_by_partner = {sender_id: int(count) for sender_id, count in unread_rows}
        partners = {
            model.id: model
            for model in self.session.query(UserModel).filter(UserModel.id.in_(partner_ids))
        }

        chats: list[ChatSummary] = []
        for partner_id in partner_ids:
            partner = partners.get(partner_id)
            if partner is None:
                continue
            last_message = (
                self.session.query(MessageModel)
                .filter(self._conversation_clause(user_id, partner_id))
                .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
                .first()
            )
            if last_message is None:
                continue
            chats.append(
                ChatSummary(
                    user=UserRepository._to_entity(partner),
                    last_message=self._to_entity(last_message),
                    unread_count=unread_by_partner.get(partner_id, 0),
                )
            )

        chats.sort(
            key=lambda chat: (chat.last_message.created_at, chat.last_message.id or 0),
            reverse=True,
        )
        return chats

    @staticmethod
    def _conversation_clause(user_id: int, other_user_id: int):
        return or_(
            and_(MessageModel.sender_id == user_id, MessageModel.receiver_id == other_user_id),
            and_(MessageModel.sender_id == other_user_id, MessageModel.receiver_id == user_id),
        )

    @staticmethod
    def _to_entity(model: MessageModel) -> Message:
        return Message(
            id=model.id,
            sender_id=model.sender_id,
            receiver_id=model.receiver_id,
            content=model.content,
            read=bool(model.read),
            created_at=ensure_app_timezone(model.created_at),
            sender=UserRepository._to_entity(model.sender) if model.sender else None,
        )


__all__ = ["MessageRepository"]
