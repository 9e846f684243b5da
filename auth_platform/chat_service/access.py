"""
Chat membership checks used by the chat and message routes.
"""
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError, StoreError
from .models import Chat, user_chat


def is_member(chat_id: str, user_id: str, db: Session) -> bool:
    row = db.execute(
        select(user_chat.c.user_id).where(
            user_chat.c.chat_id == chat_id,
            user_chat.c.user_id == user_id,
        )
    ).first()
    return row is not None


def get_chat_for_member(chat_id: str, user_id: str, db: Session) -> Chat:
    """
    Load a chat the user belongs to.

    A chat that exists but that the user is not in is reported exactly like
    a missing one.

    Raises:
        NotFoundError: no such chat, or the user is not a member
        StoreError: the lookup failed
    """
    try:
        chat = db.get(Chat, chat_id)
        if chat is None or not is_member(chat_id, user_id, db):
            raise NotFoundError("Chat not found")
    except SQLAlchemyError as e:
        raise StoreError("Failed to load chat") from e
    return chat
