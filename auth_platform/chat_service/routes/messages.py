"""
Message endpoints of a chat. Caller must be a member of the chat.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional

from ...core.claims import Claims
from ...core.errors import NotFoundError, StoreError
from ..access import get_chat_for_member
from ..config import get_settings
from ..db import get_db
from ..models import Message
from ..schemas import (
    MessageCreate,
    MessageDeleteRequest,
    MessageDeleteResponse,
    MessageListResponse,
    MessageOut,
    MessageResponse,
    MessageUpdate,
)
from ..security import gate

settings = get_settings()

router = APIRouter(prefix="/chat", tags=["messages"], dependencies=[Depends(gate)])


@router.get("/{chat_id}/messages", response_model=MessageListResponse)
def list_messages(
    chat_id: str,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_SIZE),
    claims: Claims = Depends(gate),
    db: Session = Depends(get_db),
):
    """Messages of a chat, newest first."""
    get_chat_for_member(chat_id, claims.user_id, db)
    limit = limit or settings.DEFAULT_PAGE_SIZE

    try:
        messages = db.execute(
            select(Message)
            .where(Message.chat_id == chat_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        ).scalars().all()
    except SQLAlchemyError as e:
        raise StoreError("Failed to list messages") from e

    return MessageListResponse(
        messages=[MessageOut.model_validate(m) for m in messages],
        page=page,
        limit=limit,
    )


@router.post("/{chat_id}/messages/send", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def send_message(
    chat_id: str,
    payload: MessageCreate,
    claims: Claims = Depends(gate),
    db: Session = Depends(get_db),
):
    get_chat_for_member(chat_id, claims.user_id, db)
    message = Message(chat_id=chat_id, user_id=claims.user_id, text=payload.text, content=payload.content)
    try:
        db.add(message)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError("Failed to send message") from e

    db.refresh(message)
    return MessageResponse(message=MessageOut.model_validate(message))


@router.delete("/{chat_id}/messages", response_model=MessageDeleteResponse)
def delete_messages(
    chat_id: str,
    payload: MessageDeleteRequest,
    claims: Claims = Depends(gate),
    db: Session = Depends(get_db),
):
    """Delete messages by id. Ids belonging to other chats are ignored."""
    get_chat_for_member(chat_id, claims.user_id, db)
    try:
        result = db.execute(
            delete(Message).where(
                Message.chat_id == chat_id,
                Message.id.in_(payload.messages),
            )
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError("Failed to delete messages") from e
    return MessageDeleteResponse(deleted=result.rowcount)


@router.get("/{chat_id}/messages/{msg_id}", response_model=MessageResponse)
def get_message(chat_id: str, msg_id: int, claims: Claims = Depends(gate), db: Session = Depends(get_db)):
    get_chat_for_member(chat_id, claims.user_id, db)
    message = _load_message(chat_id, msg_id, db)
    return MessageResponse(message=MessageOut.model_validate(message))


@router.patch("/{chat_id}/messages/{msg_id}", response_model=MessageResponse)
def edit_message(
    chat_id: str,
    msg_id: int,
    payload: MessageUpdate,
    claims: Claims = Depends(gate),
    db: Session = Depends(get_db),
):
    get_chat_for_member(chat_id, claims.user_id, db)
    message = _load_message(chat_id, msg_id, db)
    if payload.text is not None:
        message.text = payload.text
    if payload.content is not None:
        message.content = payload.content

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError("Failed to update message") from e

    db.refresh(message)
    return MessageResponse(message=MessageOut.model_validate(message))


def _load_message(chat_id: str, msg_id: int, db: Session) -> Message:
    try:
        message = db.execute(
            select(Message).where(Message.id == msg_id, Message.chat_id == chat_id)
        ).scalar_one_or_none()
    except SQLAlchemyError as e:
        raise StoreError("Failed to load message") from e
    if message is None:
        raise NotFoundError("Message not found")
    return message
