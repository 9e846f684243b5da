"""
Chat and chat membership endpoints.

All routes require a bearer token. Chat-scoped routes additionally require
the caller to be a member of the chat.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from ...core.claims import Claims
from ...core.database import insert_ignore
from ...core.errors import StoreError
from ..access import get_chat_for_member
from ..db import get_db
from ..models import Chat, user_chat
from ..schemas import (
    ChatCreate,
    ChatCreateResponse,
    ChatOut,
    ChatResponse,
    ChatUpdate,
    MembersChangedResponse,
    MembersRequest,
    MembersResponse,
)
from ..security import gate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chats"], dependencies=[Depends(gate)])


@router.get("/list", response_model=list[ChatOut])
def list_chats(claims: Claims = Depends(gate), db: Session = Depends(get_db)):
    """Chats the caller is a member of."""
    try:
        chats = db.execute(
            select(Chat)
            .join(user_chat, user_chat.c.chat_id == Chat.id)
            .where(user_chat.c.user_id == claims.user_id)
            .order_by(Chat.created_at.desc())
        ).scalars().all()
    except SQLAlchemyError as e:
        raise StoreError("Failed to list chats") from e
    return chats


@router.post("/create", response_model=ChatCreateResponse, status_code=status.HTTP_201_CREATED)
def create_chat(payload: ChatCreate, claims: Claims = Depends(gate), db: Session = Depends(get_db)):
    """Create a chat and enroll the caller in it, in one transaction."""
    try:
        chat = Chat(name=payload.name, pic=payload.pic)
        db.add(chat)
        db.flush()
        insert_ignore(db, user_chat, [{"user_id": claims.user_id, "chat_id": chat.id}])
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError("Failed to create chat") from e

    db.refresh(chat)
    logger.info("Chat created: chat_id=%s by user_id=%s", chat.id, claims.user_id)
    return ChatCreateResponse(chat=ChatOut.model_validate(chat), user_id=claims.user_id)


@router.get("/{chat_id}/info", response_model=ChatResponse)
def get_chat_info(chat_id: str, claims: Claims = Depends(gate), db: Session = Depends(get_db)):
    chat = get_chat_for_member(chat_id, claims.user_id, db)
    return ChatResponse(chat=ChatOut.model_validate(chat))


@router.patch("/{chat_id}/info", response_model=ChatResponse)
def edit_chat_info(
    chat_id: str,
    payload: ChatUpdate,
    claims: Claims = Depends(gate),
    db: Session = Depends(get_db),
):
    chat = get_chat_for_member(chat_id, claims.user_id, db)
    if payload.name is not None:
        chat.name = payload.name
    if payload.pic is not None:
        chat.pic = payload.pic

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError("Failed to update chat") from e

    db.refresh(chat)
    return ChatResponse(chat=ChatOut.model_validate(chat))


@router.delete("/{chat_id}", status_code=status.HTTP_200_OK)
def delete_chat(chat_id: str, claims: Claims = Depends(gate), db: Session = Depends(get_db)):
    """Delete a chat with its memberships and messages."""
    chat = get_chat_for_member(chat_id, claims.user_id, db)
    try:
        db.delete(chat)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError("Failed to delete chat") from e

    logger.info("Chat deleted: chat_id=%s by user_id=%s", chat_id, claims.user_id)
    return {"message": "Chat deleted", "chat_id": chat_id}


@router.get("/{chat_id}/members", response_model=MembersResponse)
def get_members(chat_id: str, claims: Claims = Depends(gate), db: Session = Depends(get_db)):
    get_chat_for_member(chat_id, claims.user_id, db)
    try:
        rows = db.execute(select(user_chat.c.user_id).where(user_chat.c.chat_id == chat_id))
        members = [row.user_id for row in rows]
    except SQLAlchemyError as e:
        raise StoreError("Failed to list members") from e
    return MembersResponse(members=members)


@router.post("/{chat_id}/members", response_model=MembersChangedResponse)
def add_members(
    chat_id: str,
    payload: MembersRequest,
    claims: Claims = Depends(gate),
    db: Session = Depends(get_db),
):
    """Add users to a chat. Users already in it are skipped."""
    get_chat_for_member(chat_id, claims.user_id, db)
    rows = [{"user_id": str(member), "chat_id": chat_id} for member in dict.fromkeys(payload.members)]
    try:
        added = insert_ignore(db, user_chat, rows)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError("Failed to add members") from e
    return MembersChangedResponse(affected=added)


@router.delete("/{chat_id}/members", response_model=MembersChangedResponse)
def remove_members(
    chat_id: str,
    payload: MembersRequest,
    claims: Claims = Depends(gate),
    db: Session = Depends(get_db),
):
    get_chat_for_member(chat_id, claims.user_id, db)
    member_ids = [str(member) for member in payload.members]
    try:
        result = db.execute(
            delete(user_chat).where(
                user_chat.c.chat_id == chat_id,
                user_chat.c.user_id.in_(member_ids),
            )
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError("Failed to remove members") from e
    return MembersChangedResponse(affected=result.rowcount)
