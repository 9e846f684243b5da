"""
Database models for the chat service
"""
from sqlalchemy import Column, String, Integer, DateTime, Text, ForeignKey, Index, Table
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from .db import Base


# Chat membership. user_id refers to a user of the auth service and has no
# foreign key here.
user_chat = Table(
    "user_chat",
    Base.metadata,
    Column("user_id", String(36), primary_key=True),
    Column("chat_id", String(36), ForeignKey("chats.id", ondelete="CASCADE"), primary_key=True),
    Index("idx_user_chat_user_id", "user_id"),
    Index("idx_user_chat_chat", "chat_id"),
)


class Chat(Base):
    """A group conversation."""
    __tablename__ = "chats"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    pic = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    messages = relationship("Message", back_populates="chat", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Chat(id={self.id}, name={self.name})>"


class Message(Base):
    """A message posted to a chat by a user."""
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    chat_id = Column(String(36), ForeignKey("chats.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), nullable=False)
    text = Column(Text, nullable=False)
    content = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    chat = relationship("Chat", back_populates="messages")

    __table_args__ = (
        Index("idx_messages_chat_created", "chat_id", "created_at"),
    )

    def __repr__(self):
        return f"<Message(id={self.id}, chat_id={self.chat_id}, user_id={self.user_id})>"
