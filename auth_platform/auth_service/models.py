from sqlalchemy import Column, String, ForeignKey, DateTime, Text, Table, Index
from datetime import datetime
from .db import Base
from sqlalchemy.orm import relationship
import uuid


def _new_id() -> str:
    return str(uuid.uuid4())


# Group membership. Composite key makes re-enrolling a no-op at the store level.
user_group = Table(
    "user_group",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("group_id", String(36), ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
    Index("idx_user_group_user_id", "user_id"),
    Index("idx_user_group_group_id", "group_id"),
)


class User(Base):
    __tablename__ = "users"
    id = Column(String(36), primary_key=True, default=_new_id)
    username = Column(String(50), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    credential = relationship(
        "Credential",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    groups = relationship("Group", secondary=user_group, back_populates="members", passive_deletes=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Credential(Base):
    """
    Login secret for a user, one per user.

    `login` carries the store-level unique constraint that settles concurrent
    registrations. `jwt` is a slot for a cached token; issuing a token never
    writes it.
    """
    __tablename__ = "auth"
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    login = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    jwt = Column(Text, nullable=True)

    user = relationship("User", back_populates="credential")


class Group(Base):
    __tablename__ = "groups"
    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(50), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    members = relationship("User", secondary=user_group, back_populates="groups", passive_deletes=True)
