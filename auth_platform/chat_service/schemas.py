"""
Pydantic schemas for chat service request/response validation
"""
from pydantic import BaseModel, ConfigDict, Field, field_serializer
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class ChatCreate(BaseModel):
    """Schema for creating a chat. The caller becomes its first member."""
    name: str = Field(..., min_length=1, max_length=255, description="Chat name")
    pic: Optional[str] = Field(None, description="Picture URL or data")


class ChatUpdate(BaseModel):
    """Partial update of chat info; omitted fields keep their value."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    pic: Optional[str] = None


class ChatOut(BaseModel):
    id: str
    name: str
    pic: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at")
    def serialize_created_at(self, v: datetime) -> str:
        return v.isoformat()


class ChatResponse(BaseModel):
    chat: ChatOut


class ChatCreateResponse(BaseModel):
    chat: ChatOut
    user_id: str


class MembersRequest(BaseModel):
    """Users to add to or remove from a chat."""
    members: List[UUID] = Field(..., min_length=1, description="User IDs")


class MembersResponse(BaseModel):
    members: List[str]


class MembersChangedResponse(BaseModel):
    affected: int = Field(..., description="Number of memberships added or removed")


class MessageCreate(BaseModel):
    text: str = Field(..., min_length=1, description="Message text")
    content: Optional[str] = Field(None, description="Attachment or rich content")


class MessageUpdate(BaseModel):
    """Partial update of a message; omitted fields keep their value."""
    text: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = None


class MessageOut(BaseModel):
    id: int
    chat_id: str
    user_id: str
    text: str
    content: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at")
    def serialize_created_at(self, v: datetime) -> str:
        return v.isoformat()


class MessageResponse(BaseModel):
    message: MessageOut


class MessageListResponse(BaseModel):
    messages: List[MessageOut]
    page: int
    limit: int


class MessageDeleteRequest(BaseModel):
    messages: List[int] = Field(..., min_length=1, description="Message IDs to delete")


class MessageDeleteResponse(BaseModel):
    deleted: int
