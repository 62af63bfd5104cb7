from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from app.models.conversation import ResponseMode


class Citation(BaseModel):
    source: str
    chapter: str | None = None
    section: str | None = None


# ---- Conversations ----

class ConversationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    response_mode: ResponseMode | None = None


class ConversationUpdate(BaseModel):
    """Partial update: fields left out (or null) are not written."""
    title: str | None = Field(None, min_length=1, max_length=255)
    response_mode: ResponseMode | None = None


class ConversationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    description: str | None = None
    response_mode: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---- Messages ----

class SendMessageRequest(BaseModel):
    content: str = Field(..., min_length=1)


class MessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    conversation_id: str
    role: str  # "user" | "assistant"
    content: str
    citations: list[Citation] | None = None
    tokens: int | None = None
    created_at: datetime | None = None


class ConversationWithMessages(BaseModel):
    conversation: ConversationOut
    messages: list[MessageOut]


class SendMessageResponse(BaseModel):
    user_message: MessageOut


class SuccessResponse(BaseModel):
    success: bool = True
