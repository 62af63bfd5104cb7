"""Chat session owned by exactly one user. Messages belong to a conversation."""
import enum

from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.database import Base
from app.utils.clock import utcnow
from app.utils.ids import new_id


class ResponseMode(str, enum.Enum):
    CONCISE = "concise"
    ACADEMIC = "academic"


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(String(64), primary_key=True, default=lambda: new_id("conv"))
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    response_mode = Column(String(16), nullable=False, default=ResponseMode.CONCISE.value)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # Messages ordered by created_at, id breaks ties (ids are monotonic)
    messages = relationship(
        "Message",
        back_populates="conversation",
        order_by="[Message.created_at, Message.id]",
        lazy="select",
    )
