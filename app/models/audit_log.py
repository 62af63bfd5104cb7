"""Compliance trail of user interactions. Append-only: never updated or deleted."""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, JSON

from app.database import Base
from app.utils.clock import utcnow
from app.utils.ids import new_id


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(String(64), primary_key=True, default=lambda: new_id("log"))
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    # No FK: audit rows outlive deleted conversations
    conversation_id = Column(String(64), nullable=True, index=True)
    action = Column(String(128), nullable=False, index=True)  # e.g. "message_sent"
    details = Column(JSON, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
