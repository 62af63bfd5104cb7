from app.models.user import User, UserRole
from app.models.conversation import Conversation, ResponseMode
from app.models.message import Message, MessageRole
from app.models.medical_embedding import MedicalEmbedding
from app.models.audit_log import AuditLog

__all__ = [
    "User", "UserRole", "Conversation", "ResponseMode", "Message", "MessageRole",
    "MedicalEmbedding", "AuditLog",
]
