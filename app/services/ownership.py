"""
Ownership guard: a conversation is only visible/mutable by its owner.
Missing and not-owned conversations raise the same NotAuthorized so callers
cannot probe for conversations of other users. Re-checked on every call.
"""
import logging

from sqlalchemy.orm import Session

from app.exceptions import NotAuthorized
from app.models.conversation import Conversation
from app.repositories.chat_repository import ChatRepository

logger = logging.getLogger(__name__)


def authorize(
    db: Session | None,
    requester_id: str,
    conversation_id: str,
    repository: ChatRepository | None = None,
) -> Conversation:
    repo = repository or ChatRepository()
    conversation = repo.get_conversation(db, conversation_id)
    if conversation is None or conversation.user_id != requester_id:
        logger.warning("Access denied: user=%s conversation=%s", requester_id, conversation_id)
        raise NotAuthorized()
    return conversation
