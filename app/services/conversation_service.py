"""
Conversation orchestration: ownership guard -> record store -> optional audit entry.
- The Database is injected at startup; each operation runs in its own session.
- Every conversation-scoped operation re-runs the ownership guard (never cached).
- sendMessage stores the user message and its "message_sent" audit row in one commit.
"""
import logging

from sqlalchemy.exc import OperationalError, SQLAlchemyError

from app.database import Database
from app.exceptions import StoreUnavailable, ValidationError
from app.models.conversation import Conversation, ResponseMode
from app.models.message import Message, MessageRole
from app.repositories import audit_repository
from app.repositories.chat_repository import ChatRepository
from app.services.ownership import authorize

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 255


def _validate_title(title: str | None) -> None:
    if title is None or not (1 <= len(title) <= TITLE_MAX_LENGTH):
        raise ValidationError(f"Title must be between 1 and {TITLE_MAX_LENGTH} characters")


def _validate_response_mode(response_mode: str) -> str:
    try:
        return ResponseMode(response_mode).value
    except ValueError:
        raise ValidationError("responseMode must be 'concise' or 'academic'") from None


class ConversationService:
    """Externally visible chat operations. Authorization is "requester == conversation owner"."""

    def __init__(
        self,
        database: Database,
        repository: ChatRepository | None = None,
    ):
        self._database = database
        self._repo = repository or ChatRepository()

    def list_conversations(self, user_id: str) -> list[Conversation]:
        # user_id is the requester itself; the owner filter is the authorization
        with self._database.session() as db:
            return self._repo.get_conversations(db, user_id)

    def create_conversation(
        self,
        user_id: str,
        title: str,
        response_mode: str = ResponseMode.CONCISE.value,
    ) -> Conversation:
        _validate_title(title)
        mode = _validate_response_mode(response_mode or ResponseMode.CONCISE.value)
        with self._database.session() as db:
            conv = self._repo.create_conversation(db, user_id, title, mode)
        logger.info("Conversation created: user=%s conversation=%s", user_id, conv.id)
        return conv

    def get_conversation_with_messages(self, requester_id: str, conversation_id: str) -> dict:
        """Returns {"conversation": Conversation, "messages": [Message, ...]} (oldest first)."""
        with self._database.session() as db:
            conversation = authorize(db, requester_id, conversation_id, self._repo)
            messages = self._repo.get_messages(db, conversation_id)
        return {"conversation": conversation, "messages": messages}

    def update_conversation(
        self,
        requester_id: str,
        conversation_id: str,
        title: str | None = None,
        response_mode: str | None = None,
    ) -> None:
        """Partial update: arguments left as None are not written. updated_at always moves."""
        fields = {}
        if title is not None:
            _validate_title(title)
            fields["title"] = title
        if response_mode is not None:
            fields["response_mode"] = _validate_response_mode(response_mode)
        with self._database.session() as db:
            authorize(db, requester_id, conversation_id, self._repo)
            self._repo.update_conversation(db, conversation_id, fields)
        logger.info(
            "Conversation updated: user=%s conversation=%s fields=%s",
            requester_id, conversation_id, sorted(fields),
        )

    def delete_conversation(self, requester_id: str, conversation_id: str) -> None:
        with self._database.session() as db:
            authorize(db, requester_id, conversation_id, self._repo)
            self._repo.delete_conversation(db, conversation_id)
        logger.info("Conversation deleted: user=%s conversation=%s", requester_id, conversation_id)

    def send_message(
        self,
        requester_id: str,
        conversation_id: str,
        content: str,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Message:
        """
        Store a user message and audit it. Assistant replies are produced elsewhere.
        The message and its audit row are committed together.
        """
        if not content:
            raise ValidationError("Message content must not be empty")
        with self._database.session() as db:
            authorize(db, requester_id, conversation_id, self._repo)
            message = self._repo.create_message(
                db, conversation_id, MessageRole.USER.value, content, commit=False
            )
            audit_repository.create_audit_log(
                db,
                requester_id,
                audit_repository.MESSAGE_SENT,
                conversation_id=conversation_id,
                details={"messageLength": len(content)},
                ip_address=ip_address,
                user_agent=user_agent,
                commit=False,
            )
            try:
                db.commit()
            except OperationalError as e:
                db.rollback()
                logger.exception("send_message commit failed: store unreachable")
                raise StoreUnavailable() from e
            except SQLAlchemyError:
                db.rollback()
                logger.exception("send_message commit failed: conversation=%s", conversation_id)
                raise
            db.refresh(message)
        logger.info(
            "Message sent: user=%s conversation=%s length=%d",
            requester_id, conversation_id, len(content),
        )
        return message
