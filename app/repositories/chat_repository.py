"""
Chat persistence: Conversation + Message. DB as source of truth, no authorization here
(ownership is checked by app.services.ownership before any scoped call).
All operations are sync. Reads degrade to empty results when the store is down;
creates raise StoreUnavailable.
"""
from sqlalchemy import desc
from sqlalchemy.orm import Session

from app.models.conversation import Conversation, ResponseMode
from app.models.message import Message
from app.repositories.store_guard import read_path, write_path
from app.utils.clock import utcnow

# Columns a partial update may touch
UPDATABLE_CONVERSATION_FIELDS = ("title", "description", "response_mode")


@write_path()
def create_conversation(
    db: Session,
    user_id: str,
    title: str,
    response_mode: str = ResponseMode.CONCISE.value,
) -> Conversation:
    now = utcnow()
    conv = Conversation(
        user_id=user_id,
        title=title,
        response_mode=ResponseMode(response_mode).value,
        created_at=now,
        updated_at=now,
    )
    db.add(conv)
    db.commit()
    db.refresh(conv)
    return conv


@read_path(list)
def get_conversations(db: Session, user_id: str) -> list[Conversation]:
    """All conversations of user_id, most recently touched first."""
    return (
        db.query(Conversation)
        .filter(Conversation.user_id == user_id)
        .order_by(desc(Conversation.updated_at), desc(Conversation.id))
        .all()
    )


@read_path(lambda: None)
def get_conversation(db: Session, conversation_id: str) -> Conversation | None:
    return db.query(Conversation).filter(Conversation.id == conversation_id).first()


@write_path(missing_ok=True)
def update_conversation(db: Session, conversation_id: str, fields: dict) -> None:
    """Write only the provided fields; updated_at is refreshed even if nothing else changed."""
    values = {k: v for k, v in fields.items() if k in UPDATABLE_CONVERSATION_FIELDS}
    # title and response_mode are NOT NULL: None means "leave as is"
    for key in ("title", "response_mode"):
        if key in values and values[key] is None:
            del values[key]
    if "response_mode" in values:
        values["response_mode"] = ResponseMode(values["response_mode"]).value
    values["updated_at"] = utcnow()
    db.query(Conversation).filter(Conversation.id == conversation_id).update(
        values, synchronize_session=False
    )
    db.commit()


@write_path(missing_ok=True)
def delete_conversation(db: Session, conversation_id: str) -> None:
    """Messages first, then the conversation, committed as one transaction."""
    db.query(Message).filter(Message.conversation_id == conversation_id).delete(
        synchronize_session=False
    )
    db.query(Conversation).filter(Conversation.id == conversation_id).delete(
        synchronize_session=False
    )
    db.commit()


@write_path()
def create_message(
    db: Session,
    conversation_id: str,
    role: str,
    content: str,
    citations: list[dict] | None = None,
    tokens: int | None = None,
    *,
    commit: bool = True,
) -> Message:
    """Persist one message. With commit=False the row is only flushed (caller commits)."""
    msg = Message(
        conversation_id=conversation_id,
        role=role,
        content=content,
        citations=citations,
        tokens=tokens,
        created_at=utcnow(),
    )
    db.add(msg)
    if commit:
        db.commit()
        db.refresh(msg)
    else:
        db.flush()
    return msg


@read_path(list)
def get_messages(db: Session, conversation_id: str) -> list[Message]:
    """Messages of one conversation, oldest first; id breaks created_at ties."""
    return (
        db.query(Message)
        .filter(Message.conversation_id == conversation_id)
        .order_by(Message.created_at, Message.id)
        .all()
    )


class ChatRepository:
    """Thin wrapper for dependency injection; delegates to module functions."""

    @staticmethod
    def create_conversation(
        db: Session | None, user_id: str, title: str, response_mode: str = ResponseMode.CONCISE.value
    ) -> Conversation:
        return create_conversation(db, user_id, title, response_mode)

    @staticmethod
    def get_conversations(db: Session | None, user_id: str) -> list[Conversation]:
        return get_conversations(db, user_id)

    @staticmethod
    def get_conversation(db: Session | None, conversation_id: str) -> Conversation | None:
        return get_conversation(db, conversation_id)

    @staticmethod
    def update_conversation(db: Session | None, conversation_id: str, fields: dict) -> None:
        return update_conversation(db, conversation_id, fields)

    @staticmethod
    def delete_conversation(db: Session | None, conversation_id: str) -> None:
        return delete_conversation(db, conversation_id)

    @staticmethod
    def create_message(
        db: Session | None,
        conversation_id: str,
        role: str,
        content: str,
        citations: list[dict] | None = None,
        tokens: int | None = None,
        *,
        commit: bool = True,
    ) -> Message:
        return create_message(db, conversation_id, role, content, citations, tokens, commit=commit)

    @staticmethod
    def get_messages(db: Session | None, conversation_id: str) -> list[Message]:
        return get_messages(db, conversation_id)
