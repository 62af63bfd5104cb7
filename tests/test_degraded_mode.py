import pytest

from app.exceptions import NotAuthorized, StoreUnavailable
from app.repositories import audit_repository, chat_repository, embedding_repository
from app.repositories.user_repository import get_user, upsert_user
from app.schemas.user import UserUpsert
from app.services.conversation_service import ConversationService


def test_reads_return_empty_results_without_store():
    assert chat_repository.get_conversations(None, "alice") == []
    assert chat_repository.get_conversation(None, "conv_1") is None
    assert chat_repository.get_messages(None, "conv_1") == []
    assert audit_repository.get_audit_logs(None) == []
    assert embedding_repository.get_medical_embedding(None, "emb_1") is None
    assert get_user(None, "alice") is None


def test_creates_raise_store_unavailable_without_store():
    with pytest.raises(StoreUnavailable):
        chat_repository.create_conversation(None, "alice", "Title")
    with pytest.raises(StoreUnavailable):
        chat_repository.create_message(None, "conv_1", "user", "hi")
    with pytest.raises(StoreUnavailable):
        embedding_repository.create_medical_embedding(None, "src", "text", [0.5])
    with pytest.raises(StoreUnavailable):
        audit_repository.create_audit_log(None, "alice", "message_sent")


def test_upsert_and_mutations_are_noops_without_store():
    assert upsert_user(None, UserUpsert(id="alice")) is None
    assert chat_repository.update_conversation(None, "conv_1", {"title": "x"}) is None
    assert chat_repository.delete_conversation(None, "conv_1") is None


def test_service_without_store(offline_database):
    service = ConversationService(offline_database)

    assert service.list_conversations("alice") == []
    with pytest.raises(StoreUnavailable):
        service.create_conversation("alice", "Title")
    # Conversation cannot be resolved, so the guard denies
    with pytest.raises(NotAuthorized):
        service.send_message("alice", "conv_1", "hi")


def test_reads_degrade_when_store_unreachable(database):
    # Engine exists but its tables are gone: the driver raises OperationalError
    from app.database import Base

    Base.metadata.drop_all(bind=database.engine)
    with database.session() as db:
        assert chat_repository.get_conversations(db, "alice") == []
        assert chat_repository.get_messages(db, "conv_1") == []
        with pytest.raises(StoreUnavailable):
            chat_repository.create_conversation(db, "alice", "Title")
