import pytest
from sqlalchemy.exc import IntegrityError

from app.exceptions import NotAuthorized, ValidationError
from app.repositories import audit_repository, chat_repository
from app.repositories.user_repository import upsert_user
from app.schemas.user import UserUpsert


@pytest.fixture()
def users(session):
    upsert_user(session, UserUpsert(id="alice", name="Alice"))
    upsert_user(session, UserUpsert(id="bob", name="Bob"))


def test_fever_workup_scenario(service, session, users):
    content = "What are red flags for neonatal fever?"
    conv = service.create_conversation("alice", "Fever workup")

    sent = service.send_message("alice", conv.id, content)
    result = service.get_conversation_with_messages("alice", conv.id)

    assert result["conversation"].id == conv.id
    assert result["conversation"].title == "Fever workup"
    assert len(result["messages"]) == 1
    message = result["messages"][0]
    assert message.id == sent.id
    assert message.role == "user"
    assert message.content == content

    logs = audit_repository.get_audit_logs(session, conversation_id=conv.id)
    assert len(logs) == 1
    assert logs[0].action == "message_sent"
    assert logs[0].user_id == "alice"
    assert logs[0].details["messageLength"] == len(content)


def test_other_user_is_not_authorized(service, session, users):
    conv = service.create_conversation("alice", "Private")
    service.send_message("alice", conv.id, "hello")

    with pytest.raises(NotAuthorized):
        service.get_conversation_with_messages("bob", conv.id)
    with pytest.raises(NotAuthorized):
        service.update_conversation("bob", conv.id, title="Hijacked")
    with pytest.raises(NotAuthorized):
        service.delete_conversation("bob", conv.id)
    with pytest.raises(NotAuthorized):
        service.send_message("bob", conv.id, "sneaky")

    assert conv.id not in [c.id for c in service.list_conversations("bob")]
    # Nothing changed for the owner
    result = service.get_conversation_with_messages("alice", conv.id)
    assert result["conversation"].title == "Private"
    assert [m.content for m in result["messages"]] == ["hello"]
    assert len(audit_repository.get_audit_logs(session, user_id="bob")) == 0


def test_missing_and_foreign_conversation_fail_the_same_way(service, users):
    conv = service.create_conversation("alice", "Mine")

    with pytest.raises(NotAuthorized) as foreign:
        service.get_conversation_with_messages("bob", conv.id)
    with pytest.raises(NotAuthorized) as missing:
        service.get_conversation_with_messages("bob", "conv_does_not_exist")

    assert str(foreign.value) == str(missing.value)


@pytest.mark.parametrize("title", ["", "x" * 256])
def test_create_conversation_title_bounds(service, session, users, title):
    with pytest.raises(ValidationError):
        service.create_conversation("alice", title)
    assert service.list_conversations("alice") == []


def test_create_conversation_title_limits_accepted(service, users):
    assert service.create_conversation("alice", "x").title == "x"
    assert service.create_conversation("alice", "x" * 255, "academic").response_mode == "academic"


def test_create_conversation_rejects_unknown_mode(service, users):
    with pytest.raises(ValidationError):
        service.create_conversation("alice", "Title", "verbose")


def test_update_conversation_partial(service, users):
    conv = service.create_conversation("alice", "Before", "academic")

    service.update_conversation("alice", conv.id, title="After")

    updated = service.get_conversation_with_messages("alice", conv.id)["conversation"]
    assert updated.title == "After"
    assert updated.response_mode == "academic"
    assert updated.updated_at >= conv.updated_at


@pytest.mark.parametrize("title", ["", "x" * 256])
def test_update_conversation_title_bounds(service, users, title):
    conv = service.create_conversation("alice", "Keep me")

    with pytest.raises(ValidationError):
        service.update_conversation("alice", conv.id, title=title)

    stored = service.get_conversation_with_messages("alice", conv.id)["conversation"]
    assert stored.title == "Keep me"


def test_update_without_fields_still_refreshes_updated_at(service, users):
    older = service.create_conversation("alice", "Older")
    newer = service.create_conversation("alice", "Newer")

    service.update_conversation("alice", older.id)

    assert [c.id for c in service.list_conversations("alice")][0] == older.id
    assert newer.id in [c.id for c in service.list_conversations("alice")]


def test_delete_conversation_cascades(service, session, users):
    conv = service.create_conversation("alice", "Temp")
    service.send_message("alice", conv.id, "one")
    service.send_message("alice", conv.id, "two")

    service.delete_conversation("alice", conv.id)

    assert chat_repository.get_messages(session, conv.id) == []
    assert chat_repository.get_conversation(session, conv.id) is None
    with pytest.raises(NotAuthorized):
        service.get_conversation_with_messages("alice", conv.id)
    # Audit trail survives the conversation
    assert len(audit_repository.get_audit_logs(session, conversation_id=conv.id)) == 2


def test_send_empty_message_is_rejected(service, session, users):
    conv = service.create_conversation("alice", "Quiet")

    with pytest.raises(ValidationError):
        service.send_message("alice", conv.id, "")

    assert service.get_conversation_with_messages("alice", conv.id)["messages"] == []
    assert audit_repository.get_audit_logs(session) == []


def test_send_message_records_client_info(service, session, users):
    conv = service.create_conversation("alice", "Audit")

    service.send_message("alice", conv.id, "hi", ip_address="192.168.1.7", user_agent="Mozilla/5.0")

    log = audit_repository.get_audit_logs(session, user_id="alice")[0]
    assert log.ip_address == "192.168.1.7"
    assert log.user_agent == "Mozilla/5.0"
    assert log.details == {"messageLength": 2}


def test_messages_returned_in_send_order(service, users):
    a = service.create_conversation("alice", "A")
    b = service.create_conversation("alice", "B")
    for i in range(3):
        service.send_message("alice", a.id, f"a{i}")
        service.send_message("alice", b.id, f"b{i}")

    messages = service.get_conversation_with_messages("alice", a.id)["messages"]
    assert [m.content for m in messages] == ["a0", "a1", "a2"]


def test_send_message_is_all_or_nothing(service, session, users, monkeypatch):
    conv = service.create_conversation("alice", "Atomic")

    def failing_audit(*args, **kwargs):
        raise IntegrityError("INSERT INTO audit_logs", {}, Exception("audit insert failed"))

    monkeypatch.setattr(audit_repository, "create_audit_log", failing_audit)

    with pytest.raises(IntegrityError):
        service.send_message("alice", conv.id, "lost with its audit row")

    assert chat_repository.get_messages(session, conv.id) == []
    assert service.get_conversation_with_messages("alice", conv.id)["messages"] == []
