"""
Audit trail for compliance. Rows are append-only: there is no update or delete here.
"""
from typing import Any

from sqlalchemy.orm import Session

from app.models.audit_log import AuditLog
from app.repositories.store_guard import read_path, write_path
from app.utils.clock import utcnow

MESSAGE_SENT = "message_sent"


@write_path()
def create_audit_log(
    db: Session,
    user_id: str,
    action: str,
    conversation_id: str | None = None,
    details: dict[str, Any] | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
    *,
    commit: bool = True,
) -> AuditLog:
    entry = AuditLog(
        user_id=user_id,
        conversation_id=conversation_id,
        action=action,
        details=details,
        ip_address=ip_address,
        user_agent=user_agent,
        created_at=utcnow(),
    )
    db.add(entry)
    if commit:
        db.commit()
        db.refresh(entry)
    else:
        db.flush()
    return entry


@read_path(list)
def get_audit_logs(
    db: Session,
    user_id: str | None = None,
    conversation_id: str | None = None,
    action: str | None = None,
) -> list[AuditLog]:
    q = db.query(AuditLog)
    if user_id is not None:
        q = q.filter(AuditLog.user_id == user_id)
    if conversation_id is not None:
        q = q.filter(AuditLog.conversation_id == conversation_id)
    if action is not None:
        q = q.filter(AuditLog.action == action)
    return q.order_by(AuditLog.created_at, AuditLog.id).all()
