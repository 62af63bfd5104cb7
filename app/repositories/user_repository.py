"""
User persistence. Users are only ever created/updated through upsert_user (no delete).
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ValidationError
from app.models.user import User, UserRole
from app.repositories.store_guard import read_path, write_path
from app.schemas.user import UserUpsert
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)


def _apply(user: User, fields: dict) -> None:
    for key, value in fields.items():
        setattr(user, key, value)


def upsert_user(db: Session | None, data: UserUpsert, owner_id: str | None = None) -> User | None:
    """
    Insert the user if absent, else write only the fields present in `data`.
    Re-applying the same payload never duplicates the row nor clears stored values.
    The configured owner id gets role=admin unless a role is passed explicitly.
    Returns None (logged) when the store is not configured.
    """
    if not data.id or not data.id.strip():
        raise ValidationError("User ID is required for upsert")
    return _upsert_user(db, data, owner_id)


@write_path(missing_ok=True)
def _upsert_user(db: Session, data: UserUpsert, owner_id: str | None) -> User:
    fields = data.provided_fields()
    explicit = bool(fields)
    if "role" not in fields and owner_id and data.id == owner_id:
        fields["role"] = UserRole.ADMIN.value
    if not explicit:
        # Liveness signal even when nothing else changed
        fields["last_signed_in"] = utcnow()

    user = db.get(User, data.id)
    if user is None:
        user = User(id=data.id, **fields)
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Concurrent first sign-in inserted the row; apply as an update instead
            db.rollback()
            user = db.get(User, data.id)
            if user is None:
                raise
            _apply(user, fields)
            db.commit()
    else:
        _apply(user, fields)
        db.commit()
    db.refresh(user)
    return user


@read_path(lambda: None)
def get_user(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()
