"""
Identity adapter: resolves the requester from a bearer JWT issued by the identity
provider and records the sign-in via upsert_user. Tokens carry the user id in
"sub" and optionally name / email / login_method; only claims present in the
token are written to the user row.
"""
import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.models.user import User, UserRole
from app.repositories.user_repository import upsert_user
from app.schemas.user import TokenPayload, UserUpsert
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

PROFILE_CLAIMS = ("name", "email", "login_method")


def create_access_token(user_id: str, **claims: str | None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.access_token_expire_minutes
    )
    payload = {
        "sub": user_id,
        "exp": expire,
        "type": "access",
    }
    for key in PROFILE_CLAIMS:
        if key in claims:
            payload[key] = claims[key]
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_token(token: str) -> tuple[TokenPayload, set[str]] | None:
    """Returns the payload and the set of profile claims present in the token."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
        present = {key for key in PROFILE_CLAIMS if key in payload}
        return TokenPayload(**payload), present
    except (JWTError, KeyError, ValueError):
        return None


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session | None = Depends(get_db),
) -> User:
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    decoded = decode_token(credentials.credentials)

    if not decoded or not decoded[0].sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload, present = decoded
    fields = {key: getattr(payload, key) for key in present}
    user = upsert_user(
        db,
        UserUpsert(id=payload.sub, last_signed_in=utcnow(), **fields),
        owner_id=get_settings().owner_id,
    )

    if user is None:
        # Store not configured: transient identity, reads will come back empty
        logger.warning("Store unavailable; using token identity for user %s", payload.sub)
        owner_id = get_settings().owner_id
        role = UserRole.ADMIN.value if owner_id and payload.sub == owner_id else UserRole.USER.value
        user = User(id=payload.sub, role=role, **fields)

    return user


def get_current_user_admin(
    user: User = Depends(get_current_user),
) -> User:
    """User must be logged in and have admin role."""
    if user.role != UserRole.ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admin can access.",
        )
    return user
