import enum
from sqlalchemy import Column, String, Text, DateTime
from app.database import Base
from app.utils.clock import utcnow


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    # Opaque id from the identity provider, not generated here
    id = Column(String(64), primary_key=True)
    name = Column(Text, nullable=True)
    email = Column(String(320), nullable=True)
    login_method = Column(String(64), nullable=True)
    role = Column(String(16), nullable=False, default=UserRole.USER.value)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    last_signed_in = Column(DateTime, nullable=False, default=utcnow)
