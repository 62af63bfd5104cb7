from datetime import datetime
from pydantic import BaseModel, ConfigDict
from app.models.user import UserRole


class UserUpsert(BaseModel):
    """
    Upsert payload. Field presence matters: only fields that were actually
    passed (model_fields_set) are written; an explicit None clears the column,
    an omitted field leaves it alone.
    """
    id: str
    name: str | None = None
    email: str | None = None
    login_method: str | None = None
    role: UserRole | None = None
    last_signed_in: datetime | None = None

    def provided_fields(self) -> dict:
        """Explicitly passed fields except id."""
        data = self.model_dump(exclude_unset=True)
        data.pop("id", None)
        # NOT NULL columns: an explicit None means "not provided"
        for key in ("role", "last_signed_in"):
            if key in data and data[key] is None:
                del data[key]
        if "role" in data:
            data["role"] = UserRole(data["role"]).value
        return data


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None
    email: str | None
    login_method: str | None
    role: str
    created_at: datetime | None
    last_signed_in: datetime | None


class TokenPayload(BaseModel):
    sub: str  # user id
    exp: int
    name: str | None = None
    email: str | None = None
    login_method: str | None = None
    type: str = "access"
