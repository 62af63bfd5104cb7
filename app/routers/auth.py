from fastapi import APIRouter, Depends

from app.auth import get_current_user
from app.models.user import User
from app.schemas.user import UserResponse

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    """Current user as recorded by the last sign-in upsert."""
    return UserResponse.model_validate(user)
