from fastapi import APIRouter, Depends

from regit.models.user import User
from regit.routers.deps import get_current_user
from regit.schemas.user import UserResponse, user_to_response

router = APIRouter(prefix="/profile", tags=["profile"])

@router.get("", response_model=UserResponse, summary="Return the logged-in user's public profile")
def get_profile(user: User = Depends(get_current_user)):
    return user_to_response(user)
