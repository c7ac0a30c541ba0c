from fastapi import APIRouter, Depends

from app.api.deps import get_current_user
from app.models.user import User
from app.services.user_service import UserService
from app.utils.response import success

router = APIRouter()


@router.get("/profile", response_model=dict)
def get_profile(current_user: User = Depends(get_current_user)):
    """Get current user profile"""
    return success(data=UserService.serialize(current_user), message="User profile retrieved")
