"""
Own-account routes (bearer token required)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.user import PasswordChange, ProfileUpdate
from app.services.profile_service import ProfileService
from app.utils.responses import success_response
from app.utils.security import get_current_user_id

router = APIRouter()

@router.get("/users/me")
def get_my_profile(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return success_response(data=ProfileService.get_own_profile(db, user_id))

@router.put("/users/me")
def update_my_profile(
    patch: ProfileUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    profile = ProfileService.update_own_profile(db, user_id, patch)
    return success_response(data=profile, message="Profile updated successfully")

@router.put("/users/me/password")
def change_my_password(
    payload: PasswordChange,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    ProfileService.change_password(db, user_id, payload)
    return success_response(message="Password updated successfully")
