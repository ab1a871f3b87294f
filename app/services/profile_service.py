"""
Read and update the authenticated user's own account
"""

import logging
from typing import Any, Dict

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import User
from app.schemas.user import PasswordChange, ProfileUpdate
from app.services.repositories import UserRepo
from app.services.serializers import serialize_user
from app.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)

REQUIRED_PROFILE_FIELDS = ("first_name", "last_name", "email")

class ProfileService:

    @staticmethod
    def _get_or_404(db: Session, user_id: str) -> User:
        user = UserRepo.get_by_id(db, user_id)
        if not user:
            raise NotFoundError("User")
        return user

    @staticmethod
    def get_own_profile(db: Session, user_id: str) -> Dict[str, Any]:
        return serialize_user(ProfileService._get_or_404(db, user_id))

    @staticmethod
    def update_own_profile(db: Session, user_id: str, patch: ProfileUpdate) -> Dict[str, Any]:
        """Update the caller's profile.

        First name, last name and email may not be blanked, and the email
        must not belong to another account.
        """
        user = ProfileService._get_or_404(db, user_id)
        changes = patch.model_dump(exclude_unset=True)

        blank = [
            name for name in REQUIRED_PROFILE_FIELDS
            if name in changes and not (changes[name] or "").strip()
        ]
        if blank:
            raise ValidationError(f"Fields cannot be blank: {', '.join(blank)}", details=blank)

        for name in REQUIRED_PROFILE_FIELDS:
            if name in changes:
                changes[name] = changes[name].strip()

        if "email" in changes:
            try:
                changes["email"] = validate_email(changes["email"], check_deliverability=False).normalized
            except EmailNotValidError as exc:
                raise ValidationError(f"Invalid email address: {exc}", details=["email"]) from exc

            owner = UserRepo.get_by_email(db, changes["email"])
            if owner and owner.id != user.id:
                raise ConflictError("Email is already in use by another account")

        for field, value in changes.items():
            setattr(user, field, value)

        db.commit()
        db.refresh(user)
        logger.info("Updated profile of user %s", user_id)
        return serialize_user(user)

    @staticmethod
    def change_password(db: Session, user_id: str, payload: PasswordChange) -> None:
        user = ProfileService._get_or_404(db, user_id)

        missing = [
            name for name in ("current_password", "new_password")
            if not getattr(payload, name)
        ]
        if missing:
            raise ValidationError.missing_fields(missing)

        if not verify_password(payload.current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")

        user.password_hash = hash_password(payload.new_password)
        db.commit()
        logger.info("Changed password of user %s", user_id)
