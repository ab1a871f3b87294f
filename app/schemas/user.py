"""
User profile schemas
"""

from typing import Optional
from pydantic import BaseModel

class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile.

    Email format is checked by the service so blank values surface as a
    validation error rather than a parsing failure.
    """
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    profile_image: Optional[str] = None

class PasswordChange(BaseModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None
