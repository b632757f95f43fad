from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class RegisterRequest(BaseModel):
    """Registration body. Fields are optional so missing ones map to a 400, not a 422."""
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserPublic(BaseModel):
    id: str
    username: str
    email: str

    class Config:
        from_attributes = True


class UserProfile(UserPublic):
    created_at: datetime
    updated_at: datetime


class AuthPayload(BaseModel):
    user: UserPublic
    token: str
