"""Authentication schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    """Login response schema."""

    token: str
    token_type: str = "bearer"
    uid: UUID
    first_name: str
    email: str
    blocked: bool
    first_time_login: bool
    created_at: datetime
