"""
Admin Schemas

Request and response models for admin account management. Password
hashes are never part of a response.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AdminCreateRequest(BaseModel):
    """An admin creating another admin account."""

    first_name: str = Field(..., min_length=1, max_length=100)
    middle_name: str | None = Field(None, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str | None = Field(
        None,
        min_length=8,
        max_length=72,
        description="Omit to generate a temporary password sent with the invitation",
    )
    role: str = Field(..., min_length=1, max_length=50, description="Role name, e.g. 'ward'")
    role_code: str | None = Field(None, max_length=50)


class RoleSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    level: int


class AdminResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    middle_name: str | None = None
    last_name: str
    email: str
    blocked: bool
    activated: bool
    first_time_login: bool
    role: RoleSummary
    role_code: str | None = None
    created_at: datetime
    updated_at: datetime


class AdminListResponse(BaseModel):
    admins: list[AdminResponse]
    total: int


class ActivationResponse(BaseModel):
    message: str
    id: UUID
