"""Role schemas."""

from pydantic import BaseModel, ConfigDict


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    level: int


class RoleListResponse(BaseModel):
    roles: list[RoleResponse]
