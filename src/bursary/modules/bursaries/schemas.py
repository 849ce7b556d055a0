"""
Bursary Schemas
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from bursary.modules.applications.models import ApplicationStage
from bursary.modules.bursaries.models import AllocationType

MAX_PAGE_SIZE = 170

REQUIRED_ON_UPDATE = ("name", "end_date", "allocation_type")


class BursaryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    end_date: date
    amount_allocated: Decimal | None = Field(None, ge=0)
    amount_per_student: Decimal | None = Field(None, gt=0)
    allocation_type: AllocationType

    @model_validator(mode="after")
    def validate_allocation(self) -> "BursaryCreate":
        """A fixed bursary must say how much each student receives."""
        if self.allocation_type == AllocationType.FIXED and self.amount_per_student is None:
            raise ValueError("amount_per_student is required for fixed allocation")
        return self


class BursaryUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    end_date: date | None = None
    amount_allocated: Decimal | None = Field(None, ge=0)
    amount_per_student: Decimal | None = Field(None, gt=0)
    allocation_type: AllocationType | None = None

    @model_validator(mode="after")
    def validate_required_columns(self) -> "BursaryUpdate":
        """Columns that cannot be NULL may be omitted but not cleared."""
        cleared = sorted(
            field
            for field in REQUIRED_ON_UPDATE
            if field in self.model_fields_set and getattr(self, field) is None
        )
        if cleared:
            raise ValueError(f"{', '.join(cleared)} cannot be null")
        return self


class BursaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    end_date: date
    amount_allocated: Decimal | None = None
    amount_per_student: Decimal | None = None
    allocation_type: AllocationType
    created_at: datetime


class BursaryQuery(BaseModel):
    """Listing filters and pagination."""

    limit: int = Field(20, ge=1, le=MAX_PAGE_SIZE)
    offset: int = Field(0, ge=0)
    sort: Literal["asc", "desc"] = "desc"
    search: str | None = Field(None, max_length=100)
    allocation_type: AllocationType | None = None
    since: datetime | None = None
    until: datetime | None = None


class BursaryListResponse(BaseModel):
    bursaries: list[BursaryResponse]
    total_items: int
    limit: int
    offset: int


class StudentBursaryApplication(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    stage: ApplicationStage
    remarks: str | None = None
    created_at: datetime


class StudentBursaryResponse(BaseModel):
    """A bursary together with the viewing student's applications to it."""

    bursary: BursaryResponse
    applications: list[StudentBursaryApplication]
