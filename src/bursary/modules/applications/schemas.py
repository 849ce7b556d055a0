"""
Application Schemas

Request bodies and the views materialised by the query layer.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from bursary.modules.applications.models import ApplicationStage
from bursary.modules.bursaries.models import AllocationType
from bursary.modules.bursaries.schemas import BursaryResponse
from bursary.modules.students.schemas import (
    InstitutionSectionResponse,
    PersonalSectionResponse,
)

MAX_BULK_APPROVE = 100


# ============================================
# Requests
# ============================================


class ApplicationCreateRequest(BaseModel):
    bursary_id: UUID


class WithdrawRequest(BaseModel):
    bursary_id: UUID


class ApproveRequest(BaseModel):
    id: UUID


class BulkApproveRequest(BaseModel):
    ids: list[UUID] = Field(..., min_length=1, max_length=MAX_BULK_APPROVE)


class RejectRequest(BaseModel):
    id: UUID
    remarks: str | None = Field(None, max_length=2000)


# ============================================
# Responses
# ============================================


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    bursary_id: UUID
    student_id: UUID
    stage: ApplicationStage
    remarks: str | None = None
    created_at: datetime
    updated_at: datetime


class ApplicationActionResponse(BaseModel):
    message: str
    application: ApplicationResponse


class WithdrawResponse(BaseModel):
    message: str
    withdrawn: int


class BulkApproveFailure(BaseModel):
    id: UUID
    error: str
    message: str


class BulkApproveResponse(BaseModel):
    approved: list[UUID]
    failed: list[BulkApproveFailure]


class BursarySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    allocation_type: AllocationType
    end_date: date


class StudentSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    middle_name: str | None = None
    last_name: str
    email: str


class ApplicationListItem(BaseModel):
    application: ApplicationResponse
    bursary: BursarySummary
    student: StudentSummary


class ApplicationListResponse(BaseModel):
    applications: list[ApplicationListItem]
    total: int


class ApplicationDetailResponse(BaseModel):
    application: ApplicationResponse
    bursary: BursaryResponse
    student: StudentSummary
    personal: PersonalSectionResponse | None = None
    institution: InstitutionSectionResponse | None = None


class StudentApplicationItem(BaseModel):
    application: ApplicationResponse
    bursary: BursaryResponse


class StudentApplicationListResponse(BaseModel):
    applications: list[StudentApplicationItem]
    total: int
