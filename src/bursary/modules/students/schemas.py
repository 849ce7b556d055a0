"""
Student Schemas

Registration, account and profile section models.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class StudentRegisterRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    middle_name: str | None = Field(None, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)


class StudentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    middle_name: str | None = None
    last_name: str
    email: str
    blocked: bool
    activated: bool
    first_time_login: bool
    created_at: datetime
    updated_at: datetime


class ActivationResponse(BaseModel):
    message: str
    id: UUID


# ============================================
# Profile sections
# ============================================


class PersonalSection(BaseModel):
    date_of_birth: date
    gender: str = Field(..., max_length=20)
    citizenship: str = Field(..., max_length=100)
    parental_status: str = Field(..., max_length=50)
    birth_cert_no: str = Field(..., max_length=50)
    birth_county: str = Field(..., max_length=100)
    birth_sub_county: str = Field(..., max_length=100)
    ward: str = Field(..., max_length=100)
    residence: str = Field(..., max_length=255)
    id_number: str | None = Field(None, max_length=20)
    phone: str = Field(..., min_length=7, max_length=20)
    special_need: bool = False
    special_needs_type: str | None = Field(None, max_length=255)


class PersonalSectionResponse(PersonalSection):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    updated_at: datetime


class InstitutionSection(BaseModel):
    institution_name: str = Field(..., max_length=255)
    institution_type: str = Field(..., max_length=50)
    category: str | None = Field(None, max_length=50)
    telephone: str = Field(..., max_length=20)
    email: EmailStr | None = None
    address: str = Field(..., max_length=255)
    county: str = Field(..., max_length=100)
    sub_county: str = Field(..., max_length=100)
    ward: str | None = Field(None, max_length=100)
    principal_name: str = Field(..., max_length=255)
    year_joined: int = Field(..., ge=1950, le=2100)
    current_class_level: str = Field(..., max_length=50)
    admission_number: str = Field(..., max_length=50)
    bank_name: str = Field(..., max_length=100)
    bank_branch: str = Field(..., max_length=100)
    bank_account_name: str = Field(..., max_length=255)
    bank_account_no: str = Field(..., max_length=50)


class InstitutionSectionResponse(InstitutionSection):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    updated_at: datetime


class SponsorSection(BaseModel):
    name: str = Field(..., max_length=255)
    sponsorship_type: str = Field(..., max_length=50)
    sponsorship_nature: str = Field(..., max_length=50)
    phone: str = Field(..., min_length=7, max_length=20)
    email: EmailStr | None = None
    address: str | None = Field(None, max_length=255)
    contact_person_name: str | None = Field(None, max_length=255)
    contact_person_phone: str | None = Field(None, max_length=20)


class SponsorSectionResponse(SponsorSection):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    updated_at: datetime


class EmergencySection(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    middle_name: str | None = Field(None, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=7, max_length=20)
    email: EmailStr | None = None
    id_number: str = Field(..., max_length=20)
    relationship: str = Field(..., max_length=50)
    residence: str = Field(..., max_length=255)
    town: str | None = Field(None, max_length=100)
    occupation: str | None = Field(None, max_length=100)
    work_place: str | None = Field(None, max_length=255)
    work_phone: str | None = Field(None, max_length=20)
    provided_by: str | None = Field(None, max_length=100)


class EmergencySectionResponse(EmergencySection):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    updated_at: datetime


class GuardianSection(BaseModel):
    title: str = Field(..., max_length=20)
    first_name: str = Field(..., min_length=1, max_length=100)
    middle_name: str | None = Field(None, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=7, max_length=20)
    phone_alternate: str | None = Field(None, max_length=20)
    email: EmailStr | None = None
    id_number: str = Field(..., max_length=20)
    kra_pin_no: str | None = Field(None, max_length=20)
    passport_no: str | None = Field(None, max_length=20)
    alien_no: str | None = Field(None, max_length=20)
    relationship: str = Field(..., max_length=50)
    occupation: str | None = Field(None, max_length=100)
    work_location: str | None = Field(None, max_length=255)
    work_phone: str | None = Field(None, max_length=20)
    address: str | None = Field(None, max_length=255)
    residence: str = Field(..., max_length=255)
    town: str = Field(..., max_length=100)
    county: str = Field(..., max_length=100)
    sub_county: str = Field(..., max_length=100)
    ward: str | None = Field(None, max_length=100)
    voters_card_no: str | None = Field(None, max_length=20)
    polling_station: str | None = Field(None, max_length=100)


class GuardianSectionResponse(GuardianSection):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    created_at: datetime
    updated_at: datetime


class GuardianListResponse(BaseModel):
    guardians: list[GuardianSectionResponse]
    total: int
