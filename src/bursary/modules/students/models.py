"""
Student Models

Student accounts, their activation invitations and the profile sections.
Personal and institution details feed the application review screens.
"""

import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bursary.core.database import Base
from bursary.modules.shared import BaseModel, PrincipalMixin


class Student(PrincipalMixin, BaseModel):
    __tablename__ = "students"

    role_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("roles.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Student {self.email}>"


class StudentInvitation(Base):
    """Hashed single-use activation token for a student. Never updated."""

    __tablename__ = "students_invitations"

    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    principal_id: Mapped[uuid.UUID] = mapped_column(
        "student_id",
        Uuid,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expiry: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class StudentPersonal(BaseModel):
    """Personal details section, one per student."""

    __tablename__ = "students_personal"

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("students.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[str] = mapped_column(String(20), nullable=False)
    citizenship: Mapped[str] = mapped_column(String(100), nullable=False)
    parental_status: Mapped[str] = mapped_column(String(50), nullable=False)
    birth_cert_no: Mapped[str] = mapped_column(String(50), nullable=False)
    birth_county: Mapped[str] = mapped_column(String(100), nullable=False)
    birth_sub_county: Mapped[str] = mapped_column(String(100), nullable=False)
    ward: Mapped[str] = mapped_column(String(100), nullable=False)
    residence: Mapped[str] = mapped_column(String(255), nullable=False)
    id_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    special_need: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    special_needs_type: Mapped[str | None] = mapped_column(String(255), nullable=True)


class StudentInstitution(BaseModel):
    """Current institution and bank details, one per student."""

    __tablename__ = "students_institution"

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("students.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    institution_name: Mapped[str] = mapped_column(String(255), nullable=False)
    institution_type: Mapped[str] = mapped_column(String(50), nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    telephone: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    county: Mapped[str] = mapped_column(String(100), nullable=False)
    sub_county: Mapped[str] = mapped_column(String(100), nullable=False)
    ward: Mapped[str | None] = mapped_column(String(100), nullable=True)
    principal_name: Mapped[str] = mapped_column(String(255), nullable=False)
    year_joined: Mapped[int] = mapped_column(Integer, nullable=False)
    current_class_level: Mapped[str] = mapped_column(String(50), nullable=False)
    admission_number: Mapped[str] = mapped_column(String(50), nullable=False)
    bank_name: Mapped[str] = mapped_column(String(100), nullable=False)
    bank_branch: Mapped[str] = mapped_column(String(100), nullable=False)
    bank_account_name: Mapped[str] = mapped_column(String(255), nullable=False)
    bank_account_no: Mapped[str] = mapped_column(String(50), nullable=False)


class StudentSponsor(BaseModel):
    """Current sponsor, one per student."""

    __tablename__ = "students_sponsor"

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("students.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sponsorship_type: Mapped[str] = mapped_column(String(50), nullable=False)
    sponsorship_nature: Mapped[str] = mapped_column(String(50), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_person_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_person_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)


class StudentEmergency(BaseModel):
    """Emergency contact, one per student."""

    __tablename__ = "students_emergency"

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("students.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    middle_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    id_number: Mapped[str] = mapped_column(String(20), nullable=False)
    relationship: Mapped[str] = mapped_column(String(50), nullable=False)
    residence: Mapped[str] = mapped_column(String(255), nullable=False)
    town: Mapped[str | None] = mapped_column(String(100), nullable=True)
    occupation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    work_place: Mapped[str | None] = mapped_column(String(255), nullable=True)
    work_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    provided_by: Mapped[str | None] = mapped_column(String(100), nullable=True)


class StudentGuardian(BaseModel):
    """A parent or guardian. A student may list several."""

    __tablename__ = "students_guardians"

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(20), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    middle_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    phone_alternate: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    id_number: Mapped[str] = mapped_column(String(20), nullable=False)
    kra_pin_no: Mapped[str | None] = mapped_column(String(20), nullable=True)
    passport_no: Mapped[str | None] = mapped_column(String(20), nullable=True)
    alien_no: Mapped[str | None] = mapped_column(String(20), nullable=True)
    relationship: Mapped[str] = mapped_column(String(50), nullable=False)
    occupation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    work_location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    work_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    residence: Mapped[str] = mapped_column(String(255), nullable=False)
    town: Mapped[str] = mapped_column(String(100), nullable=False)
    county: Mapped[str] = mapped_column(String(100), nullable=False)
    sub_county: Mapped[str] = mapped_column(String(100), nullable=False)
    ward: Mapped[str | None] = mapped_column(String(100), nullable=True)
    voters_card_no: Mapped[str | None] = mapped_column(String(20), nullable=True)
    polling_station: Mapped[str | None] = mapped_column(String(100), nullable=True)
