"""
Students module - applicant accounts and profile sections.
"""

from bursary.modules.students.models import (
    Student,
    StudentEmergency,
    StudentGuardian,
    StudentInstitution,
    StudentInvitation,
    StudentPersonal,
    StudentSponsor,
)
from bursary.modules.students.repository import StudentRepository

__all__ = [
    "Student",
    "StudentEmergency",
    "StudentGuardian",
    "StudentInstitution",
    "StudentInvitation",
    "StudentPersonal",
    "StudentRepository",
    "StudentSponsor",
]
