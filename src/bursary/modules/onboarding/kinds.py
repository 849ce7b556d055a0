"""
Principal Kinds

Binds each principal table to its invitation table so the onboarding
protocol can run unchanged for admins, students and portal users.
"""

from dataclasses import dataclass

from bursary.modules.admins.models import Admin, AdminInvitation
from bursary.modules.students.models import Student, StudentInvitation
from bursary.modules.users.models import User, UserInvitation


@dataclass(frozen=True)
class PrincipalKind:
    name: str
    model: type[Admin] | type[Student] | type[User]
    invitation_model: type[AdminInvitation] | type[StudentInvitation] | type[UserInvitation]


ADMIN = PrincipalKind(name="admin", model=Admin, invitation_model=AdminInvitation)
STUDENT = PrincipalKind(name="student", model=Student, invitation_model=StudentInvitation)
USER = PrincipalKind(name="user", model=User, invitation_model=UserInvitation)

ALL_KINDS: tuple[PrincipalKind, ...] = (ADMIN, STUDENT, USER)
