"""In-memory principals and payloads for tests."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

from bursary.core.auth import AdminPrincipal
from bursary.modules.bursaries.models import AllocationType
from bursary.modules.bursaries.schemas import BursaryCreate
from bursary.modules.roles.models import SEED_ROLES

DEFAULT_PASSWORD = "correct-horse-42"
ROLE_LEVELS = {role["name"]: role["level"] for role in SEED_ROLES}


def admin_principal(role_name: str) -> AdminPrincipal:
    """An admin principal holding a seeded role, not backed by a row."""
    return AdminPrincipal(
        id=uuid4(),
        email=f"{role_name}@bursary.org",
        role_name=role_name,
        role_level=ROLE_LEVELS[role_name],
        name=f"{role_name.title()} Reviewer",
    )


def form_one_aid() -> BursaryCreate:
    return BursaryCreate(
        name="Form1 Aid",
        description="Support for students joining form one",
        end_date=date(2026, 12, 31),
        allocation_type=AllocationType.FIXED,
        amount_per_student=Decimal("5000"),
    )
