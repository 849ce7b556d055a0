"""
Role Model

Roles are static reference data seeded by migration. ``level`` totally
orders them: a higher level carries more authority.
"""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from bursary.core.database import Base


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Stored lower-cased
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Role {self.name} level={self.level}>"


# Seed data shared by the initial migration and the test fixtures.
# Stage-transition roles are matched by exact name; levels gate everything else.
SEED_ROLES: tuple[dict, ...] = (
    {"id": 1, "name": "student", "level": 1, "description": "Applicant for bursaries"},
    {"id": 2, "name": "ward", "level": 2, "description": "Ward bursary committee reviewer"},
    {"id": 3, "name": "county", "level": 3, "description": "County bursary officer"},
    {
        "id": 4,
        "name": "finance-assistant",
        "level": 4,
        "description": "Ministry finance assistant",
    },
    {"id": 5, "name": "finance", "level": 5, "description": "Finance officer releasing funds"},
    {"id": 6, "name": "admin", "level": 6, "description": "System administrator"},
)
