"""
Bursary Model

A bursary is a fund students apply to. ``allocation_type`` says whether
every approved student receives ``amount_per_student`` (fixed) or awards
are decided case by case out of ``amount_allocated`` (variable).
"""

from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import Date, Index, Numeric, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from bursary.modules.shared import BaseModel


class AllocationType(str, Enum):
    FIXED = "fixed"
    VARIABLE = "variable"


class Bursary(BaseModel):
    __tablename__ = "bursaries"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    amount_allocated: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    amount_per_student: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    allocation_type: Mapped[AllocationType] = mapped_column(
        SAEnum(
            AllocationType,
            name="allocation_type",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
    )

    __table_args__ = (Index("ix_bursaries_created_at", "created_at"),)

    def __repr__(self) -> str:
        return f"<Bursary {self.name} ({self.allocation_type.value})>"
