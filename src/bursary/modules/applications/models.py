"""
Application Model

One student's application to one bursary. ``stage`` is its position in
the review pipeline; withdrawal is recorded separately in ``soft_delete``
so a withdrawn application keeps the stage it had reached.
"""

import uuid
from enum import Enum

from sqlalchemy import Boolean, ForeignKey, Index, Text, Uuid
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from bursary.modules.shared import BaseModel


class ApplicationStage(str, Enum):
    """Pipeline stages, in forward order."""

    SUBMITTED = "submitted"
    COUNTY = "county"
    MINISTRY = "ministry"
    FINANCE = "finance"
    DISBURSED = "disbursed"


class Application(BaseModel):
    __tablename__ = "applications"

    bursary_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("bursaries.id", ondelete="RESTRICT"),
        nullable=False,
    )
    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )
    stage: Mapped[ApplicationStage] = mapped_column(
        SAEnum(
            ApplicationStage,
            name="application_stage",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=ApplicationStage.SUBMITTED,
        nullable=False,
    )
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Withdrawn by the student
    soft_delete: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("ix_applications_stage_soft_delete", "stage", "soft_delete"),
        Index("ix_applications_student_bursary", "student_id", "bursary_id"),
    )

    def __repr__(self) -> str:
        return f"<Application {self.id} stage={self.stage.value}>"
