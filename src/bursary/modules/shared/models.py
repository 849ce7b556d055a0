"""
Shared Model Mixins

``BaseModel`` supplies the UUID primary key and audit timestamps used by
every table except the seeded ``roles``. ``PrincipalMixin`` holds the
credential and lifecycle columns common to admins, students and users.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from bursary.core.database import Base


class BaseModel(Base):
    """Abstract base with ``id``, ``created_at`` and ``updated_at``."""

    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class PrincipalMixin:
    """
    Columns shared by every principal table.

    Lifecycle: registered rows start ``activated=False`` with
    ``first_time_login=True``; activation flips ``activated``.
    """

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    middle_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    # bcrypt hash, never the plaintext
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    blocked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    activated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    first_time_login: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    @property
    def full_name(self) -> str:
        names = [self.first_name, self.middle_name, self.last_name]
        return " ".join(name for name in names if name)
