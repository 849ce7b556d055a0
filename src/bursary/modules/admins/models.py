"""
Admin Models

Administrative staff accounts and their pending activation invitations.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bursary.core.database import Base
from bursary.modules.roles.models import Role
from bursary.modules.shared import BaseModel, PrincipalMixin


class Admin(PrincipalMixin, BaseModel):
    """
    A reviewer or administrator.

    ``role`` decides both the admin's level for gated actions and, by exact
    name, which pipeline stage their approvals move an application to.
    ``role_code`` is a free classification tag that plays no part in
    authorization.
    """

    __tablename__ = "system_users"

    role_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("roles.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    role_code: Mapped[str | None] = mapped_column(String(50), nullable=True)

    role: Mapped[Role] = relationship(Role, lazy="joined")

    def __repr__(self) -> str:
        return f"<Admin {self.email} role_id={self.role_id}>"


class AdminInvitation(Base):
    """Hashed single-use activation token for an admin. Never updated."""

    __tablename__ = "admins_invitations"

    # SHA-256 hex digest of the emailed token
    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    principal_id: Mapped[uuid.UUID] = mapped_column(
        "admin_id",
        Uuid,
        ForeignKey("system_users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expiry: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
