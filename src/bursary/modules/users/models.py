"""
User Models

Portal users outside the review pipeline, identified by a username as well
as an email, and their activation invitations.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bursary.core.database import Base
from bursary.modules.shared import BaseModel, PrincipalMixin


class User(PrincipalMixin, BaseModel):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.username}>"


class UserInvitation(Base):
    """Hashed single-use activation token for a user. Never updated."""

    __tablename__ = "users_invitations"

    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    principal_id: Mapped[uuid.UUID] = mapped_column(
        "user_id",
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expiry: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
