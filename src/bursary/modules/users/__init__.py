"""
Users module - portal accounts outside the review pipeline.
"""

from bursary.modules.users.models import User, UserInvitation
from bursary.modules.users.repository import UserRepository

__all__ = ["User", "UserInvitation", "UserRepository"]
