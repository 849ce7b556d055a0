"""
Admins module - reviewer and administrator accounts.
"""

from bursary.modules.admins.models import Admin, AdminInvitation
from bursary.modules.admins.repository import AdminRepository

__all__ = ["Admin", "AdminInvitation", "AdminRepository"]
