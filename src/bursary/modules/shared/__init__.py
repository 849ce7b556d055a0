"""
Shared model building blocks.
"""

from bursary.modules.shared.models import BaseModel, PrincipalMixin

__all__ = ["BaseModel", "PrincipalMixin"]
