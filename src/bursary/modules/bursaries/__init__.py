"""
Bursaries module - the funds students apply to.
"""

from bursary.modules.bursaries.models import AllocationType, Bursary

__all__ = ["AllocationType", "Bursary"]
