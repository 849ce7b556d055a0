"""
Onboarding Module

Registration, invitation and activation shared by admins, students and portal users:
1. Principal + invitation inserted in one transaction
2. Plaintext token delivered by email outside the transaction
3. Delivery failure compensated by deleting both rows
4. Activation consumes the token exactly once

Background Jobs (via APScheduler):
- purge_expired_invitations: Runs hourly
"""

from bursary.modules.onboarding.kinds import ADMIN, STUDENT, USER, PrincipalKind
from bursary.modules.onboarding.saga import Saga

__all__ = ["ADMIN", "STUDENT", "USER", "PrincipalKind", "Saga"]
