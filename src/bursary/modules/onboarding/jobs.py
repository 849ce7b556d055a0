"""
Onboarding Background Jobs

- purge_expired_invitations: hourly, deletes invitation rows past their
  expiry. Expired rows can no longer activate anything, so removing them
  changes no observable behavior.
"""

import logging

from apscheduler.triggers.interval import IntervalTrigger

from bursary.core.database import async_session_maker
from bursary.core.scheduler import register_job
from bursary.modules.onboarding import service
from bursary.modules.onboarding.kinds import ALL_KINDS

logger = logging.getLogger(__name__)

PURGE_JOB_ID = "onboarding_purge_expired_invitations"


async def purge_expired_invitations_job() -> int:
    async with async_session_maker() as db:
        purged = await service.purge_expired_invitations(db, ALL_KINDS)
    logger.info(f"Purged {purged} expired invitations")
    return purged


def register_onboarding_jobs() -> None:
    register_job(
        job_id=PURGE_JOB_ID,
        func=purge_expired_invitations_job,
        trigger=IntervalTrigger(hours=1),
    )
