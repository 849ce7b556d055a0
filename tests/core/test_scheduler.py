"""
Unit tests for the job registry and the onboarding purge job.
"""

from unittest.mock import AsyncMock, patch

import pytest
from apscheduler.triggers.interval import IntervalTrigger

from bursary.core import scheduler
from bursary.modules.onboarding import jobs
from bursary.modules.onboarding.jobs import PURGE_JOB_ID, register_onboarding_jobs


@pytest.fixture(autouse=True)
def _isolated_registry(monkeypatch):
    monkeypatch.setattr(scheduler, "_job_registry", {})
    monkeypatch.setattr(scheduler, "_scheduler", None)


class TestRegistry:
    def test_register_onboarding_jobs(self):
        register_onboarding_jobs()
        jobs = scheduler.list_registered_jobs()
        assert jobs == [{"job_id": PURGE_JOB_ID, "next_run_time": None}]

    @pytest.mark.asyncio
    async def test_trigger_unknown_job(self):
        with pytest.raises(ValueError, match="not found"):
            await scheduler.trigger_job_manually("missing")

    @pytest.mark.asyncio
    async def test_trigger_reports_result(self):
        job = AsyncMock(return_value=3)
        scheduler.register_job("count", job, IntervalTrigger(hours=1))

        result = await scheduler.trigger_job_manually("count")

        assert result["status"] == "success"
        assert result["result"] == 3
        job.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_trigger_reports_failure(self):
        job = AsyncMock(side_effect=RuntimeError("db down"))
        scheduler.register_job("broken", job, IntervalTrigger(hours=1))

        result = await scheduler.trigger_job_manually("broken")

        assert result["status"] == "error"
        assert "db down" in result["error"]


class TestPurgeJob:
    @pytest.mark.asyncio
    async def test_purge_job_uses_fresh_session(self, session_maker):
        with patch.object(jobs, "async_session_maker", session_maker):
            assert await jobs.purge_expired_invitations_job() == 0
