"""
Store-level tests for the review pipeline on SQLite.

These tests cover:
- The full submitted -> disbursed path for the Form1 Aid bursary
- Withdrawn applications leaving every listing
- The stage precondition and strict ordering against real rows
- Review queues and the detail view
"""

import pytest
from sqlalchemy import func, select

from bursary.core.exceptions import DuplicateApplicationError, StageMismatchError
from bursary.modules.applications import repository
from bursary.modules.applications import service as applications
from bursary.modules.applications.models import Application, ApplicationStage
from bursary.modules.applications.workflow import RoleCannotApproveError, StageMachine
from bursary.modules.bursaries import service as bursaries
from tests.factories import form_one_aid

STRICT = StageMachine(strict=True)


async def _reload(db, application_id) -> Application:
    """Re-read an application row, withdrawn or not, bypassing the identity map."""
    return await db.scalar(
        select(Application)
        .where(Application.id == application_id)
        .execution_options(populate_existing=True)
    )


class TestFullPipeline:
    """Form1 Aid: one student, four reviewers, five stages."""

    @pytest.mark.asyncio
    async def test_submitted_to_disbursed(self, db, make_admin, make_student):
        """Each reviewer sees the application in their queue and moves it one stage."""
        county = await make_admin("county")
        bursary = await bursaries.create_bursary(db, county, form_one_aid())
        assert bursary.amount_per_student == 5000

        student = await make_student()
        application = await applications.create_application(db, student, bursary.id)
        assert application.stage == ApplicationStage.SUBMITTED
        assert application.soft_delete is False

        expected = [
            ("ward", ApplicationStage.COUNTY),
            ("county", ApplicationStage.MINISTRY),
            ("finance-assistant", ApplicationStage.FINANCE),
            ("finance", ApplicationStage.DISBURSED),
        ]
        for role_name, stage in expected:
            reviewer = await make_admin(role_name)
            queue = await applications.list_review_queue(db, reviewer, STRICT)
            assert [row[0].id for row in queue] == [application.id]

            approved = await applications.approve_application(db, reviewer, application.id, STRICT)
            assert approved.stage == stage

        final = await repository.get_active(db, application.id)
        assert final.stage == ApplicationStage.DISBURSED

    @pytest.mark.asyncio
    async def test_default_mode_skips_ahead(self, db, make_admin, make_student):
        """Without strict ordering a finance approval jumps straight to disbursed."""
        county = await make_admin("county")
        bursary = await bursaries.create_bursary(db, county, form_one_aid())
        student = await make_student()
        application = await applications.create_application(db, student, bursary.id)

        finance = await make_admin("finance")
        approved = await applications.approve_application(
            db, finance, application.id, StageMachine(strict=False)
        )
        assert approved.stage == ApplicationStage.DISBURSED

    @pytest.mark.asyncio
    async def test_strict_mode_refuses_skip(self, db, make_admin, make_student):
        """Strict ordering refuses the jump and leaves the stage as it was."""
        county = await make_admin("county")
        bursary = await bursaries.create_bursary(db, county, form_one_aid())
        student = await make_student()
        application = await applications.create_application(db, student, bursary.id)
        application_id = application.id

        finance = await make_admin("finance")
        with pytest.raises(StageMismatchError):
            await applications.approve_application(db, finance, application_id, STRICT)

        unchanged = await _reload(db, application_id)
        assert unchanged.stage == ApplicationStage.SUBMITTED

    @pytest.mark.asyncio
    async def test_admin_role_cannot_approve(self, db, make_admin, make_student):
        """The admin role is not mapped in the pipeline."""
        county = await make_admin("county")
        bursary = await bursaries.create_bursary(db, county, form_one_aid())
        student = await make_student()
        application = await applications.create_application(db, student, bursary.id)

        admin = await make_admin("admin")
        with pytest.raises(RoleCannotApproveError):
            await applications.approve_application(db, admin, application.id)
        assert await applications.list_review_queue(db, admin) == []


class TestStagePrecondition:
    @pytest.mark.asyncio
    async def test_set_stage_requires_current(self, db, make_admin, make_student):
        """A write based on a stale read updates nothing."""
        county = await make_admin("county")
        bursary = await bursaries.create_bursary(db, county, form_one_aid())
        student = await make_student()
        application = await applications.create_application(db, student, bursary.id)

        first = await repository.set_stage(
            db, application.id, ApplicationStage.SUBMITTED, ApplicationStage.COUNTY
        )
        stale = await repository.set_stage(
            db, application.id, ApplicationStage.SUBMITTED, ApplicationStage.DISBURSED
        )
        await db.commit()

        assert (first, stale) == (1, 0)
        current = await repository.get_active(db, application.id)
        assert current.stage == ApplicationStage.COUNTY


class TestWithdrawal:
    """Withdrawn applications are invisible to every reader."""

    @pytest.mark.asyncio
    async def test_withdrawn_excluded_everywhere(self, db, make_admin, make_student):
        """Queues, listings, approval and detail all ignore a withdrawn row."""
        county = await make_admin("county")
        bursary = await bursaries.create_bursary(db, county, form_one_aid())
        student = await make_student()
        application = await applications.create_application(db, student, bursary.id)
        application_id, bursary_id = application.id, bursary.id

        assert await applications.withdraw_application(db, student, bursary_id) == 1

        ward = await make_admin("ward")
        assert await applications.list_review_queue(db, ward) == []
        assert await applications.list_all_applications(db) == []
        assert await applications.list_student_applications(db, student) == []
        with pytest.raises(applications.ApplicationNotFoundError):
            await applications.approve_application(db, ward, application_id)
        with pytest.raises(applications.ApplicationNotFoundError):
            await applications.get_application_detail(db, application_id)

        # The row keeps its stage and is only flagged
        row = await _reload(db, application_id)
        assert row.soft_delete is True
        assert row.stage == ApplicationStage.SUBMITTED

    @pytest.mark.asyncio
    async def test_withdraw_twice(self, db, make_admin, make_student):
        """Nothing active is left to withdraw the second time."""
        county = await make_admin("county")
        bursary = await bursaries.create_bursary(db, county, form_one_aid())
        student = await make_student()
        await applications.create_application(db, student, bursary.id)

        await applications.withdraw_application(db, student, bursary.id)
        with pytest.raises(applications.ApplicationNotFoundError):
            await applications.withdraw_application(db, student, bursary.id)

    @pytest.mark.asyncio
    async def test_withdraw_covers_every_active_row(self, db, make_admin, make_student):
        """Withdrawal is keyed by bursary, so duplicates go together."""
        county = await make_admin("county")
        bursary = await bursaries.create_bursary(db, county, form_one_aid())
        student = await make_student()
        await applications.create_application(db, student, bursary.id, reject_duplicates=False)
        await applications.create_application(db, student, bursary.id, reject_duplicates=False)

        assert await applications.withdraw_application(db, student, bursary.id) == 2

    @pytest.mark.asyncio
    async def test_reapply_after_withdrawal(self, db, make_admin, make_student):
        """A withdrawn application no longer counts as a duplicate."""
        county = await make_admin("county")
        bursary = await bursaries.create_bursary(db, county, form_one_aid())
        student = await make_student()
        bursary_id = bursary.id
        await applications.create_application(db, student, bursary_id)

        with pytest.raises(DuplicateApplicationError):
            await applications.create_application(db, student, bursary_id, reject_duplicates=True)

        await applications.withdraw_application(db, student, bursary_id)
        again = await applications.create_application(
            db, student, bursary_id, reject_duplicates=True
        )
        assert again.stage == ApplicationStage.SUBMITTED

        total = await db.scalar(select(func.count()).select_from(Application))
        assert total == 2


class TestRejection:
    @pytest.mark.asyncio
    async def test_reject_keeps_stage(self, db, make_admin, make_student):
        """Rejection records remarks only."""
        county = await make_admin("county")
        bursary = await bursaries.create_bursary(db, county, form_one_aid())
        student = await make_student()
        application = await applications.create_application(db, student, bursary.id)

        ward = await make_admin("ward")
        rejected = await applications.reject_application(
            db, ward, application.id, "Fee structure missing"
        )
        assert rejected.remarks == "Fee structure missing"
        assert rejected.stage == ApplicationStage.SUBMITTED


class TestDetail:
    @pytest.mark.asyncio
    async def test_detail_without_profile_sections(self, db, make_admin, make_student):
        """Missing profile sections come back as None."""
        county = await make_admin("county")
        bursary = await bursaries.create_bursary(db, county, form_one_aid())
        student = await make_student()
        application = await applications.create_application(db, student, bursary.id)

        found, found_bursary, found_student, personal, institution = (
            await applications.get_application_detail(db, application.id)
        )
        assert found.id == application.id
        assert found_bursary.name == "Form1 Aid"
        assert found_student.id == student.id
        assert personal is None
        assert institution is None
