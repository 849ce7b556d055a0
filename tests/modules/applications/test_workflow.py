"""
Unit tests for the application stage machine.

These tests focus on the role-to-stage mapping and ordering modes.
"""

import pytest

from bursary.core.exceptions import ForbiddenError, StageMismatchError
from bursary.modules.applications.models import ApplicationStage
from bursary.modules.applications.workflow import (
    APPROVAL_TRANSITIONS,
    STAGE_ORDER,
    RoleCannotApproveError,
    StageMachine,
    predecessor,
)


class TestStageOrder:
    def test_forward_order(self):
        assert STAGE_ORDER == (
            ApplicationStage.SUBMITTED,
            ApplicationStage.COUNTY,
            ApplicationStage.MINISTRY,
            ApplicationStage.FINANCE,
            ApplicationStage.DISBURSED,
        )

    def test_predecessor(self):
        assert predecessor(ApplicationStage.SUBMITTED) is None
        assert predecessor(ApplicationStage.COUNTY) == ApplicationStage.SUBMITTED
        assert predecessor(ApplicationStage.DISBURSED) == ApplicationStage.FINANCE


class TestTransitions:
    """Tests for the role-to-stage mapping."""

    @pytest.mark.parametrize(
        ("role", "target"),
        [
            ("ward", ApplicationStage.COUNTY),
            ("county", ApplicationStage.MINISTRY),
            ("finance-assistant", ApplicationStage.FINANCE),
            ("finance", ApplicationStage.DISBURSED),
        ],
    )
    def test_mapped_roles(self, role, target):
        machine = StageMachine()
        assert machine.transition(ApplicationStage.SUBMITTED, role) == target
        assert machine.can_approve(role)

    @pytest.mark.parametrize("role", ["admin", "student", "Ward", "treasurer"])
    def test_unmapped_roles_cannot_approve(self, role):
        machine = StageMachine()
        with pytest.raises(RoleCannotApproveError) as exc_info:
            machine.transition(ApplicationStage.SUBMITTED, role)
        assert isinstance(exc_info.value, ForbiddenError)
        assert exc_info.value.status_code == 403
        assert not machine.can_approve(role)

    def test_mapping_is_read_only(self):
        with pytest.raises(TypeError):
            APPROVAL_TRANSITIONS["admin"] = ApplicationStage.DISBURSED  # type: ignore[index]


class TestOrdering:
    """Default mode ignores the current stage; strict mode enforces it."""

    def test_default_ignores_current_stage(self):
        machine = StageMachine(strict=False)
        assert (
            machine.transition(ApplicationStage.SUBMITTED, "finance")
            == ApplicationStage.DISBURSED
        )
        # Going backwards is equally allowed
        assert machine.transition(ApplicationStage.FINANCE, "ward") == ApplicationStage.COUNTY

    def test_strict_accepts_predecessor(self):
        machine = StageMachine(strict=True)
        assert machine.transition(ApplicationStage.MINISTRY, "finance-assistant") == (
            ApplicationStage.FINANCE
        )

    def test_strict_rejects_out_of_order(self):
        machine = StageMachine(strict=True)
        with pytest.raises(StageMismatchError) as exc_info:
            machine.transition(ApplicationStage.SUBMITTED, "finance")
        assert exc_info.value.current == "submitted"
        assert exc_info.value.expected == "finance"
        assert exc_info.value.status_code == 409


class TestQueues:
    """Each reviewer's queue is the stage before their target."""

    @pytest.mark.parametrize(
        ("role", "stage"),
        [
            ("ward", ApplicationStage.SUBMITTED),
            ("county", ApplicationStage.COUNTY),
            ("finance-assistant", ApplicationStage.MINISTRY),
            ("finance", ApplicationStage.FINANCE),
        ],
    )
    def test_queue_for_mapped_roles(self, role, stage):
        assert StageMachine().queue_for(role) == stage

    def test_unmapped_role_has_no_queue(self):
        assert StageMachine().queue_for("admin") is None
