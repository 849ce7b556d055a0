"""
Application Stage Machine

Pure transition logic for ``Application.stage``. Nothing here touches the
database; the service applies the result with a conditional UPDATE.

Pipeline (forward order):
    submitted -> county -> ministry -> finance -> disbursed

An approval moves an application to the stage mapped from the acting
admin's role name:

    ward              -> county
    county            -> ministry
    finance-assistant -> finance
    finance           -> disbursed

Any other role may not approve. Role names are matched exactly; role
levels play no part here (see ``roles.authorization`` for level checks).

Each reviewer's queue is the stage just before their target, so a ward
reviewer works on ``submitted`` applications and a county officer on
``county`` ones.

Ordering:
- Default: the target is applied whatever the current stage is, so a
  finance officer may approve an application still at ``submitted``.
- Strict (``STRICT_STAGE_ORDER=true``): the current stage must equal the
  target's predecessor, otherwise ``StageMismatchError``.

Withdrawal is not a stage. It is the orthogonal ``soft_delete`` flag.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from bursary.core.config import settings
from bursary.core.exceptions import ForbiddenError, StageMismatchError
from bursary.modules.applications.models import ApplicationStage

STAGE_ORDER: tuple[ApplicationStage, ...] = tuple(ApplicationStage)

APPROVAL_TRANSITIONS: Mapping[str, ApplicationStage] = MappingProxyType(
    {
        "ward": ApplicationStage.COUNTY,
        "county": ApplicationStage.MINISTRY,
        "finance-assistant": ApplicationStage.FINANCE,
        "finance": ApplicationStage.DISBURSED,
    }
)


def predecessor(stage: ApplicationStage) -> ApplicationStage | None:
    """The stage immediately before ``stage``, or None for the first one."""
    index = STAGE_ORDER.index(stage)
    return STAGE_ORDER[index - 1] if index > 0 else None


class RoleCannotApproveError(ForbiddenError):
    def __init__(self, role_name: str):
        super().__init__(
            f"Role '{role_name}' cannot approve or reject applications.",
            "ROLE_CANNOT_APPROVE",
        )
        self.role_name = role_name


@dataclass(frozen=True)
class StageMachine:
    """
    Role-driven stage transitions.

    Attributes:
        transitions: Acting role name to the stage its approval produces
        strict: Require the current stage to be the target's predecessor
    """

    transitions: Mapping[str, ApplicationStage] = field(
        default_factory=lambda: APPROVAL_TRANSITIONS
    )
    strict: bool = False

    def can_approve(self, acting_role: str) -> bool:
        return acting_role in self.transitions

    def target_for(self, acting_role: str) -> ApplicationStage:
        """
        Raises:
            RoleCannotApproveError: The role has no mapped target
        """
        try:
            return self.transitions[acting_role]
        except KeyError:
            raise RoleCannotApproveError(acting_role) from None

    def queue_for(self, acting_role: str) -> ApplicationStage | None:
        """Stage of the applications awaiting this role, None if it reviews nothing."""
        target = self.transitions.get(acting_role)
        return predecessor(target) if target is not None else None

    def transition(self, current: ApplicationStage, acting_role: str) -> ApplicationStage:
        """
        Compute the stage an approval by ``acting_role`` produces.

        Args:
            current: The application's stage as read
            acting_role: Exact role name of the approving admin

        Returns:
            The new stage

        Raises:
            RoleCannotApproveError: ``acting_role`` may not approve
            StageMismatchError: Strict mode and ``current`` is not the
                target's predecessor
        """
        target = self.target_for(acting_role)
        if self.strict:
            expected = predecessor(target)
            if current != expected:
                raise StageMismatchError(current.value, expected.value if expected else None)
        return target


def default_stage_machine() -> StageMachine:
    return StageMachine(strict=settings.strict_stage_order)
