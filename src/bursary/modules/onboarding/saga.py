"""
Compensating Actions

A ``Saga`` collects an undo action for every step that has already been
committed. If the block raises, the undo actions run newest first and the
original exception propagates unchanged.

Usage:
    async with Saga("register_student") as saga:
        student = await create_student(...)          # committed
        saga.on_rollback("delete student", partial(delete_student, student.id))
        await send_welcome_email(student)            # may raise

Undo actions that fail are logged and attached to the original exception
as notes; they never replace it.
"""

import logging
from collections.abc import Awaitable, Callable
from types import TracebackType

logger = logging.getLogger(__name__)

Compensation = Callable[[], Awaitable[object]]


class Saga:
    """Async context manager running registered compensations on failure."""

    def __init__(self, name: str):
        self.name = name
        self._compensations: list[tuple[str, Compensation]] = []

    def on_rollback(self, label: str, action: Compensation) -> None:
        """Register the undo action for a step that has just committed."""
        self._compensations.append((label, action))

    @property
    def pending(self) -> list[str]:
        return [label for label, _ in self._compensations]

    async def compensate(self) -> list[tuple[str, BaseException]]:
        """Run undo actions newest first. Returns the ones that failed."""
        failures: list[tuple[str, BaseException]] = []
        while self._compensations:
            label, action = self._compensations.pop()
            try:
                await action()
                logger.info(f"Saga {self.name}: compensated '{label}'")
            except Exception as e:
                logger.exception(f"Saga {self.name}: compensation '{label}' failed")
                failures.append((label, e))
        return failures

    async def __aenter__(self) -> "Saga":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc is None:
            self._compensations.clear()
            return False

        logger.warning(f"Saga {self.name} failed ({exc_type.__name__}), rolling back")
        for label, error in await self.compensate():
            exc.add_note(f"compensation '{label}' failed: {error!r}")
        return False
