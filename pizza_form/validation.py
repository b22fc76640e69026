"""Validation engine for the order form.

Each relevant state change schedules one validation run as an ``asyncio``
task. A run evaluates the schema against an immutable snapshot of the fields
and produces a ``ValidationSnapshot`` holding both the per-field error map and
the enablement flag, so the two can never disagree.

Runs are numbered. When a run resolves after a newer one was requested, its
result is dropped rather than applied, so the published snapshot always
belongs to the latest request. Superseded runs are not cancelled. A run whose
validator raises is logged and dropped.

A pristine form (at start and after a reset) publishes no errors. Blank fields
are not validated until the user first edits one; only the disabled submit
reflects that they are empty.

Example::

    engine = ValidationEngine(on_result=render)
    engine.schedule(store.state)
    await engine.settle()
    engine.current.enabled
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field

from pizza_form.model import FormState
from pizza_form.schema import (
    VALIDATED_FIELDS,
    ValidationResult,
    empty_errors,
    validate_order,
)

logger = logging.getLogger(__name__)

Validator = Callable[[str, str], "ValidationResult | Awaitable[ValidationResult]"]


class ValidationSnapshot(BaseModel):
    """Errors and enablement computed from one state snapshot."""

    model_config = ConfigDict(frozen=True)

    sequence: int = 0
    errors: dict[str, str] = Field(default_factory=empty_errors)
    enabled: bool = False

    @classmethod
    def pristine(cls, sequence: int = 0) -> ValidationSnapshot:
        """Untouched form: nothing to complain about yet, nothing to submit."""
        return cls(sequence=sequence, errors=empty_errors(), enabled=False)

    @classmethod
    def from_result(cls, sequence: int, result: ValidationResult) -> ValidationSnapshot:
        errors = {name: result.errors.get(name, "") for name in VALIDATED_FIELDS}
        # Enablement is read off the same error map the surface shows.
        return cls(sequence=sequence, errors=errors, enabled=not any(errors.values()))


class ValidationEngine:
    def __init__(
        self,
        validator: Validator = validate_order,
        on_result: Callable[[ValidationSnapshot], None] | None = None,
    ) -> None:
        self._validator = validator
        self._on_result = on_result
        self._requested = 0
        self._current = ValidationSnapshot.pristine()
        self._tasks: set[asyncio.Task] = set()

    @property
    def current(self) -> ValidationSnapshot:
        return self._current

    @property
    def latest_sequence(self) -> int:
        return self._requested

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def _next_sequence(self) -> int:
        self._requested += 1
        return self._requested

    def schedule(self, state: FormState) -> int:
        """Start a background run for ``state``; returns its sequence number.

        Must be called from a running event loop.
        """
        sequence = self._next_sequence()
        task = asyncio.create_task(
            self._run(sequence, state.full_name, state.size),
            name=f"form-validation-{sequence}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return sequence

    async def evaluate(self, full_name: str, size: str) -> ValidationResult:
        result = self._validator(full_name, size)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def validate_now(self, state: FormState) -> ValidationSnapshot:
        """Validate ``state`` inline, publish the result and return it.

        Supersedes every run still in flight.
        """
        sequence = self._next_sequence()
        result = await self.evaluate(state.full_name, state.size)
        snapshot = ValidationSnapshot.from_result(sequence, result)
        self._apply(snapshot)
        return snapshot

    def clear(self) -> ValidationSnapshot:
        """Publish a pristine snapshot and supersede every run in flight."""
        snapshot = ValidationSnapshot.pristine(self._next_sequence())
        self._apply(snapshot)
        return snapshot

    async def settle(self) -> None:
        """Wait until no validation run is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _run(self, sequence: int, full_name: str, size: str) -> None:
        try:
            result = await self.evaluate(full_name, size)
        except Exception:
            logger.exception("Validation run %d failed; result dropped", sequence)
            return
        self._apply(ValidationSnapshot.from_result(sequence, result))

    def _apply(self, snapshot: ValidationSnapshot) -> bool:
        if snapshot.sequence < self._requested:
            logger.debug(
                "Discarding stale validation result %d (latest is %d)",
                snapshot.sequence,
                self._requested,
            )
            return False
        self._current = snapshot
        logger.debug(
            "Validation %d applied: enabled=%s errors=%s",
            snapshot.sequence,
            snapshot.enabled,
            snapshot.errors,
        )
        if self._on_result is not None:
            self._on_result(snapshot)
        return True
