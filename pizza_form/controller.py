"""Form controller: the seam between a rendering surface and the order form.

A surface forwards raw events into ``handle_change`` and ``handle_submit`` and
renders ``view`` (or subscribes to it). The controller keeps the state store,
the validation engine and the submission outcome consistent:

- name/size changes schedule a validation run; topping toggles do not
- a submit re-validates first and never contacts the endpoint with an invalid
  order
- only one submission may be pending at a time
- a successful submission resets the form; a failed one keeps it for a retry

Example::

    async with make_controller_from_config(FormConfig()) as controller:
        controller.handle_change(ChangeEvent(name="fullName", value="Alice Smith"))
        controller.handle_change(ChangeEvent(name="size", value="L"))
        await controller.settle()
        if controller.view.enabled:
            outcome = await controller.handle_submit()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pizza_form.catalog import ToppingCatalog
from pizza_form.client import OrderClient, OrderRequest, OrderSubmissionError
from pizza_form.model import FormEvent, FormState, OrderForm, Rejection
from pizza_form.schema import FULL_NAME, ValidationResult, validate_order
from pizza_form.store import FormStore
from pizza_form.validation import ValidationEngine, ValidationSnapshot, Validator

logger = logging.getLogger(__name__)


class SubmissionInProgress(Rejection):
    pass


class ChangeEvent(BaseModel):
    """A raw input event from the surface.

    For a checkbox, ``value`` is the topping id and ``checked`` its new state.
    """

    name: str
    value: str = ""
    is_checkbox: bool = False
    checked: bool = False


class SubmissionOutcome(BaseModel):
    """Result of the last submit; at most one message is non-empty."""

    model_config = ConfigDict(frozen=True)

    success: str = ""
    failure: str = ""

    @classmethod
    def succeeded(cls, message: str) -> SubmissionOutcome:
        return cls(success=message, failure="")

    @classmethod
    def failed(cls, message: str) -> SubmissionOutcome:
        return cls(success="", failure=message)

    @property
    def is_success(self) -> bool:
        return bool(self.success)


class FormView(BaseModel):
    """Everything a surface needs to render the form."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    full_name: str = Field(alias=FULL_NAME)
    size: str
    toppings: list[str]
    errors: dict[str, str]
    enabled: bool
    success: str
    failure: str
    submitting: bool


ViewListener = Callable[[FormView], None]


class FormController:
    def __init__(
        self,
        client: OrderClient,
        catalog: ToppingCatalog | None = None,
        validator: Validator = validate_order,
    ) -> None:
        self._client = client
        self._store = FormStore(catalog)
        self._engine = ValidationEngine(validator, on_result=self._on_validation)
        self._outcome = SubmissionOutcome()
        self._pending = False
        self._listeners: list[ViewListener] = []

    async def __aenter__(self) -> FormController:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> FormState:
        return self._store.state

    @property
    def catalog(self) -> ToppingCatalog:
        return self._store.catalog

    @property
    def validation(self) -> ValidationSnapshot:
        return self._engine.current

    @property
    def outcome(self) -> SubmissionOutcome:
        return self._outcome

    @property
    def submitting(self) -> bool:
        return self._pending

    @property
    def view(self) -> FormView:
        state = self._store.state
        snapshot = self._engine.current
        return FormView(
            full_name=state.full_name,
            size=state.size,
            toppings=sorted(state.toppings),
            errors=dict(snapshot.errors),
            enabled=snapshot.enabled,
            success=self._outcome.success,
            failure=self._outcome.failure,
            submitting=self._pending,
        )

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        """Call ``listener`` with a fresh view after every change.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Input handlers
    # ------------------------------------------------------------------

    def handle_change(self, event: ChangeEvent) -> list[FormEvent] | Rejection:
        """Apply one input event. Must be called from a running event loop."""
        if event.is_checkbox:
            result = self._store.toggle_topping(event.value, event.checked)
        else:
            result = self._store.set_field(event.name, event.value)
        if isinstance(result, Rejection):
            return result

        if any(OrderForm.triggers_validation(e) for e in result):
            self._engine.schedule(self._store.state)
        if result:
            self._notify()
        return result

    def set_field(self, name: str, value: str) -> list[FormEvent] | Rejection:
        return self.handle_change(ChangeEvent(name=name, value=value))

    def toggle_topping(
        self, topping_id: str, present: bool
    ) -> list[FormEvent] | Rejection:
        return self.handle_change(
            ChangeEvent(
                name="toppings", value=topping_id, is_checkbox=True, checked=present
            )
        )

    async def handle_submit(self) -> SubmissionOutcome | Rejection:
        """Submit the current order.

        Returns the new outcome, or ``SubmissionInProgress`` when another
        submission has not finished yet (the endpoint is not contacted again).
        """
        if self._pending:
            logger.warning("Submit ignored: an order is already being submitted")
            return SubmissionInProgress(msg="An order is already being submitted")

        self._pending = True
        try:
            self._notify()
            outcome = await self._submit(self._store.state)
        finally:
            self._pending = False
        self._outcome = outcome
        self._notify()
        return outcome

    async def settle(self) -> None:
        """Wait for every scheduled validation run to resolve."""
        await self._engine.settle()

    async def aclose(self) -> None:
        await self._client.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _submit(self, state: FormState) -> SubmissionOutcome:
        snapshot = await self._engine.validate_now(state)
        if not snapshot.enabled:
            message = ValidationResult(errors=snapshot.errors).first_error()
            logger.warning("Refusing to submit an invalid order: %s", snapshot.errors)
            return SubmissionOutcome.failed(message)

        order = OrderRequest.from_state(state)
        logger.info(
            "Submitting order: size=%s toppings=%s", order.size, order.toppings
        )
        try:
            receipt = await self._client.submit_order(order)
        except OrderSubmissionError as exc:
            logger.warning(
                "Order submission failed (status=%s): %s", exc.status_code, exc.message
            )
            return SubmissionOutcome.failed(exc.message)

        logger.info("Order accepted (status=%d): %s", receipt.status_code, receipt.message)
        self._store.reset()
        self._engine.clear()
        return SubmissionOutcome.succeeded(receipt.message)

    def _on_validation(self, snapshot: ValidationSnapshot) -> None:
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        view = self.view
        for listener in list(self._listeners):
            listener(view)
