"""In-memory owner of the form state.

``FormStore`` is the only place a live ``FormState`` is kept. Callers send it
commands (directly through ``process`` or via the shorthand methods) and get
back the events that were applied, or a ``Rejection``. Snapshots handed out by
``state`` are immutable, so nothing outside the store can alias and mutate the
current values.
"""

import logging

from pizza_form.catalog import ToppingCatalog, default_catalog
from pizza_form.model import (
    Command,
    FormEvent,
    FormState,
    OrderForm,
    Rejection,
    ResetForm,
    SetField,
    ToggleTopping,
)

logger = logging.getLogger(__name__)


class FormStore:
    def __init__(self, catalog: ToppingCatalog | None = None) -> None:
        self._catalog = catalog if catalog is not None else default_catalog()
        self._state = FormState()
        self._version = 0

    @property
    def catalog(self) -> ToppingCatalog:
        return self._catalog

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def version(self) -> int:
        """Number of events applied since construction."""
        return self._version

    def process(self, cmd: Command) -> list[FormEvent] | Rejection:
        result = OrderForm.decide_and_evolve(self._state, cmd, self._catalog)
        if isinstance(result, Rejection):
            logger.warning("Form command %s rejected: %s", type(cmd).__name__, result.msg)
            return result
        new_state, events = result
        if events:
            self._state = new_state
            self._version += len(events)
            logger.debug(
                "Applied %d event(s) for %s, version=%d",
                len(events),
                type(cmd).__name__,
                self._version,
            )
        return events

    def set_field(self, name: str, value: str) -> list[FormEvent] | Rejection:
        return self.process(SetField(name=name, value=value))

    def toggle_topping(
        self, topping_id: str, present: bool
    ) -> list[FormEvent] | Rejection:
        return self.process(ToggleTopping(topping_id=topping_id, present=present))

    def reset(self) -> list[FormEvent] | Rejection:
        return self.process(ResetForm())
