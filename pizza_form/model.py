from abc import ABC
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from pizza_form.catalog import ToppingCatalog
from pizza_form.schema import FULL_NAME, SIZE, VALIDATED_FIELDS


class EventBase(BaseModel, ABC):
    model_config = ConfigDict(frozen=True)

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)

        if cls is EventBase or ABC in cls.__bases__:
            return

        # Every concrete event must pin its discriminator.
        annotation = cls.__annotations__.get("type")
        if annotation is None:
            raise TypeError(
                f"{cls.__name__} must override `type` with a Literal[...] default."
            )


class FormState(BaseModel):
    """Current values of the order form. Replaced, never mutated."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    full_name: str = Field(default="", alias=FULL_NAME)
    size: str = ""
    toppings: frozenset[str] = Field(default_factory=frozenset)

    def field_value(self, name: str) -> str:
        if name == FULL_NAME:
            return self.full_name
        if name == SIZE:
            return self.size
        raise KeyError(name)


class Rejection(BaseModel):
    msg: str = ""


class UnknownField(Rejection):
    pass


class UnknownTopping(Rejection):
    pass


# Commands


class SetField(BaseModel):
    name: str
    value: str


class ToggleTopping(BaseModel):
    topping_id: str
    present: bool


class ResetForm(BaseModel):
    pass


Command = Union[SetField, ToggleTopping, ResetForm]


# Events


class EvFieldSet(EventBase):
    type: Literal["field_set"] = "field_set"
    name: str
    value: str


class EvToppingAdded(EventBase):
    type: Literal["topping_added"] = "topping_added"
    topping_id: str


class EvToppingRemoved(EventBase):
    type: Literal["topping_removed"] = "topping_removed"
    topping_id: str


class EvFormReset(EventBase):
    type: Literal["form_reset"] = "form_reset"


FormEvent = Union[EvFieldSet, EvToppingAdded, EvToppingRemoved, EvFormReset]


class OrderForm:
    """Pure decide/evolve rules for the form state.

    ``decide`` turns a command into events (or a ``Rejection``) without
    touching state; ``evolve`` folds one event into a new state. An empty event
    list means the command was accepted but changes nothing.
    """

    @staticmethod
    def decide(
        state: FormState, cmd: Command, catalog: ToppingCatalog
    ) -> list[FormEvent] | Rejection:
        if isinstance(cmd, SetField):
            if cmd.name not in VALIDATED_FIELDS:
                return UnknownField(msg=f"Unknown form field: {cmd.name!r}")
            return [EvFieldSet(name=cmd.name, value=cmd.value)]

        if isinstance(cmd, ToggleTopping):
            if cmd.topping_id not in catalog:
                return UnknownTopping(msg=f"Unknown topping id: {cmd.topping_id!r}")
            selected = cmd.topping_id in state.toppings
            if cmd.present and not selected:
                return [EvToppingAdded(topping_id=cmd.topping_id)]
            if not cmd.present and selected:
                return [EvToppingRemoved(topping_id=cmd.topping_id)]
            return []

        if isinstance(cmd, ResetForm):
            return [EvFormReset()]

        return Rejection(msg=f"Unsupported command: {type(cmd).__name__}")

    @staticmethod
    def evolve(state: FormState, event: FormEvent) -> FormState:
        if isinstance(event, EvFieldSet):
            key = "full_name" if event.name == FULL_NAME else "size"
            return state.model_copy(update={key: event.value})
        if isinstance(event, EvToppingAdded):
            return state.model_copy(
                update={"toppings": state.toppings | {event.topping_id}}
            )
        if isinstance(event, EvToppingRemoved):
            return state.model_copy(
                update={"toppings": state.toppings - {event.topping_id}}
            )
        if isinstance(event, EvFormReset):
            return FormState()
        return state

    @classmethod
    def evolve_(cls, state: FormState, events: list[FormEvent]) -> FormState:
        for e in events:
            state = cls.evolve(state, e)
        return state

    @classmethod
    def decide_and_evolve(
        cls, state: FormState, cmd: Command, catalog: ToppingCatalog
    ) -> Rejection | tuple[FormState, list[FormEvent]]:
        d = cls.decide(state, cmd, catalog)
        if isinstance(d, Rejection):
            return d
        return cls.evolve_(state, d), d

    @staticmethod
    def triggers_validation(event: FormEvent) -> bool:
        """Only name and size changes are in the schema's scope."""
        return isinstance(event, EvFieldSet)
