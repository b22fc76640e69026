"""
Unit tests for pizza_form.model and pizza_form.catalog modules.
"""

from typing import Literal

import pytest
from pydantic import ValidationError

from pizza_form.catalog import DEFAULT_TOPPINGS, Topping, ToppingCatalog, default_catalog
from pizza_form.model import (
    EventBase,
    EvFieldSet,
    EvFormReset,
    EvToppingAdded,
    EvToppingRemoved,
    FormState,
    OrderForm,
    Rejection,
    ResetForm,
    SetField,
    ToggleTopping,
    UnknownField,
    UnknownTopping,
)


class TestEventBase:
    """Tests for EventBase abstract class."""

    def test_event_base_requires_type_override(self):
        with pytest.raises(TypeError, match="must override `type` with a Literal"):
            class InvalidEvent(EventBase):
                pass

    def test_valid_event_subclass(self):
        class ValidEvent(EventBase):
            type: Literal["valid_event"] = "valid_event"
            data: str

        event = ValidEvent(data="test")
        assert event.type == "valid_event"
        assert event.data == "test"

    def test_events_are_immutable(self):
        event = EvFieldSet(name="size", value="M")
        with pytest.raises(ValidationError):
            event.value = "L"


class TestFormState:
    """Tests for FormState."""

    def test_defaults_are_empty(self):
        state = FormState()
        assert state.full_name == ""
        assert state.size == ""
        assert state.toppings == frozenset()

    def test_field_value(self):
        state = FormState(full_name="Alice", size="M")
        assert state.field_value("fullName") == "Alice"
        assert state.field_value("size") == "M"
        with pytest.raises(KeyError):
            state.field_value("toppings")

    def test_state_is_frozen(self):
        with pytest.raises(ValidationError):
            FormState().size = "L"


class TestDecide:
    """Tests for OrderForm.decide."""

    def test_set_field(self):
        events = OrderForm.decide(
            FormState(), SetField(name="fullName", value="Alice"), default_catalog()
        )
        assert events == [EvFieldSet(name="fullName", value="Alice")]

    def test_set_unknown_field_is_rejected(self):
        result = OrderForm.decide(
            FormState(), SetField(name="toppings", value="1"), default_catalog()
        )
        assert isinstance(result, UnknownField)
        assert "toppings" in result.msg

    def test_add_topping(self):
        events = OrderForm.decide(
            FormState(), ToggleTopping(topping_id="2", present=True), default_catalog()
        )
        assert events == [EvToppingAdded(topping_id="2")]

    def test_add_present_topping_is_noop(self):
        state = FormState(toppings=frozenset({"2"}))
        events = OrderForm.decide(
            state, ToggleTopping(topping_id="2", present=True), default_catalog()
        )
        assert events == []

    def test_remove_topping(self):
        state = FormState(toppings=frozenset({"2"}))
        events = OrderForm.decide(
            state, ToggleTopping(topping_id="2", present=False), default_catalog()
        )
        assert events == [EvToppingRemoved(topping_id="2")]

    def test_remove_absent_topping_is_noop(self):
        events = OrderForm.decide(
            FormState(), ToggleTopping(topping_id="2", present=False), default_catalog()
        )
        assert events == []

    def test_unknown_topping_is_rejected(self):
        result = OrderForm.decide(
            FormState(), ToggleTopping(topping_id="99", present=True), default_catalog()
        )
        assert isinstance(result, UnknownTopping)

    def test_reset(self):
        events = OrderForm.decide(FormState(full_name="x"), ResetForm(), default_catalog())
        assert events == [EvFormReset()]


class TestEvolve:
    """Tests for OrderForm.evolve and decide_and_evolve."""

    def test_evolve_sequence(self):
        state = OrderForm.evolve_(
            FormState(),
            [
                EvFieldSet(name="fullName", value="Alice"),
                EvFieldSet(name="size", value="L"),
                EvToppingAdded(topping_id="1"),
                EvToppingAdded(topping_id="3"),
                EvToppingRemoved(topping_id="1"),
            ],
        )
        assert state == FormState(full_name="Alice", size="L", toppings=frozenset({"3"}))

    def test_reset_restores_defaults(self):
        state = FormState(full_name="Alice", size="L", toppings=frozenset({"3"}))
        assert OrderForm.evolve(state, EvFormReset()) == FormState()

    def test_evolve_does_not_mutate_input(self):
        state = FormState()
        OrderForm.evolve(state, EvFieldSet(name="size", value="S"))
        assert state.size == ""

    def test_decide_and_evolve_returns_rejection(self):
        result = OrderForm.decide_and_evolve(
            FormState(), SetField(name="email", value="a@b"), default_catalog()
        )
        assert isinstance(result, Rejection)

    def test_only_field_changes_trigger_validation(self):
        assert OrderForm.triggers_validation(EvFieldSet(name="size", value="S"))
        assert not OrderForm.triggers_validation(EvToppingAdded(topping_id="1"))
        assert not OrderForm.triggers_validation(EvToppingRemoved(topping_id="1"))
        assert not OrderForm.triggers_validation(EvFormReset())


class TestToppingCatalog:
    """Tests for ToppingCatalog."""

    def test_default_catalog(self):
        catalog = default_catalog()
        assert len(catalog) == 5
        assert catalog.ids == frozenset({"1", "2", "3", "4", "5"})
        assert [t.label for t in catalog] == [
            "Pepperoni",
            "Green Peppers",
            "Pineapple",
            "Mushrooms",
            "Ham",
        ]

    def test_lookup(self):
        catalog = ToppingCatalog(DEFAULT_TOPPINGS)
        assert "3" in catalog
        assert "6" not in catalog
        assert catalog.get("3") == Topping(id="3", label="Pineapple")
        assert catalog.get("6") is None

    def test_labels_for_uses_catalog_order(self):
        assert default_catalog().labels_for(["5", "1", "nope"]) == ["Pepperoni", "Ham"]

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError, match="Duplicate topping id"):
            ToppingCatalog([Topping(id="1", label="A"), Topping(id="1", label="B")])

    def test_topping_is_frozen(self):
        with pytest.raises(ValidationError):
            DEFAULT_TOPPINGS[0].label = "Salami"
