"""
Unit tests for pizza_form.schema module.
"""

import pytest

from pizza_form.schema import (
    FULL_NAME_TOO_LONG,
    FULL_NAME_TOO_SHORT,
    SIZE_INCORRECT,
    OrderSchema,
    ValidationResult,
    is_order_valid,
    validate_order,
)


class TestValidateOrder:
    """Tests for validate_order."""

    @pytest.mark.parametrize("full_name", ["Bob", "Alice Smith", "A" * 20, "  Ann  "])
    @pytest.mark.parametrize("size", ["S", "M", "L"])
    def test_valid_input_has_no_errors(self, full_name, size):
        result = validate_order(full_name, size)
        assert result.is_valid
        assert result.errors == {"fullName": "", "size": ""}

    @pytest.mark.parametrize("full_name", ["", "A", "Al", "  Al   ", "     "])
    def test_short_name(self, full_name):
        result = validate_order(full_name, "M")
        assert not result
        assert result.errors["fullName"] == FULL_NAME_TOO_SHORT
        assert result.errors["size"] == ""

    def test_long_name(self):
        result = validate_order("ThisNameIsWayTooLongToBeValid", "S")
        assert not result
        assert result.errors["fullName"] == FULL_NAME_TOO_LONG

    def test_name_length_is_measured_after_trimming(self):
        padded = "   " + "B" * 20 + "   "
        assert validate_order(padded, "L").is_valid

    @pytest.mark.parametrize("size", ["", "X", "s", "XL", " M"])
    def test_bad_size_reported_regardless_of_name(self, size):
        result = validate_order("Alice Smith", size)
        assert result.errors["size"] == SIZE_INCORRECT
        assert result.errors["fullName"] == ""

    def test_both_fields_reported_in_one_pass(self):
        result = validate_order("A", "X")
        assert result.errors == {
            "fullName": FULL_NAME_TOO_SHORT,
            "size": SIZE_INCORRECT,
        }

    def test_error_keys_are_closed_set(self):
        assert set(validate_order("", "").errors) == {"fullName", "size"}

    def test_is_order_valid(self):
        assert is_order_valid("Alice", "S") is True
        assert is_order_valid("Al", "S") is False


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_default_is_valid(self):
        result = ValidationResult()
        assert result.is_valid
        assert bool(result) is True
        assert result.first_error() == ""

    def test_first_error_follows_field_order(self):
        result = validate_order("", "")
        assert result.first_error() == FULL_NAME_TOO_SHORT

        result = validate_order("Alice", "")
        assert result.first_error() == SIZE_INCORRECT


class TestOrderSchema:
    """Tests for the pydantic model behind the validation."""

    def test_accepts_alias_and_trims(self):
        order = OrderSchema.model_validate({"fullName": "  Alice  ", "size": "M"})
        assert order.full_name == "Alice"
        assert order.size == "M"

    def test_accepts_field_name(self):
        order = OrderSchema(full_name="Alice", size="S")
        assert order.full_name == "Alice"
