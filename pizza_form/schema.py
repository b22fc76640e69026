"""Validation schema for the order form.

Only ``fullName`` and ``size`` are validated; toppings are constrained by the
catalog instead. Validation never stops at the first problem: every field is
checked and each offending field gets exactly one message.

Example::

    from pizza_form.schema import validate_order

    result = validate_order("Al", "M")
    if not result:
        print(result.errors)
        # {'fullName': 'full name must be at least 3 characters', 'size': ''}
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

FULL_NAME = "fullName"
SIZE = "size"
VALIDATED_FIELDS: tuple[str, str] = (FULL_NAME, SIZE)

FULL_NAME_MIN_LENGTH = 3
FULL_NAME_MAX_LENGTH = 20
SIZES: tuple[str, ...] = ("S", "M", "L")

FULL_NAME_TOO_SHORT = "full name must be at least 3 characters"
FULL_NAME_TOO_LONG = "full name must be at most 20 characters"
SIZE_INCORRECT = "size must be S or M or L"

# pydantic reports the alias or the attribute name depending on how the model
# was populated; both map onto the wire name.
_LOC_TO_FIELD = {
    "fullName": FULL_NAME,
    "full_name": FULL_NAME,
    "size": SIZE,
}


class OrderSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    full_name: str = Field(alias=FULL_NAME)
    size: str

    @field_validator("full_name")
    @classmethod
    def _check_full_name(cls, v: str) -> str:
        trimmed = v.strip()
        if len(trimmed) < FULL_NAME_MIN_LENGTH:
            raise PydanticCustomError("full_name_too_short", FULL_NAME_TOO_SHORT)
        if len(trimmed) > FULL_NAME_MAX_LENGTH:
            raise PydanticCustomError("full_name_too_long", FULL_NAME_TOO_LONG)
        return trimmed

    @field_validator("size")
    @classmethod
    def _check_size(cls, v: str) -> str:
        if v not in SIZES:
            raise PydanticCustomError("size_incorrect", SIZE_INCORRECT)
        return v


def empty_errors() -> dict[str, str]:
    return {name: "" for name in VALIDATED_FIELDS}


class ValidationResult(BaseModel):
    """Outcome of validating ``fullName`` and ``size``.

    ``errors`` always holds both keys; an empty string means the field passed.
    The result is falsy when any field failed.
    """

    model_config = ConfigDict(frozen=True)

    errors: dict[str, str] = Field(default_factory=empty_errors)

    @property
    def is_valid(self) -> bool:
        return not any(self.errors.values())

    def __bool__(self) -> bool:
        return self.is_valid

    def first_error(self) -> str:
        """First non-empty message in field order, or ``""``."""
        for name in VALIDATED_FIELDS:
            if self.errors.get(name):
                return self.errors[name]
        return ""


def validate_order(full_name: str, size: str) -> ValidationResult:
    """Validate both fields in one pass and collect one message per field."""
    errors = empty_errors()
    try:
        OrderSchema.model_validate({FULL_NAME: full_name, SIZE: size})
    except ValidationError as exc:
        for err in exc.errors():
            field = _LOC_TO_FIELD.get(str(err["loc"][0])) if err["loc"] else None
            # First message per field wins; the validators only raise one each.
            if field is not None and not errors[field]:
                errors[field] = err["msg"]
    return ValidationResult(errors=errors)


def is_order_valid(full_name: str, size: str) -> bool:
    return validate_order(full_name, size).is_valid
