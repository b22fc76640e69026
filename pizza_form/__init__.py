"""
pizza_form - order form controller

Keeps the order form's field values, per-field validation errors and submit
enablement consistent as the user types, and relays submissions to the remote
order endpoint.
"""

__version__ = "0.1.0"

# Catalog and schema
from pizza_form.catalog import DEFAULT_TOPPINGS, Topping, ToppingCatalog, default_catalog
from pizza_form.schema import (
    FULL_NAME_TOO_LONG,
    FULL_NAME_TOO_SHORT,
    SIZE_INCORRECT,
    OrderSchema,
    ValidationResult,
    is_order_valid,
    validate_order,
)

# State
from pizza_form.model import (
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
from pizza_form.store import FormStore

# Validation
from pizza_form.validation import ValidationEngine, ValidationSnapshot

# Submission
from pizza_form.client import (
    OrderClient,
    OrderReceipt,
    OrderRequest,
    OrderSubmissionError,
)
from pizza_form.controller import (
    ChangeEvent,
    FormController,
    FormView,
    SubmissionInProgress,
    SubmissionOutcome,
)

# Configuration
from pizza_form.config import FormConfig, load_form_toml, make_controller_from_config

__all__ = [
    "__version__",
    # Catalog and schema
    "DEFAULT_TOPPINGS",
    "Topping",
    "ToppingCatalog",
    "default_catalog",
    "FULL_NAME_TOO_LONG",
    "FULL_NAME_TOO_SHORT",
    "SIZE_INCORRECT",
    "OrderSchema",
    "ValidationResult",
    "is_order_valid",
    "validate_order",
    # State
    "EvFieldSet",
    "EvFormReset",
    "EvToppingAdded",
    "EvToppingRemoved",
    "FormState",
    "OrderForm",
    "Rejection",
    "ResetForm",
    "SetField",
    "ToggleTopping",
    "UnknownField",
    "UnknownTopping",
    "FormStore",
    # Validation
    "ValidationEngine",
    "ValidationSnapshot",
    # Submission
    "OrderClient",
    "OrderReceipt",
    "OrderRequest",
    "OrderSubmissionError",
    "ChangeEvent",
    "FormController",
    "FormView",
    "SubmissionInProgress",
    "SubmissionOutcome",
    # Configuration
    "FormConfig",
    "load_form_toml",
    "make_controller_from_config",
]
