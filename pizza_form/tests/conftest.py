"""
Pytest configuration and shared fixtures for pizza_form tests.
"""

from typing import AsyncGenerator

import pytest

from pizza_form.catalog import Topping, ToppingCatalog
from pizza_form.controller import FormController
from pizza_form.store import FormStore
from pizza_form.testing import FormTestHarness, OrderEndpointStub

PIZZA_FORM_ENV_VARS = (
    "PIZZA_FORM_CONFIG",
    "PIZZA_FORM_ENDPOINT_URL",
    "PIZZA_FORM_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep a developer's PIZZA_FORM_* settings out of the tests."""
    for name in PIZZA_FORM_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def small_catalog() -> ToppingCatalog:
    return ToppingCatalog(
        [
            Topping(id="olive", label="Olives"),
            Topping(id="basil", label="Basil"),
        ]
    )


@pytest.fixture
def store() -> FormStore:
    return FormStore()


@pytest.fixture
def endpoint() -> OrderEndpointStub:
    return OrderEndpointStub()


@pytest.fixture
async def harness(
    endpoint: OrderEndpointStub,
) -> AsyncGenerator[FormTestHarness, None]:
    h = FormTestHarness(endpoint=endpoint)
    yield h
    await h.aclose()


@pytest.fixture
def controller(harness: FormTestHarness) -> FormController:
    return harness.controller
