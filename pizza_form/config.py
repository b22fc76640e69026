import os
import tomllib
from dataclasses import dataclass
from typing import Any

import httpx

from pizza_form.catalog import ToppingCatalog
from pizza_form.client import DEFAULT_ENDPOINT_URL, DEFAULT_TIMEOUT_SECONDS, OrderClient
from pizza_form.controller import FormController


@dataclass
class FormConfig:
    endpoint_url: str = DEFAULT_ENDPOINT_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got {self.timeout_seconds!r}"
            )

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "FormConfig":
        """Build a config from a ``[pizza_form]`` table; unknown keys are ignored."""
        kwargs: dict[str, Any] = {}
        if "endpoint_url" in data:
            kwargs["endpoint_url"] = str(data["endpoint_url"])
        if "timeout_seconds" in data:
            kwargs["timeout_seconds"] = float(data["timeout_seconds"])
        return cls(**kwargs)


def load_form_toml(path: str | None = None) -> dict[str, Any]:
    """Load a ``pizza_form.toml`` configuration file.

    Searches (in order):
    1. The explicit ``path`` argument.
    2. ``$PIZZA_FORM_CONFIG`` environment variable.
    3. ``pizza_form.toml`` in the current working directory.

    Returns an empty dict if no file is found.

    .. code-block:: toml

        [pizza_form]
        endpoint_url = "http://localhost:9009/api/order"
        timeout_seconds = 10.0

    Environment variables prefixed with ``PIZZA_FORM_`` override TOML values
    (e.g. ``PIZZA_FORM_TIMEOUT_SECONDS=2.5``).
    """
    candidates = [
        path,
        os.getenv("PIZZA_FORM_CONFIG"),
        "pizza_form.toml",
    ]
    for candidate in candidates:
        if candidate and os.path.exists(candidate):
            with open(candidate, "rb") as fh:
                data = tomllib.load(fh)
            result: dict[str, Any] = data.get("pizza_form", {})
            _apply_env_overrides(result)
            return result

    result = {}
    _apply_env_overrides(result)
    return result


def _apply_env_overrides(cfg: dict[str, Any]) -> None:
    """Apply ``PIZZA_FORM_*`` environment variables on top of cfg dict (in-place)."""
    _FLOAT_KEYS = {"timeout_seconds"}

    for env_key, env_val in os.environ.items():
        if not env_key.startswith("PIZZA_FORM_"):
            continue
        cfg_key = env_key[len("PIZZA_FORM_"):].lower()
        if cfg_key == "config":
            continue
        if cfg_key in _FLOAT_KEYS:
            try:
                cfg[cfg_key] = float(env_val)
            except ValueError:
                pass
        else:
            cfg[cfg_key] = env_val


def make_controller_from_config(
    config: FormConfig,
    catalog: ToppingCatalog | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FormController:
    """
    Create a FormController wired to an OrderClient built from ``config``.

    Args:
        config: The form configuration
        catalog: Topping catalog; the default five toppings when None
        transport: Optional httpx transport (e.g. ``httpx.MockTransport``)

    Returns:
        A configured FormController. Close it with ``aclose()`` or use it as an
        async context manager.
    """
    client = OrderClient(
        endpoint_url=config.endpoint_url,
        timeout=config.timeout_seconds,
        transport=transport,
    )
    return FormController(client=client, catalog=catalog)
