"""HTTP client for the remote order endpoint.

The endpoint takes ``POST`` with ``{"fullName", "size", "toppings"}`` and
answers ``{"message": ...}`` for both accepted and refused orders. Anything
other than a 2xx reply, and any transport problem, is raised as
``OrderSubmissionError`` carrying a message fit for display.
"""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from pizza_form.model import FormState

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT_URL = "http://localhost:9009/api/order"
DEFAULT_TIMEOUT_SECONDS = 10.0

NETWORK_FAILURE_MESSAGE = "Could not reach the order service"
DEFAULT_SUCCESS_MESSAGE = "Order received"


class OrderSubmissionError(Exception):
    """The order was not accepted. ``message`` is safe to show to the user."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class OrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    full_name: str = Field(alias="fullName")
    size: str
    toppings: list[str] = Field(default_factory=list)

    @classmethod
    def from_state(cls, state: FormState) -> "OrderRequest":
        return cls(
            full_name=state.full_name,
            size=state.size,
            # Sets have no order; sort so the body is stable.
            toppings=sorted(state.toppings),
        )

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class OrderReceipt(BaseModel):
    message: str
    status_code: int = 200


def _message_from(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return None


class OrderClient:
    """Async client for submitting orders.

    ``transport`` is passed through to ``httpx.AsyncClient``; tests use it to
    plug in ``httpx.MockTransport``.
    """

    def __init__(
        self,
        endpoint_url: str = DEFAULT_ENDPOINT_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout!r}")
        self.endpoint_url = endpoint_url
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "OrderClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def submit_order(self, order: OrderRequest) -> OrderReceipt:
        """Send ``order`` and return the server's receipt.

        Raises:
            OrderSubmissionError: on transport failure or a non-2xx reply.
        """
        try:
            response = await self.client.post(self.endpoint_url, json=order.to_body())
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning(
                "Order request to %s failed: %s: %s",
                self.endpoint_url,
                type(exc).__name__,
                exc,
            )
            raise OrderSubmissionError(NETWORK_FAILURE_MESSAGE) from exc

        message = _message_from(response)
        if not response.is_success:
            if message is None:
                logger.warning(
                    "Order endpoint replied %d without a message",
                    response.status_code,
                )
                message = f"Order failed (HTTP {response.status_code})"
            raise OrderSubmissionError(message, status_code=response.status_code)

        if message is None:
            logger.warning(
                "Order endpoint replied %d without a message", response.status_code
            )
            message = DEFAULT_SUCCESS_MESSAGE
        return OrderReceipt(message=message, status_code=response.status_code)

    async def close(self) -> None:
        await self.client.aclose()
