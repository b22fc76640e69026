"""Test helpers for code built on the order form.

``OrderEndpointStub`` is an in-memory stand-in for the remote order endpoint,
exposed as an ``httpx.MockTransport``; no network is involved.
``FormTestHarness`` wires a ``FormController`` to a stub and adds shortcuts for
filling the form.

Example::

    harness = FormTestHarness()
    harness.endpoint.reply("Order placed")

    await harness.fill("Alice Smith", "L", toppings=["1", "3"])
    outcome = await harness.controller.handle_submit()

    assert outcome.success == "Order placed"
    assert harness.endpoint.requests[0]["toppings"] == ["1", "3"]
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import httpx

from pizza_form.catalog import ToppingCatalog
from pizza_form.config import FormConfig, make_controller_from_config
from pizza_form.controller import FormController


@dataclass
class _Reply:
    status_code: int = 200
    content: bytes = b""
    error: Exception | None = None


class OrderEndpointStub:
    """Scripted order endpoint.

    Replies are consumed in the order they were queued; once the queue is empty
    every request gets ``200 {"message": default_message}``.
    """

    def __init__(self, default_message: str = "Order placed") -> None:
        self.default_message = default_message
        self.requests: list[dict[str, Any]] = []
        self.urls: list[str] = []
        self._replies: list[_Reply] = []
        self._gate: asyncio.Event | None = None

    # ------------------------------------------------------------------
    # Scripting
    # ------------------------------------------------------------------

    def reply(self, message: str, status_code: int = 200) -> None:
        self.reply_raw(json.dumps({"message": message}), status_code)

    def reply_raw(self, content: str | bytes, status_code: int = 200) -> None:
        if isinstance(content, str):
            content = content.encode()
        self._replies.append(_Reply(status_code=status_code, content=content))

    def fail_with(self, error: Exception) -> None:
        """Raise ``error`` from the transport for the next request."""
        self._replies.append(_Reply(error=error))

    def hold(self) -> None:
        """Keep requests waiting until ``release()`` is called."""
        self._gate = asyncio.Event()

    def release(self) -> None:
        if self._gate is not None:
            self._gate.set()
            self._gate = None

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.urls.append(str(request.url))
        self.requests.append(json.loads(request.content or b"null"))
        gate = self._gate
        if gate is not None:
            await gate.wait()

        if not self._replies:
            return httpx.Response(200, json={"message": self.default_message})
        reply = self._replies.pop(0)
        if reply.error is not None:
            raise reply.error
        return httpx.Response(
            reply.status_code,
            content=reply.content,
            headers={"content-type": "application/json"},
        )


class FormTestHarness:
    """A controller talking to an ``OrderEndpointStub``."""

    def __init__(
        self,
        catalog: ToppingCatalog | None = None,
        config: FormConfig | None = None,
        endpoint: OrderEndpointStub | None = None,
    ) -> None:
        self.endpoint = endpoint or OrderEndpointStub()
        self.controller: FormController = make_controller_from_config(
            config or FormConfig(),
            catalog=catalog,
            transport=self.endpoint.transport,
        )

    async def fill(
        self,
        full_name: str | None = None,
        size: str | None = None,
        toppings: Iterable[str] = (),
    ) -> None:
        """Type into the form like a user would, then let validation settle."""
        if full_name is not None:
            self.controller.set_field("fullName", full_name)
        if size is not None:
            self.controller.set_field("size", size)
        for topping_id in toppings:
            self.controller.toggle_topping(topping_id, True)
        await self.controller.settle()

    async def aclose(self) -> None:
        await self.controller.aclose()
