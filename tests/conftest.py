"""
Shared pytest fixtures and configuration for pagefetch tests.

Provides a scripted in-memory transport, a fake viewport probe and
ready-made request configurations for both response shapes.
"""

import asyncio
from collections.abc import Mapping
from typing import Any

import pytest

from pagefetch import DirectShape, RequestConfig, TransportResponse, WrappedShape


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")


class FakeTransport:
    """
    Transport returning scripted responses in order.

    A scripted entry may be a TransportResponse or an exception to raise.
    When ``gate`` is set, every call waits on it before answering.
    """

    def __init__(self, *responses: TransportResponse | BaseException) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []
        self.gate: asyncio.Event | None = None

    def queue(self, *responses: TransportResponse | BaseException) -> None:
        self.responses.extend(responses)

    async def execute(
        self, method: str, url: str, headers: Mapping[str, str], body: str | None = None
    ) -> TransportResponse:
        self.calls.append({"method": method, "url": url, "headers": dict(headers), "body": body})
        if self.gate is not None:
            await self.gate.wait()
        if not self.responses:
            raise AssertionError("FakeTransport ran out of scripted responses")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


class FakeViewport:
    """
    Viewport probe whose "filled" answer is scripted per layout pass.

    Once the script is exhausted, the viewport reports as filled.
    """

    def __init__(self, *filled: bool) -> None:
        self.filled = list(filled)
        self.layout_passes = 0

    async def wait_for_layout(self) -> None:
        self.layout_passes += 1
        await asyncio.sleep(0)

    def content_fills_viewport(self) -> bool:
        if not self.filled:
            return True
        return self.filled.pop(0)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def direct_config() -> RequestConfig:
    return RequestConfig(
        endpoint="https://api.example.com/items",
        page_size=2,
        response_shape=DirectShape(),
    )


@pytest.fixture
def wrapped_config() -> RequestConfig:
    return RequestConfig(
        endpoint="https://api.example.com/items",
        page_size=2,
        response_shape=WrappedShape(),
    )


@pytest.fixture
def make_viewport():
    """Factory for FakeViewport instances with a scripted fill sequence."""
    return FakeViewport
