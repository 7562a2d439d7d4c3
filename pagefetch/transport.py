"""
Transport collaborators.

The controller only needs one call-and-wait primitive. Anything with an
``execute`` coroutine matching the Transport protocol can be plugged in;
HttpxTransport is the default implementation.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import TracebackType
from typing import Protocol, runtime_checkable

import httpx

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class TransportResponse:
    """Raw outcome of a request: status code and undecoded body."""

    status_code: int
    body: bytes | str


@runtime_checkable
class Transport(Protocol):
    async def execute(
        self, method: str, url: str, headers: Mapping[str, str], body: str | None = None
    ) -> TransportResponse:
        """Perform the request. Raise on connection-level failure."""
        ...


class HttpxTransport:
    """
    Transport backed by ``httpx.AsyncClient``.

    A client passed in stays owned by the caller; one created here is closed
    by ``aclose()``. Timeouts are enforced here, never by the controller.
    """

    def __init__(
        self, client: httpx.AsyncClient | None = None, timeout: float = DEFAULT_TIMEOUT_SECONDS
    ) -> None:
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)

    async def execute(
        self, method: str, url: str, headers: Mapping[str, str], body: str | None = None
    ) -> TransportResponse:
        response = await self._client.request(
            method,
            url,
            headers=dict(headers),
            content=body.encode("utf-8") if body is not None else None,
        )
        return TransportResponse(status_code=response.status_code, body=response.content)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
