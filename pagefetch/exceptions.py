"""
Error taxonomy for pagefetch.

Every failure on the fetch path ends up as exactly one PageFetchError subclass.
The ``kind`` attribute exposes the closed set of categories so callers can
dispatch exhaustively without isinstance chains.
"""

import asyncio
from collections.abc import Generator
from contextlib import contextmanager
from enum import Enum
from typing import Any

import httpx


class ErrorKind(str, Enum):
    """Closed set of failure categories."""

    NETWORK = "network"
    JSON_DECODE = "json_decode"
    SHAPE = "shape"
    API = "api"
    OTHER = "other"


class PageFetchError(Exception):
    """Base exception for all pagefetch errors."""

    kind: ErrorKind = ErrorKind.OTHER

    def __init__(self, message: str, original_error: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        return f"{type(self).__name__}: {self.message}"


class NetworkError(PageFetchError):
    """Raised when the transport call itself fails (refused, DNS, timeout)."""

    kind = ErrorKind.NETWORK


class JsonDecodeError(PageFetchError):
    """Raised when a successful response body is not valid JSON."""

    kind = ErrorKind.JSON_DECODE


class ShapeError(PageFetchError):
    """Raised when decoded JSON does not match the configured response shape."""

    kind = ErrorKind.SHAPE

    def __init__(
        self,
        expected: str,
        actual: str,
        message: str | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message or "Invalid response format", original_error)
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        return f"ShapeError: {self.message} (expected: {self.expected}, got: {self.actual})"


class ApiError(PageFetchError):
    """Raised for a non-success status code or an unsuccessful wrapped status flag."""

    kind = ErrorKind.API

    def __init__(
        self,
        status_code: int,
        response_body: Any = None,
        message: str | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message or f"API Error ({status_code})", original_error)
        self.status_code = status_code
        self.response_body = response_body

    def __str__(self) -> str:
        return f"ApiError({self.status_code}): {self.message}"


class UnexpectedError(PageFetchError):
    """Wraps any failure that fits none of the other kinds."""

    kind = ErrorKind.OTHER

    def __init__(self, original_error: BaseException) -> None:
        super().__init__(f"Unexpected error: {original_error}", original_error)


@contextmanager
def classify_errors() -> Generator[None, None, None]:
    """
    Context manager that translates anything raised inside it into a
    PageFetchError subclass.

    PageFetchError instances pass through untouched. httpx errors, OS-level
    connection failures and asyncio timeouts become NetworkError; everything else becomes
    UnexpectedError. Cancellation is not an Exception and is never wrapped.

    Usage:
        with classify_errors():
            response = await transport.execute(...)
    """
    try:
        yield
    except PageFetchError:
        raise
    except httpx.TimeoutException as e:
        raise NetworkError(f"Request timed out: {e}", original_error=e) from e
    except httpx.TransportError as e:
        raise NetworkError(f"Failed to connect to server: {e}", original_error=e) from e
    except httpx.HTTPError as e:
        raise NetworkError(f"Network request failed: {e}", original_error=e) from e
    except (OSError, asyncio.TimeoutError) as e:
        raise NetworkError(f"Network request failed: {e}", original_error=e) from e
    except Exception as e:
        raise UnexpectedError(e) from e
