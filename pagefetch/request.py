"""
Request building for paginated fetches.

Turns the immutable RequestConfig and the current PageCursor into a
transport-agnostic RequestDescriptor. Pure functions only: nothing here
touches the network or controller state.

Merge precedence is fixed and tested:

- params:  reserved ``page``/``limit`` > caller ``params`` > endpoint query string
- headers: caller ``extra_headers`` > derived ``Content-Type``/``Authorization``
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from ._logging import logger
from .config import RESERVED_PARAMS, RequestConfig
from .pagination import PageCursor
from .serializer import stringify


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Everything the transport needs to perform one page request.

    Attributes:
        method: "GET" or "POST"
        url: Absolute URL, including the query string for GET
        headers: Final header set
        body: JSON text for POST, None for GET
    """

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None


def merge_params(cursor: PageCursor, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """
    Merge caller params with the reserved pagination keys.

    Reserved keys always come from the cursor. A caller param using a reserved
    name is dropped with a warning.
    """
    merged: dict[str, Any] = {}
    for key, value in (params or {}).items():
        if key in RESERVED_PARAMS:
            logger.warning(
                "Ignoring caller param that collides with a reserved pagination key",
                extra={"operation": "build_request", "param": key},
            )
            continue
        merged[key] = value

    # Reserved keys first so they lead the query string
    return {"page": cursor.page_number, "limit": cursor.page_size, **merged}


def merge_headers(derived: Mapping[str, str], extra: Mapping[str, str] | None = None) -> dict[str, str]:
    """
    Merge derived headers with caller headers.

    Caller headers win. Header names are compared case-insensitively, so
    ``authorization`` from the caller replaces a derived ``Authorization``.
    """
    extra = extra or {}
    overridden = {name.lower() for name in extra}
    merged = {name: value for name, value in derived.items() if name.lower() not in overridden}
    merged.update(extra)
    return merged


def _with_query(url: str, params: Mapping[str, Any]) -> str:
    """Append stringified params to the URL, replacing existing keys of the same name."""
    parts = urlsplit(url)
    existing = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in params]
    query = existing + [(k, stringify(v)) for k, v in params.items()]
    return urlunsplit(parts._replace(query=urlencode(query)))


def build_request(config: RequestConfig, cursor: PageCursor) -> RequestDescriptor:
    """
    Assemble the request for the page the cursor points at.

    Args:
        config: Endpoint configuration
        cursor: The page to request

    Returns:
        A RequestDescriptor ready for Transport.execute()
    """
    params = merge_params(cursor, config.params)

    derived: dict[str, str] = {}
    if config.method == "POST":
        derived["Content-Type"] = "application/json"
    if config.bearer_token:
        derived["Authorization"] = f"Bearer {config.bearer_token}"

    headers = merge_headers(derived, config.extra_headers)

    if config.method == "POST":
        body = json.dumps(params, default=str)
        return RequestDescriptor(method="POST", url=config.endpoint, headers=headers, body=body)

    return RequestDescriptor(method="GET", url=_with_query(config.endpoint, params), headers=headers)
