"""
Response validation.

Checks the transport's status code and body against the configured
ResponseShape and returns the page's records, or raises the matching
PageFetchError subclass.
"""

from typing import Any

from .config import SUCCESS_STATUS_CODES, DirectShape, ResponseShape, WrappedShape
from .exceptions import ApiError, JsonDecodeError, ShapeError
from .serializer import decode_body, json_type_name, stringify


def _error_details(status_code: int, body: bytes | str) -> tuple[Any, str]:
    """Best-effort extraction of the response body and a message from an error response."""
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes | bytearray) else body
    message = f"Request failed with status {status_code}"

    try:
        decoded = decode_body(text)
    except JsonDecodeError:
        return text, text or message

    if isinstance(decoded, dict):
        for key in ("message", "error"):
            if decoded.get(key) is not None:
                return decoded, stringify(decoded[key])
    return decoded, message


def is_success_status(value: Any) -> bool:
    """True for ``true``, the number ``1`` and the string ``"true"``."""
    if value is True or value == "true":
        return True
    # bool is excluded above; False == 0 never equals 1
    return isinstance(value, int | float) and value == 1


def _records(items: list[Any], context: str) -> list[dict[str, Any]]:
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            actual = json_type_name(item)
            raise ShapeError(
                "Array of objects",
                f"Array containing {actual}",
                message=f"{context} must contain only objects, but found {actual} at index {index}",
            )
    return list(items)


def _keys(value: dict[str, Any]) -> str:
    return ", ".join(str(k) for k in value) or "<none>"


def _unwrap(decoded: Any, shape: WrappedShape, status_code: int) -> list[Any]:
    if not isinstance(decoded, dict):
        actual = json_type_name(decoded)
        raise ShapeError(
            shape.describe(),
            actual,
            message=f"Expected response to be an object, but got {actual}",
        )

    if shape.status_key not in decoded:
        raise ApiError(
            status_code,
            decoded,
            message=(
                f'API response has no "{shape.status_key}" status. '
                f"Available keys: {_keys(decoded)}"
            ),
        )

    status = decoded[shape.status_key]
    if not is_success_status(status):
        raise ApiError(
            status_code,
            decoded,
            message=f"API returned unsuccessful status: {shape.status_key} = {stringify(status)}",
        )

    if shape.data_key not in decoded:
        raise ShapeError(
            f'Object with "{shape.data_key}" key',
            f'Object without "{shape.data_key}" key',
            message=(
                f'Response missing required "{shape.data_key}" key. '
                f"Available keys: {_keys(decoded)}"
            ),
        )

    data = decoded[shape.data_key]
    if not isinstance(data, list):
        actual = json_type_name(data)
        raise ShapeError(
            "Array",
            actual,
            message=f'"{shape.data_key}" must be an array, but got {actual}',
        )
    return data


def validate_response(
    status_code: int, body: bytes | str, shape: ResponseShape | None = None
) -> list[dict[str, Any]]:
    """
    Validate a raw response and return its records in source order.

    Args:
        status_code: HTTP status reported by the transport
        body: Raw response body
        shape: Expected layout of the body (defaults to WrappedShape())

    Raises:
        ApiError: Status code outside 200/201, or the wrapped status flag is not truthy
        JsonDecodeError: The body is not valid JSON
        ShapeError: The JSON does not match the expected shape
    """
    shape = shape if shape is not None else WrappedShape()

    if status_code not in SUCCESS_STATUS_CODES:
        response_body, message = _error_details(status_code, body)
        raise ApiError(status_code, response_body, message=message)

    decoded = decode_body(body)

    if isinstance(shape, DirectShape):
        if not isinstance(decoded, list):
            actual = json_type_name(decoded)
            raise ShapeError(
                shape.describe(),
                actual,
                message=f"Expected response to be an array, but got {actual}",
            )
        return _records(decoded, "Response array")

    return _records(_unwrap(decoded, shape, status_code), f'"{shape.data_key}"')
