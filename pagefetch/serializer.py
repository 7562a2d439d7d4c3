import json
from typing import Any

from .exceptions import JsonDecodeError


def decode_body(body: bytes | str) -> Any:
    """
    Decode a response body into Python values.

    Raises:
        JsonDecodeError: If the body is not UTF-8 or not valid JSON
    """
    try:
        text = body.decode("utf-8") if isinstance(body, bytes | bytearray) else body
        return json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise JsonDecodeError(f"Failed to parse JSON response: {e}", original_error=e) from e


def json_type_name(value: Any) -> str:
    """Name of the JSON type a decoded value came from, for error messages."""
    # bool first: it is a subclass of int
    if isinstance(value, bool):
        return "boolean"
    if value is None:
        return "null"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    if isinstance(value, int | float):
        return "number"
    return type(value).__name__


def stringify(value: Any) -> str:
    """
    Text form of a JSON value, as used for query strings and search matching.

    Booleans and null keep their JSON spelling; containers become compact JSON.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, str):
        return value
    if isinstance(value, dict | list | tuple):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return str(value)
