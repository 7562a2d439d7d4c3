from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Distance from the end of the scroll extent at which auto mode loads the next page.
SCROLL_THRESHOLD = 100

# Query/body keys owned by the controller. Caller params never override them.
RESERVED_PARAMS = ("page", "limit")

SUCCESS_STATUS_CODES = (200, 201)


class LoadMode(str, Enum):
    """How the next page is requested."""

    AUTO = "auto"  # Infinite scroll plus viewport refill
    BUTTON = "button"  # Explicit "load more" action


@dataclass(frozen=True)
class DirectShape:
    """The response body is a bare array of objects: ``[{...}, {...}]``."""

    def describe(self) -> str:
        return "Array of objects"


@dataclass(frozen=True)
class WrappedShape:
    """
    The response body is an object carrying a status flag and a data array:
    ``{"status": true, "data": [{...}]}``.

    Both key names are configurable.
    """

    status_key: str = "status"
    data_key: str = "data"

    def __post_init__(self) -> None:
        if not self.status_key or not self.data_key:
            raise ValueError("WrappedShape keys must be non-empty strings")

    def describe(self) -> str:
        return f'Object with "{self.status_key}" and "{self.data_key}" keys'


ResponseShape = DirectShape | WrappedShape


class RequestConfig(BaseModel):
    """
    Immutable description of the paginated endpoint.

    Supplied once by the caller; the controller never mutates it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    endpoint: str = Field(min_length=1)
    method: Literal["GET", "POST"] = "GET"
    params: dict[str, Any] = Field(default_factory=dict)
    page_size: int = Field(gt=0)
    bearer_token: str | None = None
    extra_headers: dict[str, str] = Field(default_factory=dict)
    response_shape: ResponseShape = Field(default_factory=WrappedShape)

    @field_validator("method", mode="before")
    @classmethod
    def _normalize_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value
