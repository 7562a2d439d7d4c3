from .config import (
    SCROLL_THRESHOLD,
    DirectShape,
    LoadMode,
    RequestConfig,
    ResponseShape,
    WrappedShape,
)
from .controller import ControllerSnapshot, FetchState, PageFetchController, ViewportProbe
from .exceptions import (
    ApiError,
    ErrorKind,
    JsonDecodeError,
    NetworkError,
    PageFetchError,
    ShapeError,
    UnexpectedError,
)
from .pagination import PageCursor, PageResult
from .request import RequestDescriptor, build_request
from .search import filter_records
from .transport import HttpxTransport, Transport, TransportResponse
from .validation import validate_response

__all__ = [
    "PageFetchController",
    "ControllerSnapshot",
    "FetchState",
    "ViewportProbe",
    # Configuration
    "RequestConfig",
    "LoadMode",
    "DirectShape",
    "WrappedShape",
    "ResponseShape",
    "SCROLL_THRESHOLD",
    # Building blocks
    "PageCursor",
    "PageResult",
    "RequestDescriptor",
    "build_request",
    "validate_response",
    "filter_records",
    # Transport
    "Transport",
    "TransportResponse",
    "HttpxTransport",
    # Exceptions
    "PageFetchError",
    "ErrorKind",
    "NetworkError",
    "JsonDecodeError",
    "ShapeError",
    "ApiError",
    "UnexpectedError",
]
