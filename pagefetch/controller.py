"""
PageFetchController: the pagination state machine.

Owns the accumulated records, the page cursor and the loading/error flags,
and sequences fetches for both load modes:

- AUTO: ``start()`` loads the first page, ``on_scroll()`` loads the next one
  near the end of the scroll extent, and after every applied page the
  viewport refill loop keeps loading until the content fills the viewport.
- BUTTON: ``start()`` loads the first page, ``load_more()`` loads each next one.

The controller runs on a single asyncio event loop. At most one request is
in flight; a fetch requested while another is outstanding is dropped, not
queued. Observers receive an immutable ControllerSnapshot after every state
change.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

from ._logging import logger, redact_headers
from .config import SCROLL_THRESHOLD, LoadMode, RequestConfig
from .exceptions import PageFetchError, classify_errors
from .pagination import PageCursor, PageResult
from .request import build_request
from .search import filter_records
from .transport import Transport
from .validation import validate_response

Record = Mapping[str, Any]


class FetchState(str, Enum):
    IDLE = "idle"  # Ready, more pages may exist
    LOADING = "loading"  # One request in flight
    EXHAUSTED = "exhausted"  # Last page seen, nothing left to fetch
    FAILED = "failed"  # Last fetch failed, retry allowed


@dataclass(frozen=True)
class ControllerSnapshot:
    """
    Read-only view of the controller at one point in time.

    Records are exposed as read-only mappings inside tuples. Nested values
    are the decoded JSON and must not be mutated by observers.
    """

    items: tuple[Record, ...]
    filtered: tuple[Record, ...]
    is_loading: bool
    has_more: bool
    page: int
    last_error: PageFetchError | None
    search_query: str

    @property
    def state(self) -> FetchState:
        if self.is_loading:
            return FetchState.LOADING
        if self.last_error is not None:
            return FetchState.FAILED
        if not self.has_more:
            return FetchState.EXHAUSTED
        return FetchState.IDLE


@runtime_checkable
class ViewportProbe(Protocol):
    """Layout collaborator used by the AUTO mode refill loop."""

    async def wait_for_layout(self) -> None:
        """Resume once the UI has laid out the latest records."""
        ...

    def content_fills_viewport(self) -> bool:
        """True when the rendered list is taller than the visible area."""
        ...


Listener = Callable[[ControllerSnapshot], None]
ErrorSink = Callable[[PageFetchError], None]


def _read_only(records: Sequence[dict[str, Any]]) -> tuple[Record, ...]:
    return tuple(MappingProxyType(record) for record in records)


class PageFetchController:
    """
    Fetches, accumulates and filters pages of JSON records.

    Args:
        config: Endpoint, page size and response shape
        transport: Anything implementing Transport
        load_mode: AUTO (scroll + refill) or BUTTON (explicit load more)
        on_error: Called with every classified failure
        throw_errors: Re-raise failures to the caller after reporting them
        viewport: Layout probe for the AUTO refill loop; no refill without one
        scroll_threshold: Distance from the scroll end that triggers a fetch

    Usage:
        async with HttpxTransport() as transport:
            controller = PageFetchController(config, transport)
            controller.subscribe(render)
            await controller.start()
    """

    def __init__(
        self,
        config: RequestConfig,
        transport: Transport,
        *,
        load_mode: LoadMode = LoadMode.AUTO,
        on_error: ErrorSink | None = None,
        throw_errors: bool = False,
        viewport: ViewportProbe | None = None,
        scroll_threshold: float = SCROLL_THRESHOLD,
    ) -> None:
        self.config = config
        self.transport = transport
        self.load_mode = LoadMode(load_mode)
        self.on_error = on_error
        self.throw_errors = throw_errors
        self.viewport = viewport
        self.scroll_threshold = scroll_threshold

        # Internal state; only the fetch cycle and set_search_query() mutate it
        self._items: list[dict[str, Any]] = []
        self._filtered: list[dict[str, Any]] = []
        self._is_loading = False
        self._has_more = True
        self._cursor = PageCursor(page_size=config.page_size)
        self._last_error: PageFetchError | None = None
        self._search_query = ""

        self._listeners: list[Listener] = []
        self._started = False
        self._disposed = False

    # --- STATE ACCESS ---

    @property
    def items(self) -> tuple[Record, ...]:
        return _read_only(self._items)

    @property
    def filtered(self) -> tuple[Record, ...]:
        return _read_only(self._filtered)

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def has_more(self) -> bool:
        return self._has_more

    @property
    def cursor(self) -> PageCursor:
        return self._cursor

    @property
    def page(self) -> int:
        return self._cursor.page_number

    @property
    def last_error(self) -> PageFetchError | None:
        return self._last_error

    @property
    def search_query(self) -> str:
        return self._search_query

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def state(self) -> FetchState:
        return self.snapshot().state

    def snapshot(self) -> ControllerSnapshot:
        return ControllerSnapshot(
            items=self.items,
            filtered=self.filtered,
            is_loading=self._is_loading,
            has_more=self._has_more,
            page=self._cursor.page_number,
            last_error=self._last_error,
            search_query=self._search_query,
        )

    # --- OBSERVERS ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with a snapshot after every state change.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("State listener raised", extra={"operation": "notify"})

    # --- SEARCH ---

    def set_search_query(self, query: str) -> None:
        """Filter the accumulated records by ``query`` and notify observers."""
        if self._disposed:
            return
        self._search_query = query
        self._filtered = filter_records(self._items, query)
        self._notify()

    # --- FETCH CYCLE ---

    async def start(self) -> bool:
        """Load the first page. Later calls are no-ops."""
        if self._started:
            return False
        self._started = True
        return await self.fetch()

    async def fetch(self) -> bool:
        """
        Fetch the next page.

        Does nothing while a fetch is in flight, after the last page, or once
        disposed. In AUTO mode a successful fetch is followed by the viewport
        refill loop.

        Returns:
            True if a page was applied, False otherwise

        Raises:
            PageFetchError: Only when ``throw_errors`` is set
        """
        applied = await self._fetch_page()
        if applied and self.load_mode is LoadMode.AUTO:
            await self._fill_viewport()
        return applied

    async def load_more(self) -> bool:
        """Button trigger. Safe to call repeatedly; duplicates are dropped."""
        return await self.fetch()

    async def on_scroll(self, offset: float, max_extent: float) -> bool:
        """
        Scroll trigger for AUTO mode.

        Args:
            offset: Current scroll position
            max_extent: Maximum scroll position

        Returns:
            True if the scroll caused a page to be applied
        """
        if self.load_mode is not LoadMode.AUTO:
            return False
        if offset < max_extent - self.scroll_threshold:
            return False
        if self._is_loading or not self._has_more:
            return False
        return await self.fetch()

    async def _fetch_page(self) -> bool:
        if self._disposed or self._is_loading or not self._has_more:
            logger.debug(
                "Fetch skipped",
                extra={
                    "operation": "fetch",
                    "disposed": self._disposed,
                    "is_loading": self._is_loading,
                    "has_more": self._has_more,
                },
            )
            return False

        cursor = self._cursor
        context = {"endpoint": self.config.endpoint, "operation": "fetch", "page": cursor.page_number}

        self._is_loading = True
        self._last_error = None
        self._notify()

        try:
            with classify_errors():
                request = build_request(self.config, cursor)
                logger.debug(
                    "Request built",
                    extra={**context, "method": request.method, "headers": redact_headers(request.headers)},
                )
                logger.info("Fetching page", extra=context)
                response = await self.transport.execute(
                    request.method, request.url, request.headers, request.body
                )

                if self._disposed:
                    logger.debug("Discarding response for disposed controller", extra=context)
                    return False

                records = validate_response(
                    response.status_code, response.body, self.config.response_shape
                )

            self._apply_page(PageResult(records=records, page_size=cursor.page_size), cursor)
            return True
        except PageFetchError as error:
            if self._disposed:
                return False
            self._report(error, context)
            if self.throw_errors:
                raise
            return False
        finally:
            if not self._disposed:
                self._is_loading = False
                self._notify()

    def _apply_page(self, page: PageResult, cursor: PageCursor) -> None:
        self._items.extend(page.records)
        self._filtered = filter_records(self._items, self._search_query)
        self._cursor = cursor.advance()
        if page.is_last_page:
            self._has_more = False

        logger.info(
            "Page applied",
            extra={
                "endpoint": self.config.endpoint,
                "operation": "fetch",
                "page": cursor.page_number,
                "count": page.count,
                "has_more": self._has_more,
            },
        )

    def _report(self, error: PageFetchError, context: dict[str, Any]) -> None:
        self._last_error = error
        logger.error(
            f"Fetch failed: {error}",
            extra={
                **context,
                "error_kind": error.kind.value,
                "status_code": getattr(error, "status_code", None),
            },
        )
        if self.on_error is not None:
            try:
                self.on_error(error)
            except Exception:
                logger.exception("Error callback raised", extra=context)

    async def _fill_viewport(self) -> None:
        """Keep loading pages until the rendered content fills the viewport."""
        if self.viewport is None:
            return

        while not self._disposed and self._has_more:
            # Measure only after the UI has laid out the appended records
            await self.viewport.wait_for_layout()
            if self._disposed or self._is_loading or not self._has_more:
                return
            if self.viewport.content_fills_viewport():
                return

            logger.debug(
                "Viewport not filled, loading next page",
                extra={"endpoint": self.config.endpoint, "operation": "refill", "page": self.page},
            )
            if not await self._fetch_page():
                return

    # --- TEARDOWN ---

    def dispose(self) -> None:
        """
        Tear the controller down.

        Listeners are dropped and any response still in flight is discarded
        when it arrives. Idempotent.
        """
        if self._disposed:
            return
        self._disposed = True
        self._listeners.clear()
        logger.debug("Controller disposed", extra={"endpoint": self.config.endpoint, "operation": "dispose"})
