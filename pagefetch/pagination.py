"""
Page cursor and page result value objects.

The cursor is the only pagination state that travels into a request; the
controller swaps it for ``cursor.advance()`` once a page has been applied.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PageCursor:
    """
    Position of the next page to request.

    Attributes:
        page_size: Number of records requested per page (the ``limit`` parameter)
        page_number: 1-based number of the next page (the ``page`` parameter)
    """

    page_size: int
    page_number: int = 1

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {self.page_number}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")

    def advance(self) -> "PageCursor":
        """Returns the cursor for the following page."""
        return PageCursor(page_size=self.page_size, page_number=self.page_number + 1)


@dataclass(frozen=True)
class PageResult:
    """
    A single validated page of records.

    Attributes:
        records: Records in the order the server returned them
        page_size: The page size that was requested
    """

    records: list[dict[str, Any]]
    page_size: int

    @property
    def count(self) -> int:
        return len(self.records)

    @property
    def is_last_page(self) -> bool:
        """
        True when the server returned fewer records than requested.

        A full page means there might be more, even if the next one turns out empty.
        """
        return self.count < self.page_size
