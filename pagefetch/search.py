from collections.abc import Iterable, Mapping
from typing import Any

from .serializer import stringify


def matches(record: Mapping[str, Any], query: str) -> bool:
    """True if any value's text form contains ``query`` (already lower-cased)."""
    return any(query in stringify(value).lower() for value in record.values())


def filter_records(records: Iterable[Mapping[str, Any]], query: str) -> list[Any]:
    """
    Case-insensitive substring filter over every value of every record.

    An empty query returns all records. Order is preserved.

    This is a full scan on every call; there is no index. Cost grows
    linearly with the number of accumulated records and their values,
    which is fine for lists a human scrolls through but not for large
    datasets.
    """
    needle = query.lower()
    if not needle:
        return list(records)
    return [record for record in records if matches(record, needle)]
