"""Logical-id matching over owner-scoped records.

Transactions carry a client-assigned logical id that is distinct from the
storage key, so mutations locate their target by scanning every record of
the owner. This is O(n) in the owner's transaction count per mutation.
"""

from collections.abc import Iterable, Mapping
from typing import Any, TypeVar


RecordT = TypeVar("RecordT", bound=Mapping[str, Any])


def find_matching_records(
    records: Iterable[RecordT],
    logical_id: str,
    owner_id: str,
) -> list[RecordT]:
    """Return every record whose logical id and owner both match.

    Args:
        records: Candidate stored records.
        logical_id: Logical transaction id to look for.
        owner_id: Owner the record must belong to.

    Returns:
        list[RecordT]: Matching records in scan order.
    """
    return [
        record
        for record in records
        if record.get("id") == logical_id and record.get("owner_id") == owner_id
    ]


def find_first_match(
    records: Iterable[RecordT],
    logical_id: str,
    owner_id: str,
) -> RecordT | None:
    """Return the first matching record, or None when there is none."""
    for record in records:
        if record.get("id") == logical_id and record.get("owner_id") == owner_id:
            return record
    return None


__all__ = ["find_matching_records", "find_first_match"]
