"""Listing record accumulation and pagination."""

from __future__ import annotations

import math
import threading
from typing import Dict, Iterable, List, Optional

from .models import ListingPage, ListingRecord, ParsedSlug
from .paths import listing_url

DEFAULT_PAGE_SIZE = 5


class AccumulatorStateError(RuntimeError):
    """Raised when the accumulator protocol is used out of order."""


def build_record(parsed: ParsedSlug, title: Optional[str], description: Optional[str]) -> ListingRecord:
    """Create the listing record for a parsed document name."""
    return ListingRecord(
        title=title,
        description=description,
        date=parsed.date,
        url=listing_url(parsed),
        source_name=parsed.filename,
    )


class ListingAccumulator:
    """Collects one record per document task and releases them once all settle.

    Each task takes a ticket with :meth:`expect` before it starts and returns it
    through :meth:`settle` or :meth:`discard`. :meth:`finalize` refuses to run
    while any ticket is outstanding, so records from slow tasks cannot be
    dropped by paginating early. Finalized records are ordered by ticket, not
    by completion.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._next_ticket = 0
        self._pending: set[int] = set()
        self._records: Dict[int, ListingRecord] = {}
        self._finalized = False

    @property
    def in_flight(self) -> int:
        with self._lock:
            return len(self._pending)

    def expect(self) -> int:
        """Register a document task and return its ticket."""
        with self._lock:
            self._ensure_open("expect")
            ticket = self._next_ticket
            self._next_ticket += 1
            self._pending.add(ticket)
            return ticket

    def settle(self, ticket: int, record: ListingRecord) -> None:
        """Store the record produced by a completed task."""
        with self._lock:
            self._ensure_open("settle")
            self._release(ticket)
            self._records[ticket] = record

    def discard(self, ticket: int) -> None:
        """Release the ticket of a task that failed without a record."""
        with self._lock:
            self._ensure_open("discard")
            self._release(ticket)

    def finalize(self) -> List[ListingRecord]:
        """Close the accumulator and return every settled record."""
        with self._lock:
            self._ensure_open("finalize")
            if self._pending:
                raise AccumulatorStateError(
                    f"Cannot finalize with {len(self._pending)} document task(s) still in flight"
                )
            self._finalized = True
            return [self._records[ticket] for ticket in sorted(self._records)]

    def _ensure_open(self, operation: str) -> None:
        if self._finalized:
            raise AccumulatorStateError(f"Cannot {operation} after the accumulator was finalized")

    def _release(self, ticket: int) -> None:
        if ticket not in self._pending:
            raise AccumulatorStateError(f"Ticket {ticket} is not in flight")
        self._pending.remove(ticket)


def sort_records(records: Iterable[ListingRecord]) -> List[ListingRecord]:
    """Order records newest first; records sharing a date keep their order."""
    # sorted() stays stable with reverse=True.
    return sorted(records, key=lambda record: record.date, reverse=True)


def paginate(records: Iterable[ListingRecord], page_size: int = DEFAULT_PAGE_SIZE) -> List[ListingPage]:
    """Split records into listing pages of ``page_size`` entries.

    An empty input still yields a single empty page so the index exists.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")

    ordered = sort_records(records)
    total = len(ordered)
    page_count = max(1, math.ceil(total / page_size))

    pages: List[ListingPage] = []
    for number in range(page_count):
        start = number * page_size
        window = tuple(ordered[start:min(start + page_size, total)])
        next_page = number + 2 if number + 1 < page_count else None
        pages.append(ListingPage(number=number, records=window, next_page_number=next_page))
    return pages


__all__ = [
    "AccumulatorStateError",
    "DEFAULT_PAGE_SIZE",
    "ListingAccumulator",
    "build_record",
    "paginate",
    "sort_records",
]
