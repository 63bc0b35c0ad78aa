"""Core data models shared across dateline components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class SourceDocument:
    """A discovered source file and its raw bytes."""

    path: Path
    content: bytes

    @classmethod
    def read(cls, path: Path) -> "SourceDocument":
        return cls(path=path, content=path.read_bytes())

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def format_tag(self) -> str:
        return self.path.suffix.lstrip(".").lower()


@dataclass(frozen=True)
class ParsedSlug:
    """Date and slug components recovered from a dated filename."""

    year: str
    month: str
    day: str
    slug: str
    extension: Optional[str] = None

    @property
    def date(self) -> str:
        return f"{self.year}-{self.month}-{self.day}"

    @property
    def filename(self) -> str:
        """Rejoin the components into the name they were parsed from."""
        stem = f"{self.date}-{self.slug}"
        return f"{stem}.{self.extension}" if self.extension else stem


@dataclass
class DocumentMetadata:
    """Front matter values extracted from a document plus its remaining body."""

    title: Optional[str] = None
    description: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    body: str = ""

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any], body: str) -> "DocumentMetadata":
        extra = dict(values)
        title = extra.pop("title", None)
        description = extra.pop("description", None)
        return cls(
            title=None if title is None else str(title),
            description=None if description is None else str(description),
            extra=extra,
            body=body,
        )

    def as_page(self) -> Dict[str, Any]:
        """Return the mapping templates receive as ``page``."""
        page = dict(self.extra)
        if self.title is not None:
            page["title"] = self.title
        if self.description is not None:
            page["description"] = self.description
        return page


@dataclass(frozen=True)
class ListingRecord:
    """Summary of one dated document as shown on listing pages."""

    title: Optional[str]
    description: Optional[str]
    date: str
    url: str
    source_name: str


@dataclass(frozen=True)
class ListingPage:
    """One window of listing records."""

    number: int
    records: Tuple[ListingRecord, ...]
    next_page_number: Optional[int] = None

    @property
    def filename(self) -> str:
        return page_filename(self.number)


def page_filename(number: int) -> str:
    """Return the listing filename for a 0-based page number.

    Page 0 is the bare ``index.html``; page ``p`` is ``index{p + 1}.html``.
    """
    if number < 0:
        raise ValueError(f"Page numbers start at 0, got {number}")
    return "index.html" if number == 0 else f"index{number + 1}.html"


__all__ = [
    "DocumentMetadata",
    "ListingPage",
    "ListingRecord",
    "ParsedSlug",
    "SourceDocument",
    "page_filename",
]
