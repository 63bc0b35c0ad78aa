"""Parsing of dated ``YYYY-MM-DD-slug.ext`` source names.

Dates are kept as ``YYYY-MM-DD`` strings. Every component is fixed-width and
zero-padded, so plain string ordering on that form is chronological ordering;
sorting code relies on this instead of converting to ``datetime.date``.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Tuple

from .models import ParsedSlug

DEFAULT_EXTENSIONS: Tuple[str, ...] = ("md", "html")

_DATE_PREFIX = r"(\d{4})-(\d{2})-(\d{2})-"
_DIRNAME_PATTERN = re.compile(rf"^{_DATE_PREFIX}(.+)$", re.ASCII)


class UnparseableFilenameError(ValueError):
    """Raised when a name does not follow the dated slug convention."""

    def __init__(self, name: str, expected: str) -> None:
        self.name = name
        super().__init__(f"Cannot derive date and slug from {name!r}: expected {expected}")


@lru_cache(maxsize=None)
def _filename_pattern(extensions: Tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(extension) for extension in extensions)
    return re.compile(rf"^{_DATE_PREFIX}(.+)\.({alternatives})$", re.ASCII)


def parse_filename(name: str, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> ParsedSlug:
    """Split ``YYYY-MM-DD-slug.ext`` into its components.

    The slug group is greedy, so slugs may contain dashes and dots; the date
    groups are anchored and fixed-width.
    """
    allowed = tuple(extensions)
    match = _filename_pattern(allowed).fullmatch(name)
    if match is None:
        expected = "YYYY-MM-DD-slug." + "|".join(allowed)
        raise UnparseableFilenameError(name, expected)
    year, month, day, slug, extension = match.groups()
    return ParsedSlug(year=year, month=month, day=day, slug=slug, extension=extension)


def parse_dirname(name: str) -> ParsedSlug:
    """Split a dated directory name ``YYYY-MM-DD-slug`` into its components."""
    match = _DIRNAME_PATTERN.fullmatch(name)
    if match is None:
        raise UnparseableFilenameError(name, "YYYY-MM-DD-slug")
    year, month, day, slug = match.groups()
    return ParsedSlug(year=year, month=month, day=day, slug=slug)


__all__ = [
    "DEFAULT_EXTENSIONS",
    "UnparseableFilenameError",
    "parse_dirname",
    "parse_filename",
]
