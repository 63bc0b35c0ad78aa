"""Output path derivation for dated documents and their assets."""

from __future__ import annotations

from pathlib import PurePosixPath

from .models import ParsedSlug
from .slugs import parse_dirname

DOCUMENT_FILENAME = "index.html"


def output_directory(parsed: ParsedSlug) -> str:
    """Return ``YYYY/MM/slug/`` for a parsed name."""
    return f"{parsed.year}/{parsed.month}/{parsed.slug}/"


def document_output_path(parsed: ParsedSlug) -> PurePosixPath:
    """Return the path of a document's rendered page relative to its category."""
    return PurePosixPath(output_directory(parsed)) / DOCUMENT_FILENAME


def listing_url(parsed: ParsedSlug) -> str:
    """Return the site URL listing pages link to."""
    return f"/{output_directory(parsed)}"


def asset_output_path(relative: PurePosixPath | str) -> PurePosixPath:
    """Map an asset path under a category root to its output path.

    ``2023-01-05-intro/fig/one.png`` becomes ``2023/01/intro/fig/one.png``.
    Assets stored directly in the category root keep their path.
    """
    source = PurePosixPath(relative)
    if len(source.parts) == 1:
        return source
    dated, *rest = source.parts
    parsed = parse_dirname(dated)
    return PurePosixPath(output_directory(parsed)).joinpath(*rest)


__all__ = [
    "DOCUMENT_FILENAME",
    "asset_output_path",
    "document_output_path",
    "listing_url",
    "output_directory",
]
