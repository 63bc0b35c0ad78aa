"""YAML front matter extraction."""

from __future__ import annotations

from typing import Any, Dict, Tuple

import frontmatter
import yaml

from .models import DocumentMetadata, SourceDocument

_HANDLER = frontmatter.YAMLHandler()


class FrontMatterError(ValueError):
    """Raised when a delimited header block cannot be parsed."""


def extract_front_matter(
    raw: bytes | str, *, source: str | None = None
) -> Tuple[Dict[str, Any], str]:
    """Split a document into its header mapping and remaining body.

    Documents without a closed ``---`` block come back unchanged with an empty
    mapping. Bytes that are not valid UTF-8 are decoded with replacement
    characters rather than rejected.
    """
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    stripped = text[1:] if text.startswith("\ufeff") else text

    if not _HANDLER.detect(stripped):
        return {}, text
    try:
        header, body = _HANDLER.split(stripped)
    except ValueError:
        # Opening delimiter without a closing one.
        return {}, text

    label = source or "<document>"
    try:
        loaded = _HANDLER.load(header)
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"Invalid front matter in {label}: {exc}") from exc

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise FrontMatterError(
            f"Front matter in {label} must be a mapping, got {type(loaded).__name__}"
        )
    # The closing delimiter match stops before its line break.
    if body.startswith("\n"):
        body = body[1:]
    return {str(key): value for key, value in loaded.items()}, body


def read_metadata(document: SourceDocument) -> DocumentMetadata:
    """Extract front matter from a source document."""
    values, body = extract_front_matter(document.content, source=document.name)
    return DocumentMetadata.from_mapping(values, body)


__all__ = ["FrontMatterError", "extract_front_matter", "read_metadata"]
