"""Tests for dateline.frontmatter."""

from __future__ import annotations

from pathlib import Path

import pytest

from dateline.frontmatter import FrontMatterError, extract_front_matter, read_metadata
from dateline.models import SourceDocument


def test_document_without_header_is_returned_unchanged() -> None:
    raw = "# Heading\n\nJust text.\n"

    metadata, body = extract_front_matter(raw)

    assert metadata == {}
    assert body == raw


def test_bytes_without_header_decode_to_identical_body() -> None:
    raw = "Plain <p>html</p>\n".encode("utf-8")

    metadata, body = extract_front_matter(raw)

    assert metadata == {}
    assert body.encode("utf-8") == raw


def test_header_block_is_parsed_and_removed() -> None:
    raw = "---\ntitle: Hello\ndescription: A greeting\ntags: [a, b]\n---\n# Body\n"

    metadata, body = extract_front_matter(raw)

    assert metadata == {"title": "Hello", "description": "A greeting", "tags": ["a", "b"]}
    assert body == "# Body\n"
    assert "---" not in body


def test_crlf_header_block_is_removed() -> None:
    raw = b"---\r\ntitle: Windows\r\n---\r\nBody\r\n"

    metadata, body = extract_front_matter(raw)

    assert metadata == {"title": "Windows"}
    assert body == "Body\r\n"


def test_empty_header_block_yields_empty_mapping() -> None:
    metadata, body = extract_front_matter("---\n---\nBody")

    assert metadata == {}
    assert body == "Body"


def test_byte_order_mark_is_ignored_before_header() -> None:
    metadata, body = extract_front_matter("\ufeff---\ntitle: BOM\n---\nBody".encode("utf-8"))

    assert metadata == {"title": "BOM"}
    assert body == "Body"


def test_unterminated_header_is_treated_as_body() -> None:
    raw = "---\ntitle: Missing end\n\nText"

    metadata, body = extract_front_matter(raw)

    assert metadata == {}
    assert body == raw


def test_invalid_yaml_raises_with_source_name() -> None:
    with pytest.raises(FrontMatterError) as excinfo:
        extract_front_matter("---\ntitle: [unclosed\n---\nBody", source="2023-01-05-post.md")

    assert "2023-01-05-post.md" in str(excinfo.value)


def test_non_mapping_header_raises() -> None:
    with pytest.raises(FrontMatterError):
        extract_front_matter("---\n- just\n- a list\n---\nBody")


def test_read_metadata_splits_known_fields(tmp_path: Path) -> None:
    path = tmp_path / "2023-01-05-post.md"
    path.write_text("---\ntitle: Post\ndescription: Summary\nauthor: Sam\n---\nText\n", encoding="utf-8")

    metadata = read_metadata(SourceDocument.read(path))

    assert metadata.title == "Post"
    assert metadata.description == "Summary"
    assert metadata.extra == {"author": "Sam"}
    assert metadata.body == "Text\n"
    assert metadata.as_page() == {"author": "Sam", "title": "Post", "description": "Summary"}


def test_non_utf8_document_without_header_does_not_raise() -> None:
    raw = "café, no header\n".encode("latin-1")

    metadata, body = extract_front_matter(raw)

    assert metadata == {}
    assert body == "caf\ufffd, no header\n"


def test_read_metadata_decodes_invalid_utf8_leniently(tmp_path: Path) -> None:
    path = tmp_path / "2023-01-05-post.md"
    path.write_bytes(b"---\ntitle: Post\n---\n\xff\xfebroken\n")

    metadata = read_metadata(SourceDocument.read(path))

    assert metadata.title == "Post"
    assert metadata.body == "\ufffd\ufffdbroken\n"


def test_header_with_blank_lines_and_dashed_rule_in_body() -> None:
    raw = "---\n\ntitle: Spaced\n\n---\nIntro\n\n---\n\nMore\n"

    metadata, body = extract_front_matter(raw)

    assert metadata == {"title": "Spaced"}
    assert body == "Intro\n\n---\n\nMore\n"
