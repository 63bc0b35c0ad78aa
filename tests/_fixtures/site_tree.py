"""Helper utilities for constructing temporary sites in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from dateline.config import SiteConfig, load_config


class SiteTree:
    """Utility for writing files into a throwaway site and loading its config."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "site"
        self.root.mkdir()

    def write(self, files: Mapping[str, str | bytes]) -> None:
        """Write `path -> contents` entries into the site."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
                continue
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def article(self, name: str, title: str, description: str = "", body: str = "Body text.") -> None:
        """Write a markdown article with a front matter block."""
        lines = ["---", f"title: {title}"]
        if description:
            lines.append(f"description: {description}")
        lines.extend(["---", body, ""])
        self.write({f"content/articles/{name}": "\n".join(lines)})

    def config(self) -> SiteConfig:
        return load_config(self.root)

    def build_path(self, relative: str) -> Path:
        return self.root / "build" / relative


__all__ = ["SiteTree"]
