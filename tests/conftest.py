from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.site_tree import SiteTree


@pytest.fixture
def site_tree(tmp_path: Path) -> SiteTree:
    """Provide a reusable site tree rooted at the pytest tmp_path."""
    return SiteTree(tmp_path)
