"""Build failures surfaced to the top-level invocation."""

from __future__ import annotations

from pathlib import Path


class BuildError(RuntimeError):
    """Raised when a build cannot complete; nothing is promoted to the build directory."""


class AssetCopyError(BuildError):
    """Raised when a file cannot be copied into the output tree."""

    def __init__(self, source: Path, destination: Path, reason: OSError) -> None:
        self.source = source
        self.destination = destination
        self.reason = reason
        super().__init__(f"Failed to copy {source} to {destination}: {reason}")


__all__ = ["AssetCopyError", "BuildError"]
