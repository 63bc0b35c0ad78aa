"""Polling watch mode that re-runs builds for changed categories."""

from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterator, Optional, Set, Tuple

from .config import SiteConfig
from .errors import BuildError
from .logging import get_logger
from .pipeline import SiteBuilder

_EXCLUDED_DIRS = {".git", "__pycache__"}

Snapshot = Dict[Path, Tuple[int, int]]


@dataclass
class RebuildPlan:
    """What a set of changed paths requires rebuilding."""

    categories: Set[str] = field(default_factory=set)
    static: bool = False

    def __bool__(self) -> bool:
        return bool(self.categories) or self.static


def _iter_files(root: Path) -> Iterator[Path]:
    if not root.is_dir():
        return
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [name for name in dirnames if name not in _EXCLUDED_DIRS]
        for filename in filenames:
            yield Path(dirpath) / filename


def take_snapshot(config: SiteConfig) -> Snapshot:
    """Record ``(mtime_ns, size)`` for every watched file."""
    snapshot: Snapshot = {}
    for root in (config.content_dir, config.templates_dir, config.static_dir):
        for path in _iter_files(root):
            try:
                stat_result = path.stat()
            except FileNotFoundError:
                continue
            snapshot[path] = (stat_result.st_mtime_ns, stat_result.st_size)
    return snapshot


def diff_snapshots(before: Snapshot, after: Snapshot) -> Set[Path]:
    """Return paths that were added, removed, or modified."""
    changed = {path for path in after if before.get(path) != after[path]}
    changed.update(path for path in before if path not in after)
    return changed


def plan_rebuild(config: SiteConfig, changed: Set[Path]) -> RebuildPlan:
    plan = RebuildPlan()
    for path in changed:
        if _is_within(path, config.templates_dir):
            plan.categories.update(config.categories)
        elif _is_within(path, config.static_dir):
            plan.static = True
        elif _is_within(path, config.content_dir):
            parts = path.relative_to(config.content_dir).parts
            if len(parts) > 1 and parts[0] in config.categories:
                plan.categories.add(parts[0])
    return plan


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


class SiteWatcher:
    """Rebuilds the parts of a site affected by file changes."""

    def __init__(
        self,
        config: SiteConfig,
        builder: SiteBuilder | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.builder = builder or SiteBuilder(config)
        self._sleep = sleep
        self._snapshot: Snapshot = {}
        self.logger = get_logger("watch")

    def run(self, *, max_cycles: Optional[int] = None) -> None:
        """Build everything once, then poll until interrupted or ``max_cycles`` polls ran."""
        self._snapshot = take_snapshot(self.config)
        self._run_build(None, include_static=True)
        self.logger.info(
            "Watching %s for changes (every %.1fs)", self.config.root, self.config.watch.interval
        )

        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            self._sleep(self.config.watch.interval)
            cycles += 1
            self.poll()

    def poll(self) -> RebuildPlan:
        """Check for changes once and rebuild what they affect."""
        current = take_snapshot(self.config)
        changed = diff_snapshots(self._snapshot, current)
        self._snapshot = current
        plan = plan_rebuild(self.config, changed)
        if not plan:
            return plan

        self.logger.info("Detected %d changed file(s)", len(changed))
        if plan.categories:
            ordered = [name for name in self.config.categories if name in plan.categories]
            self._run_build(ordered, include_static=plan.static)
        elif plan.static:
            self._run_build([], include_static=True)
        return plan

    def _run_build(self, categories: Optional[list[str]], *, include_static: bool) -> bool:
        try:
            self.builder.build(categories, include_static=include_static)
        except BuildError as exc:
            self.logger.error("Build failed: %s", exc)
            return False
        return True


__all__ = [
    "RebuildPlan",
    "SiteWatcher",
    "diff_snapshots",
    "plan_rebuild",
    "take_snapshot",
]
