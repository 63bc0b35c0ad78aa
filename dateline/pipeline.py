"""Build orchestration for dateline sites."""

from __future__ import annotations

import os
import re
import shutil
import tempfile
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List, Optional, Tuple

from jinja2 import Environment

from .assets import STATIC_GROUPS, copy_file, iter_files, publish_static
from .config import CategoryConfig, SiteConfig
from .errors import BuildError
from .frontmatter import FrontMatterError, read_metadata
from .listing import ListingAccumulator, build_record, paginate
from .logging import get_logger, render_thread_prefix
from .models import ListingPage, ListingRecord, SourceDocument
from .paths import asset_output_path, document_output_path
from .rendering import DocumentRenderer, RenderError, TemplateCompositor, create_environment
from .slugs import UnparseableFilenameError, parse_filename

_LISTING_FILENAME = re.compile(r"^index\d*\.html$")
_DOCUMENT_ERRORS = (UnparseableFilenameError, FrontMatterError, RenderError, OSError)


@dataclass
class CategoryResult:
    """Files produced for one category."""

    name: str
    documents: List[Path] = field(default_factory=list)
    assets: List[Path] = field(default_factory=list)
    records: List[ListingRecord] = field(default_factory=list)


@dataclass
class BuildResult:
    """Outcome of a successful build, with paths inside the build directory."""

    output: Path
    categories: Dict[str, CategoryResult]
    listing_pages: List[ListingPage]
    static_files: List[Path]


@dataclass(frozen=True)
class _ProcessedDocument:
    output: PurePosixPath
    record: Optional[ListingRecord]


class SiteBuilder:
    """Renders content categories, listing pages, and static files."""

    def __init__(
        self,
        config: SiteConfig,
        *,
        environment: Environment | None = None,
        renderer: DocumentRenderer | None = None,
        compositor: TemplateCompositor | None = None,
    ) -> None:
        self.config = config
        env = environment or create_environment(config.templates_dir)
        self.renderer = renderer or DocumentRenderer(env)
        self.compositor = compositor or TemplateCompositor(env)
        self.logger = get_logger("pipeline")

    def build(
        self,
        categories: Optional[Iterable[str]] = None,
        *,
        include_static: bool = True,
    ) -> BuildResult:
        """Build the selected categories (all by default) and promote the output.

        Everything is written to a staging directory first; ``build_dir`` is
        only touched once every step succeeded.
        """
        selected = self._select_categories(categories)
        build_dir = self.config.build_dir
        if build_dir.exists() and not build_dir.is_dir():
            raise BuildError(f"Build path is not a directory: {build_dir}")
        try:
            build_dir.parent.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(prefix=".dateline-", dir=build_dir.parent))
        except OSError as exc:
            raise BuildError(f"Cannot create a staging directory beside {build_dir}: {exc}") from exc
        self.logger.info(
            "Building %s into %s",
            ", ".join(category.name for category in selected) or "no categories",
            build_dir,
        )
        try:
            results: Dict[str, CategoryResult] = {}
            for category in selected:
                results[category.name] = self._build_category(category, staging)

            pages: List[ListingPage] = []
            listing = self.config.listing_category
            if listing is not None and listing.name in results:
                pages = paginate(results[listing.name].records, self.config.listing.page_size)
                self._write_listing(pages, staging)

            static_files: List[Path] = []
            if include_static:
                static_files = publish_static(self.config.static_dir, staging / "static")

            try:
                self._promote(staging, results, bool(pages), include_static)
            except OSError as exc:
                raise BuildError(f"Failed to promote {staging} into {build_dir}: {exc}") from exc
        finally:
            shutil.rmtree(staging, ignore_errors=True)

        for result in results.values():
            result.documents = [build_dir / path for path in result.documents]
            result.assets = [build_dir / path for path in result.assets]
        static_files = [build_dir / path.relative_to(staging) for path in static_files]
        self.logger.info(
            "Build finished: %d document(s), %d listing page(s), %d static file(s)",
            sum(len(result.documents) for result in results.values()),
            len(pages),
            len(static_files),
        )
        return BuildResult(
            output=build_dir,
            categories=results,
            listing_pages=pages,
            static_files=static_files,
        )

    def _select_categories(self, names: Optional[Iterable[str]]) -> List[CategoryConfig]:
        if names is None:
            return list(self.config.categories.values())
        selected: List[CategoryConfig] = []
        for name in dict.fromkeys(names):
            category = self.config.categories.get(name)
            if category is None:
                raise BuildError(f"Unknown category: {name}")
            selected.append(category)
        return selected

    def _build_category(self, category: CategoryConfig, staging: Path) -> CategoryResult:
        source_dir = self.config.category_dir(category.name)
        target_dir = staging / "content" / category.name
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BuildError(f"Cannot create {target_dir}: {exc}") from exc
        result = CategoryResult(name=category.name)

        sources = self._discover_sources(source_dir, category)
        if not source_dir.is_dir():
            self.logger.warning("Content directory not found: %s", source_dir)
        self.logger.debug("Discovered %d source(s) in %s", len(sources), source_dir)

        result.records = self._render_documents(category, sources, target_dir, result)
        result.assets = self._copy_assets(category, source_dir, target_dir)
        self.logger.info(
            "Built %s: %d document(s), %d asset(s)",
            category.name,
            len(result.documents),
            len(result.assets),
        )
        return result

    def _render_documents(
        self,
        category: CategoryConfig,
        sources: List[Path],
        target_dir: Path,
        result: CategoryResult,
    ) -> List[ListingRecord]:
        accumulator = ListingAccumulator()
        failures: List[Tuple[Path, Exception]] = []
        outputs: Dict[PurePosixPath, Path] = {}

        if sources:
            workers = self._determine_workers(len(sources))
            with ThreadPoolExecutor(
                max_workers=workers, thread_name_prefix=render_thread_prefix(category.name)
            ) as executor:
                future_to_task = {}
                for path in sources:
                    ticket = accumulator.expect()
                    future = executor.submit(self._process_document, path, category, target_dir)
                    future_to_task[future] = (ticket, path)

                for future in as_completed(future_to_task):
                    ticket, path = future_to_task[future]
                    try:
                        processed = future.result()
                    except _DOCUMENT_ERRORS as exc:
                        accumulator.discard(ticket)
                        failures.append((path, exc))
                        self.logger.error("Failed to build %s: %s", path.name, exc)
                        continue

                    previous = outputs.get(processed.output)
                    if previous is not None:
                        accumulator.discard(ticket)
                        failures.append(
                            (path, BuildError(f"{path.name} and {previous.name} both map to {processed.output}"))
                        )
                        continue
                    outputs[processed.output] = path

                    if processed.record is None:
                        accumulator.discard(ticket)
                    else:
                        accumulator.settle(ticket, processed.record)
                    self.logger.debug("Rendered %s -> %s", path.name, processed.output)

        if failures:
            failures.sort(key=lambda item: item[0])
            path, error = failures[0]
            raise BuildError(
                f"{len(failures)} document(s) in {category.name} failed; first was {path.name}: {error}"
            ) from error

        result.documents = sorted(Path("content", category.name, relative) for relative in outputs)
        return accumulator.finalize()

    def _process_document(
        self, path: Path, category: CategoryConfig, target_dir: Path
    ) -> _ProcessedDocument:
        parsed = parse_filename(path.name, category.formats) if category.dated else None
        relative = (
            document_output_path(parsed) if parsed is not None else PurePosixPath(f"{path.stem}.html")
        )

        self.logger.debug("Rendering %s", path.name)
        document = SourceDocument.read(path)
        metadata = read_metadata(document)
        fragment = self.renderer.render(metadata.body, document.format_tag)
        html = self.compositor.compose(category.template, fragment, metadata.as_page())

        output = target_dir / relative
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(html, encoding="utf-8")

        record = None
        if parsed is not None:
            record = build_record(parsed, metadata.title, metadata.description)
        return _ProcessedDocument(output=relative, record=record)

    def _discover_sources(self, source_dir: Path, category: CategoryConfig) -> List[Path]:
        if not source_dir.is_dir():
            return []
        suffixes = {f".{extension}" for extension in category.formats}
        return sorted(
            path
            for path in source_dir.iterdir()
            if path.is_file() and path.suffix.lower() in suffixes
        )

    def _copy_assets(self, category: CategoryConfig, source_dir: Path, target_dir: Path) -> List[Path]:
        if not category.assets:
            return []
        copied: List[Path] = []
        suffixes = [f".{extension}" for extension in category.assets]
        for path in iter_files(source_dir, suffixes):
            relative = PurePosixPath(path.relative_to(source_dir).as_posix())
            if category.dated:
                try:
                    relative = asset_output_path(relative)
                except UnparseableFilenameError as exc:
                    raise BuildError(f"Asset {path} is not inside a dated directory: {exc}") from exc
            copy_file(path, target_dir / relative)
            copied.append(Path("content", category.name, relative))
        return copied

    def _write_listing(self, pages: List[ListingPage], staging: Path) -> None:
        template = self.config.listing.template
        for page in pages:
            try:
                html = self.compositor.compose(
                    template,
                    "",
                    {},
                    records=list(page.records),
                    page_number=page.number,
                    next_page=page.next_page_number,
                )
            except RenderError as exc:
                raise BuildError(f"Listing page {page.filename} failed: {exc}") from exc
            target = staging / page.filename
            try:
                target.write_text(html, encoding="utf-8")
            except OSError as exc:
                raise BuildError(f"Cannot write listing page {target}: {exc}") from exc
        self.logger.debug("Wrote %d listing page(s)", len(pages))

    def _promote(
        self,
        staging: Path,
        results: Dict[str, CategoryResult],
        listing: bool,
        include_static: bool,
    ) -> None:
        build_dir = self.config.build_dir
        build_dir.mkdir(parents=True, exist_ok=True)

        for name in results:
            self._replace(staging / "content" / name, build_dir / "content" / name)

        if listing:
            for stale in build_dir.iterdir():
                if stale.is_file() and _LISTING_FILENAME.match(stale.name):
                    stale.unlink()
            for page in sorted(staging.glob("index*.html")):
                os.replace(page, build_dir / page.name)

        if include_static:
            for group in STATIC_GROUPS:
                self._replace(staging / "static" / group, build_dir / "static" / group)

    @staticmethod
    def _replace(staged: Path, target: Path) -> None:
        if target.exists():
            shutil.rmtree(target)
        if staged.exists():
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(staged), str(target))

    def _determine_workers(self, total: int) -> int:
        requested = self.config.max_workers
        if requested is not None and requested > 0:
            return max(1, min(total, requested))
        cpu_total = os.cpu_count() or 2
        if cpu_total <= 4:
            baseline = cpu_total
        else:
            baseline = min(8, cpu_total // 2 + 2)
        return max(1, min(total, baseline))


def build_site(
    config: SiteConfig,
    categories: Optional[Iterable[str]] = None,
    *,
    include_static: bool = True,
) -> BuildResult:
    builder = SiteBuilder(config)
    return builder.build(categories, include_static=include_static)


__all__ = ["BuildResult", "CategoryResult", "SiteBuilder", "build_site"]
