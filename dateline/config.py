"""Configuration loading for dateline sites (.dateline.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .listing import DEFAULT_PAGE_SIZE

CONFIG_FILENAME = ".dateline.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class CategoryConfig:
    """How the sources of one ``content/<name>`` directory are built."""

    name: str
    template: str
    dated: bool = True
    formats: List[str] = field(default_factory=lambda: ["md", "html"])
    assets: List[str] = field(default_factory=list)


@dataclass
class ListingConfig:
    """Which category feeds the paginated index, and how."""

    category: Optional[str] = "articles"
    page_size: int = DEFAULT_PAGE_SIZE
    template: str = "index"


@dataclass
class WatchConfig:
    """Polling settings for watch mode."""

    interval: float = 1.0


def default_categories() -> Dict[str, CategoryConfig]:
    return {
        "articles": CategoryConfig(
            name="articles",
            template="article",
            formats=["md", "html"],
            assets=["png", "pdf", "jpg", "svg"],
        ),
        "presentations": CategoryConfig(
            name="presentations",
            template="presentation",
            dated=False,
            formats=["j2"],
        ),
    }


@dataclass
class SiteConfig:
    """Represents the settings defined in .dateline.yml."""

    root: Path
    content_dir: Path = Path("content")
    build_dir: Path = Path("build")
    templates_dir: Path = Path("templates")
    static_dir: Path = Path("static")
    max_workers: Optional[int] = None
    listing: ListingConfig = field(default_factory=ListingConfig)
    categories: Dict[str, CategoryConfig] = field(default_factory=default_categories)
    watch: WatchConfig = field(default_factory=WatchConfig)

    def __post_init__(self) -> None:
        self.content_dir = self._anchor(self.content_dir)
        self.build_dir = self._anchor(self.build_dir)
        self.templates_dir = self._anchor(self.templates_dir)
        self.static_dir = self._anchor(self.static_dir)

    def _anchor(self, path: Path) -> Path:
        return path if path.is_absolute() else self.root / path

    def category_dir(self, name: str) -> Path:
        return self.content_dir / name

    @property
    def listing_category(self) -> Optional[CategoryConfig]:
        if self.listing.category is None:
            return None
        return self.categories.get(self.listing.category)


def load_config(config_path: Path) -> SiteConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent

    if not config_file.exists():
        return SiteConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    paths: Dict[str, Path] = {}
    for key in ("content_dir", "build_dir", "templates_dir", "static_dir"):
        value = _as_str(data.get(key))
        if value:
            paths[key] = Path(value).expanduser()

    max_workers = _as_int(data.get("max_workers"))
    if max_workers is not None and max_workers < 1:
        raise ConfigError("max_workers must be at least 1")

    listing = _parse_listing(_as_dict(data.get("listing")), "listing" in data)
    categories = _parse_categories(data.get("categories"))
    watch = _parse_watch(_as_dict(data.get("watch")))
    if "listing" not in data and listing.category not in categories:
        listing.category = None

    config = SiteConfig(
        root=root,
        max_workers=max_workers,
        listing=listing,
        categories=categories,
        watch=watch,
        **paths,
    )
    _validate_listing(config)
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _parse_listing(data: Dict[str, Any], present: bool) -> ListingConfig:
    listing = ListingConfig()
    if not present:
        return listing
    if "category" in data:
        listing.category = _as_str(data.get("category"))
    page_size = _as_int(data.get("page_size"))
    if page_size is not None:
        if page_size < 1:
            raise ConfigError("listing.page_size must be at least 1")
        listing.page_size = page_size
    template = _as_str(data.get("template"))
    if template:
        listing.template = template
    return listing


def _parse_categories(value: Any) -> Dict[str, CategoryConfig]:
    if value is None:
        return default_categories()
    if not isinstance(value, dict):
        raise ConfigError("categories must be a mapping of category name to settings")

    defaults = default_categories()
    categories: Dict[str, CategoryConfig] = {}
    for raw_name, raw_settings in value.items():
        name = str(raw_name)
        settings = _as_dict(raw_settings)
        base = defaults.get(name) or CategoryConfig(name=name, template=name)
        formats = _as_str_list(settings.get("formats")) if "formats" in settings else base.formats
        assets = _as_str_list(settings.get("assets")) if "assets" in settings else base.assets
        dated = _as_bool(settings.get("dated"))
        categories[name] = CategoryConfig(
            name=name,
            template=_as_str(settings.get("template")) or base.template,
            dated=base.dated if dated is None else dated,
            formats=[_normalise_extension(item) for item in formats],
            assets=[_normalise_extension(item) for item in assets],
        )
        if not categories[name].formats:
            raise ConfigError(f"Category {name!r} must list at least one format")
    return categories


def _parse_watch(data: Dict[str, Any]) -> WatchConfig:
    watch = WatchConfig()
    interval = _as_float(data.get("interval"))
    if interval is not None:
        if interval <= 0:
            raise ConfigError("watch.interval must be greater than 0")
        watch.interval = interval
    return watch


def _validate_listing(config: SiteConfig) -> None:
    name = config.listing.category
    if name is None:
        return
    category = config.categories.get(name)
    if category is None:
        raise ConfigError(f"listing.category {name!r} is not a configured category")
    if not category.dated:
        raise ConfigError(f"listing.category {name!r} must be a dated category")


def _normalise_extension(value: str) -> str:
    return value.strip().lstrip(".").lower()


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "CategoryConfig",
    "ConfigError",
    "ListingConfig",
    "SiteConfig",
    "WatchConfig",
    "load_config",
]
