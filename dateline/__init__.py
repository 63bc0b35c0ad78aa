"""Static-site content pipeline for dated articles and paginated listings."""

from .config import SiteConfig, load_config
from .errors import AssetCopyError, BuildError
from .pipeline import BuildResult, SiteBuilder, build_site

__version__ = "0.1.0"

__all__ = [
    "AssetCopyError",
    "BuildError",
    "BuildResult",
    "SiteBuilder",
    "SiteConfig",
    "build_site",
    "load_config",
]
