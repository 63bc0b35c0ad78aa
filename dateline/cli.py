"""CLI entrypoints for dateline commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, SiteConfig, load_config
from .errors import BuildError
from .logging import configure_logging
from .pipeline import SiteBuilder
from .watch import SiteWatcher


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the site root containing .dateline.yml (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dateline",
        description="Build a static site from dated articles, presentations, and templates.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Build every category, the listing pages, and static files once.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_path_argument(build_parser)
    build_parser.add_argument(
        "-c",
        "--category",
        action="append",
        dest="categories",
        default=None,
        help="Only build this category (repeatable).",
    )
    build_parser.add_argument(
        "--no-static",
        action="store_true",
        help="Skip copying scripts and styles.",
    )

    watch_parser = subparsers.add_parser(
        "watch",
        help="Build once, then rebuild affected categories whenever files change.",
    )
    _add_verbose_option(watch_parser, suppress_default=True)
    _add_path_argument(watch_parser)
    watch_parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between polls (overrides watch.interval).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for dateline commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(Path(args.path))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "build":
        try:
            result = SiteBuilder(config).build(
                args.categories,
                include_static=not bool(getattr(args, "no_static", False)),
            )
        except BuildError as exc:
            parser.exit(1, f"dateline build failed: {exc}\nRun with --verbose for more details.\n")
        documents = sum(len(category.documents) for category in result.categories.values())
        print(
            f"Built {documents} document(s) and {len(result.listing_pages)} listing page(s) "
            f"into {_relativize(result.output)}"
        )
    elif args.command == "watch":
        if args.interval is not None:
            if args.interval <= 0:
                parser.exit(2, "--interval must be greater than 0\n")
            config.watch.interval = args.interval
        _watch(config)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _watch(config: SiteConfig) -> None:
    watcher = SiteWatcher(config)
    try:
        watcher.run()
    except KeyboardInterrupt:
        print("Stopped watching")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
