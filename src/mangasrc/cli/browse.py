"""CLI command for browsing a source's catalog, titles, chapters and pages as JSON."""

from __future__ import annotations

import argparse
from dataclasses import asdict
from datetime import datetime
import json
import logging
from typing import Any

from dotenv import load_dotenv

from mangasrc.config import SourceSettings
from mangasrc.errors import SourceError
from mangasrc.sources import MangaSource, SearchFilters, build_default_sources
from mangasrc.sources.filters import GENRE_OPTIONS

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _emit(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, default=_json_default))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browse a manga source and print JSON results")
    parser.add_argument("--source", default="astral", help="Source key (astral, lesporoiniens)")
    commands = parser.add_subparsers(dest="command", required=True)

    catalog = commands.add_parser("catalog", help="List catalog titles")
    catalog.add_argument("--mode", choices=["popular", "latest", "search"], default="popular")
    catalog.add_argument("--page", type=int, default=1, help="1-based catalog page")
    catalog.add_argument("--query", default="", help="Free-text search query")
    catalog.add_argument("--sort", default="title", help="Sort key for search mode")
    catalog.add_argument("--status", default="", help="Status filter for search mode")
    catalog.add_argument("--type", dest="content_type", default="", help="Type filter for search mode")
    catalog.add_argument(
        "--tag",
        dest="tags",
        action="append",
        default=[],
        choices=GENRE_OPTIONS,
        help="Genre tag, repeatable",
    )

    for name, help_text in (
        ("details", "Show title metadata"),
        ("chapters", "List a title's chapters"),
        ("pages", "List a chapter's images"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("--url", required=True, help="Relative URL of the title or chapter")

    return parser


def _run(source: MangaSource, args: argparse.Namespace) -> dict[str, Any]:
    if args.command == "catalog":
        page_number = max(1, args.page)
        if args.mode == "popular":
            page = source.popular(page_number)
        elif args.mode == "latest":
            page = source.latest(page_number)
        else:
            filters = SearchFilters(
                sort_by=args.sort,
                status=args.status,
                content_type=args.content_type,
                tags=tuple(args.tags),
            )
            page = source.search(page_number, args.query, filters)
        return {
            "page": page_number,
            "has_next_page": page.has_next_page,
            "results": [asdict(entry) for entry in page.entries],
        }

    if args.command == "details":
        return {"result": asdict(source.title_metadata(args.url))}
    if args.command == "chapters":
        return {"results": [asdict(chapter) for chapter in source.chapters(args.url)]}
    return {"results": [asdict(page) for page in source.pages(args.url)]}


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = _build_parser().parse_args(argv)

    try:
        settings = SourceSettings.from_env()
    except ValueError as exc:
        _emit({"error": f"Configuration error: {exc}"})
        return 1

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, settings.log_level),
    )

    sources = build_default_sources(settings)
    source = sources.get(args.source)
    if source is None:
        _emit({"error": f"Unknown source: {args.source}", "available": sorted(sources)})
        return 2

    try:
        payload = _run(source, args)
    except ValueError as exc:
        _emit({"error": str(exc)})
        return 1
    except SourceError as exc:
        logger.error("%s %s failed: %s", source.name, args.command, exc)
        _emit({"error": str(exc)})
        return 1

    _emit({"source": args.source, "command": args.command, **payload})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
