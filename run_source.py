#!/usr/bin/env python3
"""
Command-line runner for the RavenScans source.

Calls one host operation and prints the resulting records as JSON.

Usage:
    python run_source.py list --popular --page 2
    python run_source.py search "solo leveling"
    python run_source.py detail https://ravenscans.com/manga/some-work/
    python run_source.py chapters https://ravenscans.com/manga/some-work/
    python run_source.py pages https://ravenscans.com/some-work-chapter-3/
    python run_source.py classify https://ravenscans.com/some-work-chapter-3/
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Load .env file automatically (RAVENSCANS_* settings)
from dotenv import load_dotenv
load_dotenv()

from ravenscans.source import RavenScansSource
from ravenscans.schemas import Filter, FilterKind
from ravenscans.exceptions import SourceError
from ravenscans.logger import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Query the RavenScans catalog source")
    parser.add_argument("--output", "-o", help="Output JSON file (default: print to stdout)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List latest or popular works")
    list_cmd.add_argument("--popular", action="store_true", help="Use the popular listing")
    list_cmd.add_argument("--page", type=int, default=1, help="Page number (1-based)")

    search_cmd = commands.add_parser("search", help="Search works by title")
    search_cmd.add_argument("query", nargs="?", default="", help="Search term")
    search_cmd.add_argument("--page", type=int, default=1, help="Page number (1-based)")

    for name, help_text in (
        ("detail", "Show a work's metadata"),
        ("chapters", "List a work's chapters"),
        ("pages", "List a chapter's page images"),
        ("classify", "Classify a URL as work or chapter"),
    ):
        cmd = commands.add_parser(name, help=help_text)
        cmd.add_argument("url", help="Absolute URL")

    return parser


def run(args, source: RavenScansSource):
    """Dispatch the parsed command and return JSON-ready data."""
    if args.command == "list":
        filters = [Filter(kind=FilterKind.TITLE, value="Popular")] if args.popular else []
        return source.list_works(filters, args.page).model_dump(mode="json")
    if args.command == "search":
        filters = [Filter(kind=FilterKind.TITLE, name="Title", value=args.query)]
        return source.search(filters, args.page).model_dump(mode="json")
    if args.command == "detail":
        return source.get_detail(args.url).model_dump(mode="json")
    if args.command == "chapters":
        return [c.model_dump(mode="json") for c in source.get_sub_units(args.url)]
    if args.command == "pages":
        return [p.model_dump(mode="json") for p in source.get_pages(args.url)]
    return source.classify_url(args.url)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # stdout carries only the JSON result
    setup_logger(level=logging.DEBUG if args.verbose else logging.WARNING, stream=sys.stderr)

    try:
        with RavenScansSource() as source:
            result = run(args, source)
        status = 0
    except SourceError as e:
        result = e.to_response()
        status = 1

    # ensure_ascii=False keeps titles in their original script
    output = json.dumps(result, indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"Saved to: {args.output}")
    else:
        print(output)

    return status


if __name__ == "__main__":
    sys.exit(main())
