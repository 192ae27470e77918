"""
Command-line interface for BoardScout.

Usage:
    python -m boardscout --page 2 --limit 10 --format table
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from boardscout.config import Settings, get_settings
from boardscout.controller import JobController
from boardscout.errors import BoardScoutError
from boardscout.models import ScrapeResult, origin_of
from boardscout.output import OUTPUT_FORMATS, format_result, write_output, write_txt_files
from boardscout.scraper import JobScraperService

logger = logging.getLogger("boardscout")


def _positive_int(minimum: int):
    def parse(value: str) -> int:
        try:
            n = int(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
        if n < minimum:
            raise argparse.ArgumentTypeError(f"must be >= {minimum}")
        return n
    return parse


def parse_args(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    settings = settings or get_settings()
    parser = argparse.ArgumentParser(
        prog="boardscout",
        description="Extract job postings from a job board listing page",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # First page as JSON
  python -m boardscout

  # Page 2, ten jobs, as a table
  python -m boardscout --page 2 --limit 10 --format table

  # Parse a saved page and write one .txt per job
  python -m boardscout --file listing.html --txt-dir ./jobs

  # Follow each job's detail and company pages, save to disk only
  python -m boardscout --details --output jobs.json --quiet
""",
    )

    parser.add_argument(
        "--page", "-p",
        type=_positive_int(1),
        default=1,
        help="Page to request (default: 1)",
    )
    parser.add_argument(
        "--limit", "-l",
        type=_positive_int(1),
        default=None,
        help="Maximum number of jobs to return",
    )
    parser.add_argument(
        "--url",
        default=None,
        help=f"Listing URL to scrape (default: {settings.list_url})",
    )
    parser.add_argument(
        "--file",
        default=None,
        help="Local HTML file to parse instead of requesting the listing",
    )
    parser.add_argument(
        "--origin",
        default=None,
        help="Origin used to resolve links when parsing --file (default: origin of --url)",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="json",
        help="Console output format (default: json)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write the JSON result to this path",
    )
    parser.add_argument(
        "--txt-dir",
        default=None,
        help="Directory to write one .txt file per job",
    )

    # Enrichment
    parser.add_argument(
        "--details",
        action="store_true",
        help="Follow each job's detail page and company profile",
    )
    parser.add_argument(
        "--logo-ascii",
        action="store_true",
        help="Render company logos as ASCII art (implies --details)",
    )
    parser.add_argument(
        "--cache-dir",
        default=settings.cache_dir,
        help="Directory for cached detail/profile pages",
    )

    # Verbosity
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="No console output (requires --output)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print progress messages",
    )

    args = parser.parse_args(argv)
    if args.quiet and not args.output:
        parser.error("--quiet requires --output so the result is written somewhere")
    if args.logo_ascii:
        args.details = True
    return args


def setup_logging(args: argparse.Namespace, settings: Settings) -> None:
    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


async def run(args: argparse.Namespace, settings: Settings) -> Dict[str, Any]:
    """Scrape or parse according to args and return the plain result."""
    if args.cache_dir != settings.cache_dir:
        settings = settings.model_copy(update={"cache_dir": args.cache_dir})

    controller = JobController(JobScraperService(settings=settings))
    base_url = args.url or settings.list_url
    try:
        if args.file:
            with open(os.path.abspath(args.file), "r", encoding="utf-8") as f:
                html = f.read()
            jobs = await controller.parse_offline_plain(
                html,
                origin=args.origin or origin_of(base_url),
                limit=args.limit,
                source_url=base_url,
                with_details=args.details,
                with_logo_ascii=args.logo_ascii,
            )
            result = ScrapeResult(source=base_url, page=args.page, total=len(jobs), jobs=jobs)
        else:
            result = await controller.scrape_plain(
                base_url=base_url,
                page=args.page,
                limit=args.limit,
                with_details=args.details,
                with_logo_ascii=args.logo_ascii,
            )
        return result.to_plain()
    finally:
        await controller.close()


async def async_main(args: argparse.Namespace, settings: Optional[Settings] = None) -> int:
    """Async entry point."""
    settings = settings or get_settings()
    try:
        result = await run(args, settings)

        written = write_output(args.output, result)
        if written and not args.quiet:
            print(f"Result saved to {written}", file=sys.stderr)
        txt_dir = write_txt_files(args.txt_dir, result["jobs"])
        if txt_dir and not args.quiet:
            print(f"Text files written to {txt_dir}", file=sys.stderr)

        if not args.quiet:
            format_result(result, args.format)
        return 0

    except KeyboardInterrupt:
        if not args.quiet:
            print("\nInterrupted by user", file=sys.stderr)
        return 130

    except (BoardScoutError, OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.debug("Run failed", exc_info=True)
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    settings = get_settings()
    args = parse_args(argv, settings)
    setup_logging(args, settings)
    return asyncio.run(async_main(args, settings))


if __name__ == "__main__":
    sys.exit(main())
