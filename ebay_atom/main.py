"""
Command line entry point: eBay search page HTML on stdin, Atom feed on stdout.

Usage:
    curl -s 'https://www.ebay.com/sch/i.html?_nkw=widget' | ebay-atom > widget.xml
    python -m ebay_atom < search.html
"""

import argparse
import sys
from datetime import datetime
from typing import BinaryIO, Optional, Sequence

from ebay_atom import __title__, __version__
from ebay_atom.core.errors import FeedError, ParseFailure, capture_exception
from ebay_atom.core.logging_config import configure_logging, get_logger
from ebay_atom.feed.atom import render_feed
from ebay_atom.scraper.ebay import parse_search_page

logger = get_logger(__name__)


def read_input(stream: BinaryIO) -> str:
    """Reads the whole page; the parser never sees a partial document."""
    raw = stream.read()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseFailure(f"input is not valid UTF-8: {e}") from e


def generate_feed(html_content: str, updated: Optional[datetime] = None) -> bytes:
    """
    Converts one search page into a serialized Atom document.

    Args:
        html_content: Full page HTML.
        updated: Batch timestamp; defaults to now, in local time.

    Returns:
        The complete feed document. Nothing is produced if any listing fails.
    """
    if updated is None:
        updated = datetime.now().astimezone().replace(microsecond=0)

    page, listings = parse_search_page(html_content, updated)
    document = render_feed(page, listings, updated)

    logger.info(
        "feed generated",
        query=page.title,
        entries=len(listings),
        size=len(document),
    )
    return document


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=__title__,
        description="Convert an eBay search results page (HTML on stdin) into an Atom feed on stdout.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    build_parser().parse_args(argv)
    configure_logging()

    # Capture the batch timestamp before reading so every entry shares it
    updated = datetime.now().astimezone().replace(microsecond=0)

    try:
        html_content = read_input(sys.stdin.buffer)
        document = generate_feed(html_content, updated)
    except FeedError as e:
        capture_exception(e, context={"operation": "generate_feed"})
        return 1

    sys.stdout.buffer.write(document)
    sys.stdout.buffer.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
