from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from soupsieve import SelectorSyntaxError
from typing import List, Optional, Tuple
from datetime import datetime

from ebay_atom.core.errors import (
    ErrorHandler,
    MissingAttribute,
    MissingElement,
    MissingField,
    ParseFailure,
)
from ebay_atom.core.logging_config import get_logger
from ebay_atom.models.listing import ListingRecord, PageMetadata
from ebay_atom.scraper.utils import clean_xml_text, extract_base_url, split_item_url

logger = get_logger(__name__)

# Search page layout
FEED_TITLE_QUERY = 'input[name="_nkw"]'
ITEMS_QUERY = ".srp-river .srp-river-results .s-item__wrapper"

# Listing fragment layout
TITLE_QUERY = ".s-item__title span[role=heading]"
LINK_QUERY = ".s-item__link"
PRICE_QUERY = ".s-item__price"
CONDITION_QUERY = ".SECONDARY_INFO"
TIME_LEFT_QUERY = ".s-item__time-left"
PURCHASE_OPTIONS_QUERY = ".s-item__purchase-options"
AD_QUERY = ".lvformat"

# Optional listing details, in description order
OPTIONAL_FIELDS = (
    ("condition", CONDITION_QUERY),
    ("time_left", TIME_LEFT_QUERY),
    ("purchase_options", PURCHASE_OPTIONS_QUERY),
    ("ad_label", AD_QUERY),
)


def make_soup(html_content: str) -> BeautifulSoup:
    """Parses the full page with lxml."""
    try:
        return BeautifulSoup(html_content, "lxml")
    except ParserRejectedMarkup as e:
        raise ParseFailure(f"input is not parseable as HTML: {e}") from e


def _select_one(node, selector: str):
    try:
        return node.select_one(selector)
    except SelectorSyntaxError as e:
        raise ParseFailure(f"invalid selector {selector!r}: {e}") from e


def _select(node, selector: str) -> list:
    try:
        return node.select(selector)
    except SelectorSyntaxError as e:
        raise ParseFailure(f"invalid selector {selector!r}: {e}") from e


def _first_text(elem) -> Optional[str]:
    text = next(iter(elem.strings), None)
    return clean_xml_text(str(text)) if text is not None else None


def _last_text(elem) -> Optional[str]:
    text = None
    for text in elem.strings:
        pass
    return clean_xml_text(str(text)) if text is not None else None


def parse_page_metadata(soup: BeautifulSoup, html_content: str) -> PageMetadata:
    """
    Extracts the search query and the canonical search URL.

    The query comes from the search box's value attribute (DOM); the URL is
    pulled from inline script data in the raw text.

    Raises:
        MissingElement: no search input on the page.
        MissingAttribute: the search input has no value.
        PatternNotFound: no embedded baseUrl.
    """
    input_elem = _select_one(soup, FEED_TITLE_QUERY)
    if input_elem is None:
        raise MissingElement(FEED_TITLE_QUERY)

    title = input_elem.get("value")
    if title is None:
        raise MissingAttribute(FEED_TITLE_QUERY, "value")

    return PageMetadata(title=clean_xml_text(title), canonical_link=extract_base_url(html_content))


def _extract_title(item, position: int) -> str:
    """
    Returns the listing title.

    eBay prepends a hidden "New Listing" label inside the heading on fresh
    listings, so the title is the last text node, not the first.
    """
    title_elem = _select_one(item, TITLE_QUERY)
    if title_elem is None:
        raise MissingField("title", position, detail=f"no element matches {TITLE_QUERY!r}")

    title = _last_text(title_elem)
    if title is None:
        raise MissingField("title", position, detail="heading has no text")
    return title


def _extract_item_details(item, position: int) -> Tuple[str, str]:
    """
    Extracts item ID and canonical URL from the listing link.

    eBay URLs look like: https://www.ebay.com/itm/1234567890?hash=...
    The tracking query is dropped; the ID is the digit run after /itm/.
    """
    link_elem = _select_one(item, LINK_QUERY)
    if link_elem is None:
        raise MissingField("link", position, detail=f"no element matches {LINK_QUERY!r}")

    href = link_elem.get("href")
    if not href:
        raise MissingField("link", position, detail="anchor has no href")

    parts = split_item_url(href)
    if parts is None:
        raise MissingField("link", position, detail=f"not an item URL: {href[:80]}")

    url, item_id = parts
    return item_id, url


def _extract_price(item, position: int) -> str:
    price_elem = _select_one(item, PRICE_QUERY)
    if price_elem is None:
        raise MissingField("price", position, detail=f"no element matches {PRICE_QUERY!r}")

    price = _first_text(price_elem)
    if price is None:
        raise MissingField("price", position, detail="price element has no text")
    return price


def _extract_optional(item, name: str, selector: str, position: int) -> Optional[str]:
    """
    Returns the first text node of an optional detail, or None when the node is absent.

    A node that exists but holds no text is treated like a broken mandatory
    field: the layout has changed under us.
    """
    elem = _select_one(item, selector)
    if elem is None:
        return None

    text = _first_text(elem)
    if text is None:
        raise MissingField(name, position, detail=f"{selector!r} has no text")
    return text


def _parse_listing(item, position: int, updated: datetime) -> ListingRecord:
    title = _extract_title(item, position)
    item_id, url = _extract_item_details(item, position)
    price = _extract_price(item, position)

    details = {
        name: _extract_optional(item, name, selector, position)
        for name, selector in OPTIONAL_FIELDS
    }

    logger.debug(
        "listing extracted",
        position=position,
        item_id=item_id,
        **{k: v for k, v in details.items() if v is not None},
    )

    return ListingRecord(
        title=title,
        identifier=item_id,
        link=url,
        price=price,
        updated_at=updated,
        **details,
    )


def parse_listings(soup: BeautifulSoup, updated: datetime) -> List[ListingRecord]:
    """
    Extracts every listing in the results river, in page order.

    Args:
        soup: Parsed search page.
        updated: Batch timestamp stamped on every record.

    Raises:
        MissingField: a listing lacks its title, link or price. Nothing is
            returned in that case; one broken listing fails the whole page.
    """
    items = _select(soup, ITEMS_QUERY)
    results = [
        _parse_listing(item, position, updated)
        for position, item in enumerate(items, start=1)
    ]

    logger.info("listings extracted", count=len(results))
    return results


def parse_search_page(html_content: str, updated: datetime) -> Tuple[PageMetadata, List[ListingRecord]]:
    """
    Parses eBay HTML search results into page metadata and listing records.

    The document is parsed once and shared by both passes.
    """
    soup = make_soup(html_content)

    with ErrorHandler("parse_page_metadata"):
        page = parse_page_metadata(soup, html_content)

    with ErrorHandler("parse_listings", context={"query": page.title}):
        listings = parse_listings(soup, updated)

    return page, listings
