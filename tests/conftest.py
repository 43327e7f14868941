"""
Test fixtures for ebay-atom tests.

Provides builders for eBay search-page HTML in the layout the scraper targets.
Markup inside text-bearing spans is kept on one line: whitespace there would
become extra text nodes.
"""

import pytest
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ebay_atom.core.logging_config import configure_logging


BASE_URL = "https://www.ebay.com/sch/i.html?_nkw=widget"
FIXED_UPDATED = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _listing_html(
    title: str = "Widget",
    href: Optional[str] = "https://www.ebay.com/itm/1234567890?hash=item1cbb2c3d4e:g:abcAAOSw&amdata=enc%3AAQ",
    price: Optional[str] = "$10.00",
    condition: Optional[str] = None,
    time_left: Optional[str] = None,
    purchase_options: Optional[str] = None,
    ad: Optional[str] = None,
    new_listing: bool = False,
    include_title: bool = True,
    include_link: bool = True,
) -> str:
    heading = ""
    if include_title:
        label = '<span class="LIGHT_HIGHLIGHT">New Listing</span>' if new_listing else ""
        heading = (
            '<div class="s-item__title">'
            f'<span role="heading" aria-level="3">{label}{title}</span>'
            "</div>"
        )

    if include_link:
        href_attr = f' href="{href}"' if href is not None else ""
        link = f'<a class="s-item__link"{href_attr}>{heading}</a>'
    else:
        link = heading

    parts = [
        '<li class="s-item s-item__pl-on-bottom">',
        '<div class="s-item__wrapper clearfix">',
        '<div class="s-item__info clearfix">',
        link,
    ]
    if condition is not None:
        parts.append(f'<div class="s-item__subtitle"><span class="SECONDARY_INFO">{condition}</span></div>')
    parts.append('<div class="s-item__details clearfix">')
    if price is not None:
        parts.append(f'<div class="s-item__detail"><span class="s-item__price">{price}</span></div>')
    if purchase_options is not None:
        parts.append(f'<div class="s-item__detail"><span class="s-item__purchase-options">{purchase_options}</span></div>')
    if time_left is not None:
        parts.append(f'<div class="s-item__detail"><span class="s-item__time-left">{time_left}</span></div>')
    if ad is not None:
        parts.append(f'<div class="s-item__detail"><span class="lvformat">{ad}</span></div>')
    parts.extend(["</div>", "</div>", "</div>", "</li>"])
    return "\n".join(parts)


def _page_html(
    listings: List[str],
    query: Optional[str] = "widget",
    base_url: Optional[str] = BASE_URL,
    extra_body: str = "",
) -> str:
    search_input = ""
    if query is not None:
        search_input = f'<input class="gh-tb ui-autocomplete-input" type="text" name="_nkw" value="{query}">'
    else:
        search_input = '<input class="gh-tb ui-autocomplete-input" type="text" name="_nkw">'

    script = ""
    if base_url is not None:
        script = (
            "<script>$ssgST=new Date().getTime();"
            f'window.SRP={{"pageConfig":{{"baseUrl":"{base_url}&_sacat=0&_pgn=1","rlogId":"t6q"}}}};'
            "</script>"
        )

    return "\n".join([
        "<!DOCTYPE html>",
        "<html lang=\"en\">",
        "<head><title>widget | eBay</title></head>",
        "<body>",
        f'<form id="gh-f" action="https://www.ebay.com/sch/i.html">{search_input}</form>',
        extra_body,
        '<div class="srp-river srp-layout-inner">',
        '<div class="srp-river-main clearfix">',
        '<div class="srp-river-results clearfix">',
        '<ul class="srp-results srp-list clearfix">',
        *listings,
        "</ul>",
        "</div>",
        "</div>",
        "</div>",
        script,
        "</body>",
        "</html>",
    ])


@pytest.fixture(autouse=True)
def reset_logging():
    """Rebind structlog to the real stderr once capture fixtures are gone."""
    yield
    configure_logging()


@pytest.fixture
def listing_html() -> Callable[..., str]:
    """Builder for one listing fragment (<li class="s-item">)."""
    return _listing_html


@pytest.fixture
def page_html() -> Callable[..., str]:
    """Builder for a full search page wrapping the given listing fragments."""
    return _page_html


@pytest.fixture
def updated() -> datetime:
    """Fixed batch timestamp."""
    return FIXED_UPDATED


@pytest.fixture
def full_listing_page(listing_html, page_html) -> str:
    """One listing with every optional detail present."""
    return page_html([
        listing_html(
            title="Widget",
            price="$10",
            condition="New",
            time_left="2d left",
            purchase_options="Buy it now",
            ad="Sponsored",
        )
    ])


@pytest.fixture
def three_listing_page(listing_html, page_html) -> str:
    """Three listings with distinct IDs, in a known order."""
    return page_html([
        listing_html(title="First Widget", href="https://www.ebay.com/itm/1111111111?hash=a&amdata=x", price="$1.00"),
        listing_html(title="Second Widget", href="https://www.ebay.com/itm/2222222222?hash=b&amdata=y", price="$2.00", condition="Used"),
        listing_html(title="Third Widget", href="https://www.ebay.com/itm/3333333333?hash=c&amdata=z", price="$3.00", time_left="5h left"),
    ])
