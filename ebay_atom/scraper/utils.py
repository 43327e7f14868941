import re
from typing import Optional, Tuple

from ebay_atom.core.errors import PatternNotFound

# The search page embeds its own URL in inline script data, e.g.
#   ..."baseUrl":"https://www.ebay.com/sch/i.html?_nkw=widget&_sacat=0"...
# The capture stops at the first "&" so tracking/paging params are dropped.
BASE_URL_PATTERN = re.compile(r'baseUrl":"(https://[^&]+).*?"')

# Item links look like https://www.ebay.com/itm/1234567890?hash=...&amdata=...
# Older layouts put a slug before the ID: /itm/Some-Title/1234567890
ITEM_URL_PATTERN = re.compile(r"^(https?://[^?#]*?/itm/(?:[^/?#]+/)?(\d+))(?=[/?#]|$)")

# Characters outside the XML 1.0 Char production; lxml refuses them in text
XML_INVALID_CHARS = re.compile(r"[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def clean_xml_text(text: str) -> str:
    """
    Drops characters that cannot appear in an XML document.

    Seller-written titles occasionally carry control characters, raw or as
    numeric references like &#11;, which survive HTML parsing.
    """
    return XML_INVALID_CHARS.sub("", text)


def extract_base_url(html_content: str) -> str:
    """
    Finds the search page's canonical URL in the raw HTML text.

    The URL lives in inline script data rather than in a DOM attribute, so this
    searches the text itself.

    Raises:
        PatternNotFound: no baseUrl literal in the page.
    """
    match = BASE_URL_PATTERN.search(html_content)
    if not match:
        raise PatternNotFound(BASE_URL_PATTERN.pattern)
    return clean_xml_text(match.group(1))


def split_item_url(url: str) -> Optional[Tuple[str, str]]:
    """
    Splits an item href into (canonical_url, item_id).

    Examples:
        - "https://www.ebay.com/itm/1234567890?hash=item1" -> ("https://www.ebay.com/itm/1234567890", "1234567890")
        - "https://www.ebay.co.uk/itm/Widget/1234567890" -> ("https://www.ebay.co.uk/itm/Widget/1234567890", "1234567890")
        - "https://www.ebay.com/sch/i.html" -> None
    """
    match = ITEM_URL_PATTERN.match(url.strip())
    if not match:
        return None
    return clean_xml_text(match.group(1)), match.group(2)
