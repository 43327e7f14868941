"""
Atom feed assembly.

Builds one feed element tree from the page metadata and the listing records,
then serializes it with an XML declaration and 2-space indentation.

Output shape:
    <?xml version='1.0' encoding='UTF-8'?>
    <feed xmlns="http://www.w3.org/2005/Atom">
      <title type="text">widget</title>
      <id>https://www.ebay.com/sch/i.html?_nkw=widget</id>
      <updated>2024-01-01T12:00:00+00:00</updated>
      <generator uri="..." version="...">ebay-atom</generator>
      <link rel="alternate" type="text/html" href="https://www.ebay.com/sch/i.html?_nkw=widget"/>
      <entry>
        <title>Widget</title>
        <id>1234567890</id>
        <updated>2024-01-01T12:00:00+00:00</updated>
        <link rel="alternate" type="text/html" href="https://www.ebay.com/itm/1234567890"/>
        <content type="xhtml">
          <div xmlns="http://www.w3.org/1999/xhtml">
            <p>Price: $10.00</p>
          </div>
        </content>
      </entry>
    </feed>
"""

from datetime import datetime
from typing import Sequence

from lxml import etree

from ebay_atom import __title__, __url__, __version__
from ebay_atom.models.listing import ListingRecord, PageMetadata

ATOM_NS = "http://www.w3.org/2005/Atom"
XHTML_NS = "http://www.w3.org/1999/xhtml"

INDENT = "  "


def _atom(tag: str) -> str:
    return f"{{{ATOM_NS}}}{tag}"


def format_timestamp(value: datetime) -> str:
    """RFC 3339 timestamp with offset, second precision."""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat(timespec="seconds")


def _add_text(parent: etree._Element, tag: str, text: str, **attrib: str) -> etree._Element:
    elem = etree.SubElement(parent, _atom(tag), attrib)
    elem.text = text
    return elem


def _add_alternate_link(parent: etree._Element, href: str) -> etree._Element:
    return etree.SubElement(
        parent,
        _atom("link"),
        {"rel": "alternate", "type": "text/html", "href": href},
    )


def build_description(record: ListingRecord) -> etree._Element:
    """One XHTML div with a <p> per description line."""
    div = etree.Element(f"{{{XHTML_NS}}}div", nsmap={None: XHTML_NS})
    for line in record.description_lines():
        p = etree.SubElement(div, f"{{{XHTML_NS}}}p")
        p.text = line
    return div


def build_entry(parent: etree._Element, record: ListingRecord) -> etree._Element:
    entry = etree.SubElement(parent, _atom("entry"))
    _add_text(entry, "title", record.title)
    _add_text(entry, "id", record.identifier)
    _add_text(entry, "updated", format_timestamp(record.updated_at))
    _add_alternate_link(entry, record.link)

    content = etree.SubElement(entry, _atom("content"), {"type": "xhtml"})
    content.append(build_description(record))
    return entry


def build_feed(
    page: PageMetadata,
    records: Sequence[ListingRecord],
    updated: datetime,
) -> etree._Element:
    """
    Builds the Atom feed element.

    Args:
        page: Search query and canonical search URL.
        records: Listings in page order; one entry each, order preserved.
        updated: Batch timestamp for the feed.
    """
    feed = etree.Element(_atom("feed"), nsmap={None: ATOM_NS})

    _add_text(feed, "title", page.title, type="text")
    _add_text(feed, "id", page.canonical_link)
    _add_text(feed, "updated", format_timestamp(updated))
    _add_text(feed, "generator", __title__, uri=__url__, version=__version__)
    _add_alternate_link(feed, page.canonical_link)

    for record in records:
        build_entry(feed, record)

    return feed


def serialize_feed(feed: etree._Element) -> bytes:
    etree.indent(feed, space=INDENT)
    return etree.tostring(
        feed,
        xml_declaration=True,
        encoding="UTF-8",
        pretty_print=True,
    )


def render_feed(
    page: PageMetadata,
    records: Sequence[ListingRecord],
    updated: datetime,
) -> bytes:
    """Builds and serializes the feed in one step."""
    return serialize_feed(build_feed(page, records, updated))
