from .listing import PageMetadata, ListingRecord

__all__ = [
    "PageMetadata",
    "ListingRecord",
]
