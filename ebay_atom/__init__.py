"""Convert a captured eBay search-results page into an Atom feed."""

__title__ = "ebay-atom"
__version__ = "0.3.1"
__url__ = "https://github.com/ebay-atom/ebay-atom"

__all__ = ["__title__", "__version__", "__url__"]
