"""
Error taxonomy and failure reporting for a feed run.

Every extraction failure is fatal: the first error aborts the run before any
output is produced. Exceptions derive from FeedError so the entry point can
tell an extraction failure apart from a programming defect.

Usage:
    # Raise from an extractor
    raise MissingField("price", position=3)

    # Report at the boundary
    capture_exception(exc, context={"input_bytes": len(raw)})

    # Wrap a phase so its failure is logged with the phase name
    with ErrorHandler("parse_listings", context={"fragments": 60}):
        records = parse_listings(soup, updated)
"""

from typing import Optional, Any, Dict

import structlog

logger = structlog.get_logger(__name__)

__all__ = [
    "FeedError",
    "ParseFailure",
    "PatternNotFound",
    "MissingElement",
    "MissingAttribute",
    "MissingField",
    "capture_exception",
    "ErrorHandler",
]


class FeedError(Exception):
    """Base class for every failure that aborts a feed run."""


class ParseFailure(FeedError):
    """Input could not be decoded or parsed, or a selector is invalid."""


class PatternNotFound(FeedError):
    """A required regular expression found no match in the raw HTML."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"pattern not found: {pattern}")


class MissingElement(FeedError):
    """No element matched a required selector."""

    def __init__(self, selector: str):
        self.selector = selector
        super().__init__(f"no element matches {selector!r}")


class MissingAttribute(FeedError):
    """The element matched but lacks a required attribute."""

    def __init__(self, selector: str, attribute: str):
        self.selector = selector
        self.attribute = attribute
        super().__init__(f"element {selector!r} has no {attribute!r} attribute")


class MissingField(FeedError):
    """A listing field could not be extracted from its fragment."""

    def __init__(self, name: str, position: Optional[int] = None, detail: Optional[str] = None):
        self.name = name
        self.position = position
        self.detail = detail
        message = f"missing field {name!r}"
        if position is not None:
            message += f" in listing #{position}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


def capture_exception(
    exc: BaseException,
    context: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log an exception with structured context.

    Args:
        exc: Exception to report
        context: Additional context dict (e.g., {"operation": "parse_listings"})
    """
    enriched_context = {
        "error_type": type(exc).__name__,
        **(context or {}),
    }
    if isinstance(exc, MissingField):
        enriched_context["field"] = exc.name
        if exc.position is not None:
            enriched_context["position"] = exc.position

    logger.error(str(exc), **enriched_context)


class ErrorHandler:
    """
    Context manager that reports a failing operation and lets it propagate.

    Usage:
        with ErrorHandler("parse_page_metadata"):
            page = parse_page_metadata(soup, html)

    Args:
        operation: Name of the operation (logged with the failure)
        context: Additional context dict
        capture: Whether to log the failure (default: True)
    """

    def __init__(
        self,
        operation: str,
        context: Optional[Dict[str, Any]] = None,
        capture: bool = True,
    ):
        self.operation = operation
        self.context = context or {}
        self.capture = capture

    def __enter__(self) -> "ErrorHandler":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_val is not None and self.capture and isinstance(exc_val, FeedError):
            logger.debug(
                "operation failed",
                operation=self.operation,
                error_type=type(exc_val).__name__,
                **self.context,
            )
        # Never suppress: every failure aborts the run
        return False
