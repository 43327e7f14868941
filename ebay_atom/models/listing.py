from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class PageMetadata(BaseModel):
    """Search-page level data: the query string and the page's canonical URL."""

    model_config = ConfigDict(frozen=True)

    title: str
    canonical_link: str


class ListingRecord(BaseModel):
    """One search result, in on-page order."""

    model_config = ConfigDict(frozen=True)

    title: str
    identifier: str  # eBay item ID, digits only
    link: str  # canonical item URL, tracking query removed
    price: str  # raw price text, e.g. "$10.00" or "$5.00 to $9.00"

    # Listing details (present on some results only)
    condition: Optional[str] = None
    time_left: Optional[str] = None
    purchase_options: Optional[str] = None
    ad_label: Optional[str] = None

    updated_at: datetime  # batch timestamp, shared by the whole run

    def description_lines(self) -> List[str]:
        """Labelled lines for the entry content: price first, then whatever is present."""
        lines = [f"Price: {self.price}"]
        if self.condition is not None:
            lines.append(f"Condition: {self.condition}")
        if self.time_left is not None:
            lines.append(f"Time left: {self.time_left}")
        if self.purchase_options is not None:
            lines.append(f"Purchase options: {self.purchase_options}")
        if self.ad_label is not None:
            lines.append(f"Ad: {self.ad_label}")
        return lines
