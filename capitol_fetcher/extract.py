"""
Trade table extraction from a rendered Capitol Trades page.

Works on the page's HTML so it can be tested with plain strings.
Call only after the row container is present; zero rows at that point is an error.
"""
from __future__ import annotations

from lxml import etree, html

from .errors import ExtractionError
from .models import TradeRecord


ROW_SELECTOR = "table tbody tr"
_ROW_XPATH = "//table//tbody//tr"

# TradeRecord attribute -> data-th label of the cell
CELL_LABELS = {
    "politician": "Politician",
    "ticker": "Ticker",
    "company": "Company",
    "trade_type": "Trade Type",
    "trade_size": "Trade Size",
    "traded_date": "Traded",
    "disclosed_date": "Disclosed",
}


def _cell_text(row, label: str) -> str | None:
    cells = row.xpath(".//*[@data-th=$label]", label=label)
    if not cells:
        return None
    return " ".join(cells[0].text_content().split())


def extract_records(document: str) -> list[TradeRecord]:
    """One TradeRecord per table row, in document order."""
    try:
        root = html.document_fromstring(document)
    except (etree.ParserError, ValueError) as e:
        raise ExtractionError(f"could not parse document: {e}") from e

    rows = root.xpath(_ROW_XPATH)
    if not rows:
        raise ExtractionError(f"no rows matched {ROW_SELECTOR!r}")

    return [
        TradeRecord(**{attr: _cell_text(row, label) for attr, label in CELL_LABELS.items()})
        for row in rows
    ]
