from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field, replace

from .errors import ValidationError


SORT_FIELDS = ("date", "size", "politician", "ticker")
SORT_ORDERS = ("asc", "desc")
MAX_LIMIT = 100
DEFAULT_LIMIT = 25

SELECTOR_FIELDS = ("size", "politician_id", "ticker")


@dataclass(frozen=True)
class TradeFilter:
    """
    One validated trade query.

    At most one selector (size / politician_id / ticker) may be set.
    Construction raises ValidationError for anything the upstream schema would reject.
    """

    page: int = 1
    limit: int = DEFAULT_LIMIT
    sort_by: str = "date"
    order: str = "desc"
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    size: str | None = None
    politician_id: str | None = None
    ticker: str | None = None

    def __post_init__(self):
        if isinstance(self.page, bool) or not isinstance(self.page, int) or self.page < 1:
            raise ValidationError(f"page must be a positive integer, got {self.page!r}")
        if isinstance(self.limit, bool) or not isinstance(self.limit, int) or not 1 <= self.limit <= MAX_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_LIMIT}, got {self.limit!r}")
        if self.sort_by not in SORT_FIELDS:
            raise ValidationError(f"sort_by must be one of {SORT_FIELDS}, got {self.sort_by!r}")
        if self.order not in SORT_ORDERS:
            raise ValidationError(f"order must be one of {SORT_ORDERS}, got {self.order!r}")
        for name in ("start_date", "end_date"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, dt.date):
                raise ValidationError(f"{name} must be a date, got {value!r}")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError("end_date must not be before start_date")
        for name in SELECTOR_FIELDS:
            value = getattr(self, name)
            if value is not None and not str(value).strip():
                raise ValidationError(f"{name} must not be blank")
        chosen = [name for name in SELECTOR_FIELDS if getattr(self, name)]
        if len(chosen) > 1:
            raise ValidationError(f"only one selector may be set, got {chosen}")

    @property
    def selector(self) -> tuple[str, str] | None:
        for name in SELECTOR_FIELDS:
            value = getattr(self, name)
            if value:
                return name, value
        return None

    def for_size(self, size: str) -> "TradeFilter":
        return self._with_selector(size=str(size).strip())

    def for_politician(self, politician_id: str) -> "TradeFilter":
        return self._with_selector(politician_id=str(politician_id).strip())

    def for_ticker(self, ticker: str) -> "TradeFilter":
        return self._with_selector(ticker=str(ticker).strip().upper())

    def _with_selector(self, **selector: str) -> "TradeFilter":
        cleared = {name: None for name in SELECTOR_FIELDS}
        cleared.update(selector)
        return replace(self, **cleared)


# attribute -> serialized key; order is the serialized field order
RECORD_FIELDS = {
    "politician": "politician",
    "ticker": "ticker",
    "company": "company",
    "trade_type": "tradeType",
    "trade_size": "tradeSize",
    "traded_date": "tradedDate",
    "disclosed_date": "disclosedDate",
}


@dataclass(frozen=True)
class TradeRecord:
    """One table row. A missing source cell is None here and omitted when serialized."""

    politician: str | None = None
    ticker: str | None = None
    company: str | None = None
    trade_type: str | None = None
    trade_size: str | None = None
    traded_date: str | None = None
    disclosed_date: str | None = None

    def to_dict(self) -> dict[str, str]:
        return {
            key: getattr(self, attr)
            for attr, key in RECORD_FIELDS.items()
            if getattr(self, attr) is not None
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TradeRecord":
        return cls(**{attr: data.get(key) for attr, key in RECORD_FIELDS.items()})


@dataclass(frozen=True)
class FetchResult:
    page: int
    limit: int
    records: tuple[TradeRecord, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "trades": [r.to_dict() for r in self.records],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FetchResult":
        return cls(
            page=int(data["page"]),
            limit=int(data["limit"]),
            records=tuple(TradeRecord.from_dict(r) for r in data.get("trades", [])),
        )
