"""Domain model for a directors' dealing disclosure."""
from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

# Field names in the order a complete record populates them.
RECORD_FIELDS = (
    "stock_code",
    "date",
    "beneficiary",
    "deal_type",
    "value",
    "volume",
    "price",
)


@dataclass(frozen=True, slots=True, kw_only=True)
class DirectorDealing:
    """Represents one dealing row taken from the dealings panel.

    ``date`` and ``deal_type`` are kept verbatim. Fields whose cell was not
    present on the page stay ``None`` rather than being defaulted.
    """

    stock_code: str
    date: Optional[str] = None
    beneficiary: str = ""
    deal_type: Optional[str] = None
    value: Optional[int] = None
    volume: Optional[int] = None
    price: Decimal

    @property
    def missing_fields(self) -> tuple[str, ...]:
        return tuple(name for name in RECORD_FIELDS if getattr(self, name) is None)

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation.

        ``Beneficiary`` keeps the capitalisation downstream consumers expect.
        """

        return {
            "stock_code": self.stock_code,
            "date": self.date,
            "Beneficiary": self.beneficiary,
            "deal_type": self.deal_type,
            "value": self.value,
            "volume": self.volume,
            "price": float(self.price),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)


__all__ = ["DirectorDealing", "RECORD_FIELDS"]
