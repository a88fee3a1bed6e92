from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping


@dataclass(frozen=True)
class PriceAlertRecord:
    """One price alert event as stored in the ``priceAlertHistory`` collection."""

    date: datetime
    product_id: str
    price: float

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "PriceAlertRecord":
        # Missing fields decode to zero values rather than failing the batch.
        return cls(
            date=doc.get("date") or datetime.min.replace(tzinfo=timezone.utc),
            product_id=str(doc.get("productId") or ""),
            price=float(doc.get("price") or 0.0),
        )
