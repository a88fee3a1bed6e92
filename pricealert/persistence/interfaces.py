from __future__ import annotations

from datetime import datetime
from typing import Any, Iterator, Mapping, Protocol

from pricealert.types import PriceAlertRecord

AlertQuery = Mapping[str, Any]


def alert_window_query(cutoff: datetime) -> dict[str, Any]:
    """Filter selecting alerts strictly newer than ``cutoff``."""
    return {"date": {"$gt": cutoff}}


class PriceAlertHistoryStore(Protocol):
    def find_alerts(self, *, query: AlertQuery) -> Iterator[PriceAlertRecord]:
        """Stream alerts matching ``query``. Raises StoreError on failure."""

    def delete_alerts(self, *, query: AlertQuery) -> int:
        """Delete alerts matching ``query``. Returns number of deleted records."""
