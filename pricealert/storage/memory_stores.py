from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable, Iterator

from pricealert.persistence.interfaces import AlertQuery, PriceAlertHistoryStore
from pricealert.types import PriceAlertRecord

_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "$gt": lambda value, bound: value > bound,
    "$gte": lambda value, bound: value >= bound,
    "$lt": lambda value, bound: value < bound,
    "$lte": lambda value, bound: value <= bound,
}


def _matches(record: PriceAlertRecord, query: AlertQuery) -> bool:
    for field_name, condition in query.items():
        if field_name != "date":
            raise ValueError(f"Unsupported query field: {field_name}")
        value: datetime = record.date
        for op, bound in condition.items():
            try:
                compare = _OPERATORS[op]
            except KeyError:
                raise ValueError(f"Unsupported query operator: {op}") from None
            if not compare(value, bound):
                return False
    return True


class InMemoryPriceAlertHistoryStore(PriceAlertHistoryStore):
    """List-backed store understanding the date-range subset of Mongo queries.

    Useful for dry runs and tests; not shared across processes.
    """

    def __init__(self, records: Iterable[PriceAlertRecord] = ()) -> None:
        self._records: list[PriceAlertRecord] = list(records)

    @property
    def records(self) -> tuple[PriceAlertRecord, ...]:
        return tuple(self._records)

    def find_alerts(self, *, query: AlertQuery) -> Iterator[PriceAlertRecord]:
        snapshot = [r for r in self._records if _matches(r, query)]
        return iter(snapshot)

    def delete_alerts(self, *, query: AlertQuery) -> int:
        kept = [r for r in self._records if not _matches(r, query)]
        deleted = len(self._records) - len(kept)
        self._records = kept
        return deleted
