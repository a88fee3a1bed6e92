"""Tests for MongoPriceAlertHistoryStore.

The handle is mocked; no MongoDB server is needed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from pymongo.errors import OperationFailure

from pricealert.persistence.errors import StoreConnectionError, StoreError
from pricealert.persistence.interfaces import alert_window_query
from pricealert.storage.mongo.stores import MongoPriceAlertHistoryStore
from pricealert.types import PriceAlertRecord

CUTOFF = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _store_with_collection(collection: MagicMock, name: str = "priceAlertHistory"):
    handle = MagicMock()
    database = MagicMock()
    database.__getitem__.return_value = collection
    handle.get_database.return_value = database
    return MongoPriceAlertHistoryStore(handle=handle, collection=name), handle, database


def test_find_alerts_maps_documents():
    docs = [
        {"_id": 1, "date": datetime(2024, 1, 1, 1, tzinfo=timezone.utc), "productId": "P1", "price": 9.99},
        {"_id": 2, "date": datetime(2024, 1, 1, 2, tzinfo=timezone.utc), "productId": "P2", "price": 5},
    ]
    cursor = MagicMock()
    cursor.__iter__.return_value = iter(docs)
    collection = MagicMock()
    collection.find.return_value = cursor
    store, _, database = _store_with_collection(collection)
    query = alert_window_query(CUTOFF)

    records = list(store.find_alerts(query=query))

    collection.find.assert_called_once_with(query)
    database.__getitem__.assert_called_with("priceAlertHistory")
    assert records == [
        PriceAlertRecord(date=docs[0]["date"], product_id="P1", price=9.99),
        PriceAlertRecord(date=docs[1]["date"], product_id="P2", price=5.0),
    ]
    cursor.close.assert_called_once()


def test_find_alerts_wraps_driver_errors():
    collection = MagicMock()
    collection.find.side_effect = OperationFailure("boom")
    store, _, _ = _store_with_collection(collection)

    with pytest.raises(StoreError):
        list(store.find_alerts(query=alert_window_query(CUTOFF)))


def test_find_alerts_wraps_cursor_errors_mid_stream():
    def failing_iter():
        yield {"date": CUTOFF, "productId": "P1", "price": 1.0}
        raise OperationFailure("cursor killed")

    cursor = MagicMock()
    cursor.__iter__.return_value = failing_iter()
    collection = MagicMock()
    collection.find.return_value = cursor
    store, _, _ = _store_with_collection(collection)

    stream = store.find_alerts(query=alert_window_query(CUTOFF))
    assert next(stream).product_id == "P1"
    with pytest.raises(StoreError):
        next(stream)


def test_connection_error_is_not_wrapped():
    store, handle, _ = _store_with_collection(MagicMock())
    handle.get_database.side_effect = StoreConnectionError("down")

    with pytest.raises(StoreConnectionError):
        store.delete_alerts(query=alert_window_query(CUTOFF))


def test_delete_alerts_returns_deleted_count():
    collection = MagicMock()
    collection.delete_many.return_value.deleted_count = 3
    store, _, _ = _store_with_collection(collection, name="custom")
    query = alert_window_query(CUTOFF)

    assert store.delete_alerts(query=query) == 3
    collection.delete_many.assert_called_once_with(query)


def test_delete_alerts_wraps_driver_errors():
    collection = MagicMock()
    collection.delete_many.side_effect = OperationFailure("not primary")
    store, _, _ = _store_with_collection(collection)

    with pytest.raises(StoreError):
        store.delete_alerts(query=alert_window_query(CUTOFF))


def test_from_document_zero_values():
    record = PriceAlertRecord.from_document({"date": CUTOFF})
    assert record.product_id == ""
    assert record.price == 0.0


def test_from_document_missing_date_is_aware():
    record = PriceAlertRecord.from_document({"productId": "P1", "price": 1.0})
    assert record.date == datetime.min.replace(tzinfo=timezone.utc)
    assert record.date.tzinfo is not None
