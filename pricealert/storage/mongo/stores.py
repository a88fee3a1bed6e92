from __future__ import annotations

import logging
from typing import Iterator

from pymongo.errors import PyMongoError

from pricealert.persistence.errors import StoreError
from pricealert.persistence.interfaces import AlertQuery, PriceAlertHistoryStore
from pricealert.storage.mongo.handle import MongoHandle
from pricealert.types import PriceAlertRecord

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "priceAlertHistory"


class MongoPriceAlertHistoryStore(PriceAlertHistoryStore):
    """``priceAlertHistory`` collection backed by a shared MongoHandle.

    Connection failures surface as StoreConnectionError from the handle;
    query failures are wrapped in StoreError.
    """

    def __init__(self, *, handle: MongoHandle, collection: str = DEFAULT_COLLECTION) -> None:
        self._handle = handle
        self._collection_name = collection

    def _collection(self):
        return self._handle.get_database()[self._collection_name]

    def find_alerts(self, *, query: AlertQuery) -> Iterator[PriceAlertRecord]:
        collection = self._collection()
        try:
            cursor = collection.find(query)
        except PyMongoError as exc:
            raise StoreError(f"find on {self._collection_name} failed: {exc}") from exc

        try:
            for doc in cursor:
                yield PriceAlertRecord.from_document(doc)
        except PyMongoError as exc:
            raise StoreError(f"reading {self._collection_name} cursor failed: {exc}") from exc
        finally:
            cursor.close()

    def delete_alerts(self, *, query: AlertQuery) -> int:
        collection = self._collection()
        try:
            result = collection.delete_many(query)
        except PyMongoError as exc:
            raise StoreError(f"delete_many on {self._collection_name} failed: {exc}") from exc
        return int(result.deleted_count)
