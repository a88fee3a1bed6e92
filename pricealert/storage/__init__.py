"""Storage implementations of the persistence interfaces."""

from .memory_stores import InMemoryPriceAlertHistoryStore
from .mongo import (
    DEFAULT_COLLECTION,
    MongoConfig,
    MongoHandle,
    MongoOptionsConfig,
    MongoPriceAlertHistoryStore,
    load_mongo_config,
)
