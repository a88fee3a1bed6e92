"""MongoDB storage.

Notes
- We avoid logging connection options to prevent accidental secret leakage.
- A single MongoHandle should be shared by every store in the process.
"""

from .config import (
    MongoConfig,
    MongoConnectionParams,
    MongoOptionsConfig,
    build_connection_params,
    load_mongo_config,
)
from .handle import MongoHandle
from .stores import DEFAULT_COLLECTION, MongoPriceAlertHistoryStore
