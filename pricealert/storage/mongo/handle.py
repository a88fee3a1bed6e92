from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from pricealert.persistence.errors import StoreConnectionError
from pricealert.storage.mongo.config import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    MongoConfig,
    build_connection_params,
)

logger = logging.getLogger(__name__)


class MongoHandle:
    """Process-wide MongoDB handle.

    Construct once at startup and pass it to whatever needs the database.
    The client is created lazily on the first ``get_database()`` call, at most
    once, even when several threads race on first use. There is no reconnect
    path: a connected client is reused for the lifetime of the handle.
    """

    def __init__(
        self,
        *,
        config: MongoConfig,
        client_factory: Callable[..., Any] = MongoClient,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS,
    ) -> None:
        self._config = config
        self._client_factory = client_factory
        self._connect_timeout = connect_timeout
        self._client: Any | None = None
        self._lock = threading.Lock()

    @property
    def connected(self) -> bool:
        return self._client is not None

    def _connect(self) -> Any:
        params = build_connection_params(self._config, timeout_seconds=self._connect_timeout)
        # Do not log the URI options (they may contain credentials).
        logger.info(
            "Connecting to MongoDB at %s:%s (db=%s)",
            self._config.host,
            self._config.port,
            self._config.name,
        )
        client = None
        try:
            client = self._client_factory(params.uri, **params.options)
            client.admin.command("ping")
        except PyMongoError as exc:
            logger.debug("MongoDB connect attempt failed: %s", exc)
            if client is not None:
                client.close()
            raise StoreConnectionError(
                f"Unable to connect to MongoDB at {self._config.host}:{self._config.port}"
            ) from exc
        return client

    def get_client(self) -> Any:
        client = self._client
        if client is None:
            with self._lock:
                if self._client is None:
                    self._client = self._connect()
                client = self._client
        return client

    def get_database(self) -> Any:
        """Return the configured database, connecting on first use."""
        return self.get_client()[self._config.name]
