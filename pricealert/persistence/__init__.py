"""Persistence boundary.

The purge job only talks to a PriceAlertHistoryStore; concrete stores live in
pricealert.storage.
"""

from .errors import ArchiveWriteError, StoreConnectionError, StoreError
from .interfaces import AlertQuery, PriceAlertHistoryStore, alert_window_query
