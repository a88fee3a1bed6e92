"""Shared test fixtures for pytest.

Provides sample price alerts, a fixed clock and a Mongo client double used
across multiple test files.
"""

from __future__ import annotations

import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pricealert.types import PriceAlertRecord  # noqa: E402

FIXED_NOW = datetime(2024, 1, 2, 12, 0, 0, tzinfo=timezone.utc)
FIXED_TODAY = date(2024, 1, 2)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def fixed_today() -> date:
    return FIXED_TODAY


@pytest.fixture
def sample_alerts() -> list[PriceAlertRecord]:
    """Three alerts inside the default 24h window ending at FIXED_NOW."""
    return [
        PriceAlertRecord(date=FIXED_NOW - timedelta(hours=h), product_id=f"P{h}", price=9.99 + h)
        for h in (1, 2, 3)
    ]


@pytest.fixture
def mock_mongo_client() -> MagicMock:
    """MongoClient double whose ping succeeds."""
    client = MagicMock(name="MongoClient")
    client.admin.command.return_value = {"ok": 1.0}
    return client
