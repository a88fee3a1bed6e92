#!/usr/bin/env python3
"""Archive and purge price alert history.

Exports the priceAlertHistory records inside the retention window to
``priceAlertHistoryLog-<YYYY-MM-DD>.csv`` and then deletes them from MongoDB.
Designed to be run once per invocation from cron or a systemd timer.

Usage:
    python scripts/archive_price_alerts.py
    python scripts/archive_price_alerts.py --config mongo.json --archive-dir /var/archive
    python scripts/archive_price_alerts.py --retention-hours 168 --dry-run

Environment:
    MONGO_HOST, MONGO_PORT, MONGO_USER, MONGO_PASS, MONGO_DB,
    MONGO_RETRY_WRITES, MONGO_WRITE_CONCERN, MONGO_REPLICA_SET
    PRICE_ALERT_RETENTION_HOURS (default: 24)
    PRICE_ALERT_ARCHIVE_DIR (default: current directory)
    PRICE_ALERT_COLLECTION (default: priceAlertHistory)

Exit codes:
  0 = run completed (including "nothing to archive")
  1 = configuration error, MongoDB connection failure, or archive write failure
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import timedelta
from pathlib import Path
from typing import Sequence

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pricealert.persistence.errors import ArchiveWriteError, StoreConnectionError  # noqa: E402
from pricealert.retention.purge import PriceAlertPurgeJob  # noqa: E402
from pricealert.storage.mongo import (  # noqa: E402
    DEFAULT_COLLECTION,
    MongoConfig,
    MongoHandle,
    MongoPriceAlertHistoryStore,
    load_mongo_config,
)

logger = logging.getLogger("price-alert-archiver")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Archive price alert history to CSV, then purge it from MongoDB.")
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with Mongo connection settings (default: MONGO_* environment variables)",
    )
    p.add_argument(
        "--retention-hours",
        type=float,
        default=float(os.getenv("PRICE_ALERT_RETENTION_HOURS", "24")),
        help="Retention window in hours (default: 24; 168 for a week)",
    )
    p.add_argument(
        "--archive-dir",
        type=Path,
        default=Path(os.getenv("PRICE_ALERT_ARCHIVE_DIR", ".")),
        help="Directory for the CSV archive (default: current directory)",
    )
    p.add_argument(
        "--collection",
        default=os.getenv("PRICE_ALERT_COLLECTION", DEFAULT_COLLECTION),
        help=f"Collection name (default: {DEFAULT_COLLECTION})",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Write the archive but do not delete anything",
    )
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _load_config(path: Path | None) -> MongoConfig:
    if path is not None:
        return load_mongo_config(path)
    return MongoConfig.from_env()


def main(argv: Sequence[str] | None = None) -> int:
    try:
        args = parse_args(argv)
    except ValueError as exc:
        # Malformed PRICE_ALERT_RETENTION_HOURS in the environment.
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    _configure_logging(args.verbose)
    logger.info("Starting price alert archive script")

    try:
        config = _load_config(args.config)
        job_retention = timedelta(hours=args.retention_hours)
        handle = MongoHandle(config=config)
        store = MongoPriceAlertHistoryStore(handle=handle, collection=args.collection)
        job = PriceAlertPurgeJob(
            store=store,
            archive_dir=args.archive_dir,
            retention=job_retention,
            dry_run=args.dry_run,
        )
    except (OSError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    try:
        summary = job.run()
    except StoreConnectionError:
        logger.exception("MongoDB connection failed")
        return 1
    except ArchiveWriteError:
        logger.exception("Archive write failed")
        return 1

    logger.info(
        "Price alert archive finished: fetched=%d deleted=%d archive=%s",
        summary.fetched,
        summary.deleted,
        summary.archive_path,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
