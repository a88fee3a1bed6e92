from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional

from pricealert.export.csv import write_price_alert_archive
from pricealert.persistence.errors import StoreError
from pricealert.persistence.interfaces import AlertQuery, PriceAlertHistoryStore, alert_window_query
from pricealert.types import PriceAlertRecord

logger = logging.getLogger(__name__)

DEFAULT_RETENTION = timedelta(hours=24)
# WEEKLY_RETENTION = timedelta(hours=168)

ArchiveWriter = Callable[..., Path]


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True)
class PurgeSummary:
    cutoff: datetime
    fetched: int
    deleted: int
    archive_path: Optional[Path] = None
    read_failed: bool = False
    delete_failed: bool = False
    dry_run: bool = False


class PriceAlertPurgeJob:
    """Extract, archive, then purge price alerts newer than the cutoff.

    The same query object is used for the read and the delete, so whatever was
    archived is exactly what gets purged. Steps are strictly sequential and the
    delete is only issued after the archive file has been written.

    Error policy:
    - StoreError on read or delete is logged and the run continues.
    - ArchiveWriteError and StoreConnectionError propagate (fatal).
    """

    def __init__(
        self,
        *,
        store: PriceAlertHistoryStore,
        archive_dir: Path | str = Path("."),
        retention: timedelta = DEFAULT_RETENTION,
        now: Callable[[], datetime] = _utc_now,
        today: Callable[[], date] = date.today,
        archive_writer: ArchiveWriter = write_price_alert_archive,
        dry_run: bool = False,
    ) -> None:
        if retention <= timedelta(0):
            raise ValueError("retention must be positive")
        self._store = store
        self._archive_dir = Path(archive_dir)
        self._retention = retention
        self._now = now
        self._today = today
        self._archive_writer = archive_writer
        self._dry_run = dry_run

    def _fetch(self, query: AlertQuery) -> tuple[list[PriceAlertRecord], bool]:
        records: list[PriceAlertRecord] = []
        try:
            # Materialize eagerly; windows are small enough to hold in memory.
            for record in self._store.find_alerts(query=query):
                records.append(record)
        except StoreError as exc:
            logger.error("Reading price alerts failed after %d records: %s", len(records), exc)
            return records, True
        return records, False

    def run(self) -> PurgeSummary:
        logger.info("Starting price alert archive job")
        cutoff = self._now() - self._retention
        logger.info("Target: priceAlertHistory records with date > %s", cutoff.isoformat())

        query = alert_window_query(cutoff)

        records, read_failed = self._fetch(query)
        logger.info("Total: %d price alerts", len(records))

        if not records:
            logger.info("No price alerts to archive. Done.")
            return PurgeSummary(cutoff=cutoff, fetched=0, deleted=0, read_failed=read_failed, dry_run=self._dry_run)

        archive_path = self._archive_writer(records, directory=self._archive_dir, today=self._today())

        if self._dry_run:
            logger.info("Dry run: skipping delete of %d price alerts", len(records))
            return PurgeSummary(
                cutoff=cutoff,
                fetched=len(records),
                deleted=0,
                archive_path=archive_path,
                read_failed=read_failed,
                dry_run=True,
            )

        deleted = 0
        delete_failed = False
        try:
            deleted = self._store.delete_alerts(query=query)
        except StoreError as exc:
            # The archive stays on disk; records remain in the store for the next run.
            logger.error("Deleting price alerts failed: %s", exc)
            delete_failed = True

        if not delete_failed and deleted != len(records):
            logger.warning("Archived %d price alerts but deleted %d", len(records), deleted)

        logger.info("Deleted %d price alerts", deleted)
        logger.info("Price alert archive job complete")
        return PurgeSummary(
            cutoff=cutoff,
            fetched=len(records),
            deleted=deleted,
            archive_path=archive_path,
            read_failed=read_failed,
            delete_failed=delete_failed,
        )
