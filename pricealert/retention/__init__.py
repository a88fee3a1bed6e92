"""Retention jobs (archive then purge)."""

from .purge import DEFAULT_RETENTION, PriceAlertPurgeJob, PurgeSummary
