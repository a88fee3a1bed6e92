"""Export module."""

from pricealert.export.csv import archive_filename, iter_price_alert_rows, write_price_alert_archive

__all__ = [
    "archive_filename",
    "iter_price_alert_rows",
    "write_price_alert_archive",
]
