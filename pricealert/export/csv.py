"""CSV archive writer for price alert history."""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Iterator

from pricealert.persistence.errors import ArchiveWriteError
from pricealert.types import PriceAlertRecord

logger = logging.getLogger(__name__)

HEADER = ("date", "productId", "price")
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FILENAME_PREFIX = "priceAlertHistoryLog"

_UNSAFE_CHARS = (",", '"', "\n", "\r")


def archive_filename(today: date) -> str:
    return f"{FILENAME_PREFIX}-{today:%Y-%m-%d}.csv"


def _format_date(value: datetime) -> str:
    # Aware datetimes (pymongo tz_aware=True) are rendered as UTC wall-clock time.
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(DATE_FORMAT)


def _format_price(value: float) -> str:
    """Render a price the way Go prints a float64 with %v.

    Shortest round-trip digits, no trailing ".0", and exponent notation when
    the decimal exponent is below -4 or at least 6 (e.g. 100 and 1.234567e+06).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    if value == 0:
        return sign + "0"

    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    point = len(digits) + exponent
    exp = point - 1

    if exp < -4 or exp >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        return f"{sign}{mantissa}e{'-' if exp < 0 else '+'}{abs(exp):02d}"
    if point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return sign + digits + "0" * (point - len(digits))
    return f"{sign}{digits[:point]}.{digits[point:]}"


def iter_price_alert_rows(records: Iterable[PriceAlertRecord]) -> Iterator[str]:
    """Yield the archive lines: header first, then one line per record.

    Fields are written verbatim (no quoting). A product id containing a
    delimiter or line break produces a corrupt row; we warn instead of
    escaping so existing consumers keep parsing the file the same way.
    """
    yield ",".join(HEADER) + "\n"

    for record in records:
        if any(ch in record.product_id for ch in _UNSAFE_CHARS):
            logger.warning("productId %r contains CSV delimiters; row written unescaped", record.product_id)
        yield f"{_format_date(record.date)},{record.product_id},{_format_price(record.price)}\n"


def write_price_alert_archive(
    records: Iterable[PriceAlertRecord],
    *,
    directory: Path | str = Path("."),
    today: date | None = None,
) -> Path:
    """Write ``records`` to ``priceAlertHistoryLog-<today>.csv`` under ``directory``.

    The file starts with a UTF-8 byte-order mark. An existing file for the same
    day is overwritten.

    Raises:
        ArchiveWriteError: the file could not be created or written.
    """
    day = today or date.today()
    path = Path(directory) / archive_filename(day)

    rows = 0
    try:
        # utf-8-sig emits the BOM before the first write.
        with open(path, "w", encoding="utf-8-sig", newline="") as f:
            for line in iter_price_alert_rows(records):
                f.write(line)
                rows += 1
            f.flush()
    except OSError as exc:
        raise ArchiveWriteError(f"Unable to write archive {path}: {exc}") from exc

    logger.info("Wrote %d price alerts to %s", max(rows - 1, 0), path)
    return path
