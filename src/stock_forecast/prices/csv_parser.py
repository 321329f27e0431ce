"""CSV parser: turns historical and forecast blobs into PricePoint series.

Blob format: comma-separated, header row first, a ``ds`` date column and a
price column named ``c`` (historical) or ``pred_price`` (forecast). Header
names match case-insensitively; double quotes are stripped from every cell.
Quoted commas are not supported.
"""

from __future__ import annotations

import logging
import math
from datetime import UTC, datetime

from stock_forecast.core.models import PricePoint, SeriesMode

logger = logging.getLogger(__name__)

DATE_COLUMN = "ds"
_BOM = "\ufeff"
PRICE_COLUMNS: dict[SeriesMode, str] = {
    SeriesMode.HISTORICAL: "c",
    SeriesMode.FORECAST: "pred_price",
}


def _clean(cell: str) -> str:
    return cell.strip().replace('"', "").strip()


def parse_timestamp(value: str) -> float | None:
    """Return a POSIX timestamp for ``value``, or None if unparseable.

    Accepts ISO-8601 dates and datetimes. Naive values are taken as UTC.
    """
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.timestamp()


def _parse_price(value: str) -> float | None:
    try:
        price = float(value)
    except ValueError:
        return None
    return price if math.isfinite(price) else None


class CsvParser:
    """Parses raw CSV text into a date-sorted price series.

    Malformed data never raises. A missing required column yields an empty
    series; a malformed row is dropped.

    Parameters
    ----------
    date_column : str
        Header name of the date column. Default: ``ds``.
    price_columns : dict[SeriesMode, str] | None
        Header name of the price column per mode. Default: ``c`` for
        historical, ``pred_price`` for forecast.
    """

    def __init__(
        self,
        date_column: str = DATE_COLUMN,
        price_columns: dict[SeriesMode, str] | None = None,
    ) -> None:
        self._date_column = date_column.lower()
        self._price_columns = {
            mode: name.lower() for mode, name in (price_columns or PRICE_COLUMNS).items()
        }

    def parse(self, raw_text: str, mode: SeriesMode) -> list[PricePoint]:
        """Parse ``raw_text`` into points sorted ascending by date.

        Parameters
        ----------
        raw_text : str
            Entire CSV blob contents.
        mode : SeriesMode
            Selects the price column and the ``is_forecast`` flag.

        Returns
        -------
        list[PricePoint]
            Stable-sorted by timestamp; rows with equal timestamps keep
            their input order.
        """
        lines = raw_text.lstrip(_BOM).strip().splitlines()
        if len(lines) < 2:
            return []

        headers = [_clean(h).lower() for h in lines[0].split(",")]
        price_column = self._price_columns[mode]
        try:
            date_idx = headers.index(self._date_column)
            price_idx = headers.index(price_column)
        except ValueError:
            logger.warning(
                "CSV missing required columns %r/%r (headers: %s); returning empty %s series",
                self._date_column,
                price_column,
                headers,
                mode.value,
            )
            return []

        min_columns = max(date_idx, price_idx) + 1
        is_forecast = mode == SeriesMode.FORECAST
        keyed: list[tuple[float, PricePoint]] = []
        dropped = 0

        for line in lines[1:]:
            columns = line.split(",")
            if len(columns) < min_columns:
                dropped += 1
                continue

            date_str = _clean(columns[date_idx])
            price = _parse_price(_clean(columns[price_idx]))
            if not date_str or price is None:
                dropped += 1
                continue

            ts = parse_timestamp(date_str)
            if ts is None:
                dropped += 1
                continue

            keyed.append(
                (ts, PricePoint(date=date_str, price=price, is_forecast=is_forecast))
            )

        if dropped:
            logger.debug("Dropped %d malformed %s rows", dropped, mode.value)

        keyed.sort(key=lambda item: item[0])
        return [point for _, point in keyed]


def parse_csv(raw_text: str, mode: SeriesMode) -> list[PricePoint]:
    """Convenience function: parse with the default column names."""
    return CsvParser().parse(raw_text, mode)
