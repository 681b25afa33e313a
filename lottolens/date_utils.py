"""
Date Utilities - LottoLens
==========================

Permissive parsing of draw dates. Datasets publish dates in several
shapes (ISO, day-first with dashes or slashes, full ISO datetimes), so
parsing tries each known format in turn and reports failure as None
instead of raising.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Union
from loguru import logger


class DateManager:
    """
    Central place for draw-date handling.

    Supported inputs:
    - YYYY-MM-DD / YYYY/MM/DD
    - DD-MM-YYYY / DD/MM/YYYY
    - ISO datetimes (date part is used)
    - date / datetime objects
    """

    DATE_FORMATS = (
        "%Y-%m-%d",
        "%d-%m-%Y",
        "%Y/%m/%d",
        "%d/%m/%Y",
    )

    OUTPUT_FORMAT = "%Y-%m-%d"

    @classmethod
    def parse_draw_date(cls, value: Union[str, date, datetime, None]) -> Optional[date]:
        """
        Parse a draw date in any supported format.

        Args:
            value: Raw date value from the dataset

        Returns:
            date or None if the value cannot be parsed
        """
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value

        text = str(value).strip()
        if not text:
            return None

        for fmt in cls.DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue

        # ISO datetime such as 2024-01-05T00:00:00Z
        if "T" in text:
            try:
                return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            except ValueError:
                pass

        logger.debug(f"Unparseable draw date: {value!r}")
        return None

    @classmethod
    def format_date(cls, value: date) -> str:
        return value.strftime(cls.OUTPUT_FORMAT)

    @classmethod
    def next_day(cls, value: date) -> date:
        """Day after the given draw date"""
        return value + timedelta(days=1)


# Module-level shortcuts
def parse_draw_date(value) -> Optional[date]:
    return DateManager.parse_draw_date(value)


def format_date(value: date) -> str:
    return DateManager.format_date(value)
