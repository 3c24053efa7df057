import re
from datetime import date, datetime, timezone

from .exceptions import InvalidDate

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATE_FORMAT_HELP = "Date must be in YYYY-MM-DD format"


def parse_date(text: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string into a ``date``."""
    text = (text or "").strip()
    if not _DATE_RE.match(text):
        raise InvalidDate(DATE_FORMAT_HELP)
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        # right shape, out of range (e.g. 2024-13-45)
        raise InvalidDate(DATE_FORMAT_HELP) from None


def date_to_epoch(day: date) -> int:
    """Unix timestamp of ``day`` at midnight UTC."""
    return int(datetime(day.year, day.month, day.day, tzinfo=timezone.utc).timestamp())
