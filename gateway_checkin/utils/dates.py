"""Calendar date helpers for check-in dates."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from gateway_checkin.models.checkin import CHECKIN_DATE_FORMAT

MONTH_FORMAT = "%Y-%m"


def local_today(tz_name: str | None = None) -> date:
    """Today's date in the given IANA zone, or in server local time."""
    if tz_name:
        return datetime.now(ZoneInfo(tz_name)).date()
    return datetime.now().astimezone().date()


def format_date(value: date) -> str:
    return value.strftime(CHECKIN_DATE_FORMAT)


def parse_date(value: str) -> date | None:
    """Parse YYYY-MM-DD; None when malformed."""
    try:
        return datetime.strptime(value, CHECKIN_DATE_FORMAT).date()
    except (TypeError, ValueError):
        return None


def format_month(value: date) -> str:
    return value.strftime(MONTH_FORMAT)


def parse_month(value: str) -> date | None:
    """Parse YYYY-MM into the first day of that month; None when malformed."""
    try:
        return datetime.strptime(value, MONTH_FORMAT).date()
    except (TypeError, ValueError):
        return None
