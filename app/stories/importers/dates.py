import re
from datetime import date, datetime

DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%m/%d/%y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%B %d %Y",
    "%d %b %Y",
    "%d %B %Y",
]

_DAY_MONTH = re.compile(r"^(\d{1,2})-([A-Za-z]{3})$")
_ISO_DATETIME = re.compile(r"^(\d{4}-\d{1,2}-\d{1,2})[T ]\S+$")


def parse_flexible_date(raw: str | None, today: date | None = None) -> date | None:
    """Parse a date cell into a plain calendar date, or None if unparseable.

    Time-of-day and UTC offsets are dropped without conversion so the calendar
    day written in the file is the day stored.
    """
    if raw is None:
        return None
    cleaned = raw.strip()
    if not cleaned:
        return None

    match = _DAY_MONTH.match(cleaned)
    if match:
        return _day_month(int(match.group(1)), match.group(2), today or date.today())

    iso = _ISO_DATETIME.match(cleaned)
    if iso:
        cleaned = iso.group(1)

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    return None


def _day_month(day: int, month_abbr: str, today: date) -> date | None:
    try:
        month = datetime.strptime(month_abbr.title(), "%b").month
    except ValueError:
        return None

    year = today.year
    # "29-Feb" in a non-leap year lands on the 28th
    if month == 2 and day == 29 and not _is_leap(year):
        day = 28
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)
