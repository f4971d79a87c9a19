from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

# Bucket keys are plain strings; calendar values are rendered in this format.
DATE_KEY_FORMAT = "%m/%d/%Y"

_INPUT_FORMATS = ("%m/%d/%Y", "%Y-%m-%d", "%m/%d/%y", "%d-%b-%Y", "%b %d %Y")


def format_date_key(d: date) -> str:
    """Render a calendar date as a bucket key, e.g. ``03/01/2022``."""
    return d.strftime(DATE_KEY_FORMAT)


def coerce_date_key(value: Any) -> Optional[str]:
    """
    Convert a cell/record value into a date bucket key (or None when blank).

    Dates, datetimes and pandas timestamps are formatted with DATE_KEY_FORMAT.
    Strings that parse as a date in one of the common formats are normalised
    too; anything else is kept verbatim (the key is categorical, not numeric).
    """
    if value is None:
        return None
    # NaN / NaT never compare equal to themselves; pd.NA refuses to compare at all.
    try:
        if value != value:
            return None
    except TypeError:
        return None
    if isinstance(value, datetime):
        return format_date_key(value.date())
    if isinstance(value, date):
        return format_date_key(value)
    # pandas sometimes gives Timestamp subclasses we did not catch above
    if hasattr(value, "to_pydatetime"):
        return format_date_key(value.to_pydatetime().date())

    v = str(value).strip()
    if not v:
        return None
    for fmt in _INPUT_FORMATS:
        try:
            return format_date_key(datetime.strptime(v, fmt).date())
        except ValueError:
            continue
    return v
