"""Date formatting used when wrapping date values."""

from datetime import date, datetime, time, tzinfo
from typing import Optional, Union

# Equivalent of the "yyyy-MM-dd HH:mm:ss" pattern.
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DateLike = Union[datetime, date, time]


class DateFormatter:
    """Formats date values into strings.

    Args:
        fmt: strftime pattern. None formats as ISO 8601.
        tz: Optional target timezone. Aware datetimes are converted to it
            before formatting; naive values are formatted as they are.

    Example:
        >>> formatter = DateFormatter("%d/%m/%Y")
        >>> formatter.format(date(2024, 3, 1))
        '01/03/2024'
    """

    def __init__(self, fmt: Optional[str] = DEFAULT_DATE_FORMAT, tz: Optional[tzinfo] = None):
        self.fmt = fmt
        self.tz = tz

    @classmethod
    def iso(cls, tz: Optional[tzinfo] = None) -> "DateFormatter":
        """Create a formatter producing ISO 8601 strings."""
        return cls(fmt=None, tz=tz)

    def format(self, value: DateLike) -> str:
        """Format a date, datetime or time value."""
        if (
            self.tz is not None
            and isinstance(value, datetime)
            and value.tzinfo is not None
        ):
            value = value.astimezone(self.tz)

        if self.fmt is None:
            return value.isoformat()
        return value.strftime(self.fmt)

    def __repr__(self) -> str:
        return f"DateFormatter(fmt={self.fmt!r}, tz={self.tz!r})"


__all__ = [
    "DEFAULT_DATE_FORMAT",
    "DateFormatter",
]
