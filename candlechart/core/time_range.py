"""
Time Range Utility

Wire timestamp format and start/end range selection shared by the
candle, indicator and Fibonacci endpoints.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from candlechart.services.base import ValidationError

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Accepted on input only; output always uses TIMESTAMP_FORMAT
_INPUT_FORMATS = (TIMESTAMP_FORMAT, "%Y-%m-%dT%H:%M:%S")


@dataclass(frozen=True)
class TimeRange:
    """Inclusive [start, end] interval over candle timestamps."""

    start: datetime
    end: datetime


def format_timestamp(ts: datetime) -> str:
    """Format a timestamp for the wire ("YYYY-MM-DD HH:MM:SS")."""
    return ts.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str, field: str = "timestamp") -> datetime:
    """Parse a wire timestamp, raising ValidationError when malformed."""
    text = value.strip()
    for fmt in _INPUT_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValidationError(
        "RangeSelection",
        f"Invalid {field} '{value}': expected YYYY-MM-DD HH:MM:SS",
        {"field": field, "value": value},
    )


def select_range(
    start: Optional[str] = None, end: Optional[str] = None
) -> Optional[TimeRange]:
    """
    Resolve optional start/end query bounds.

    Returns None when neither bound is given (use the full series).
    Both bounds or neither must be supplied; a lone bound, a malformed
    bound or start > end is rejected.
    """
    if start is None and end is None:
        return None

    if start is None or end is None:
        missing = "start" if start is None else "end"
        raise ValidationError(
            "RangeSelection",
            f"Both start and end are required when selecting a range (missing {missing})",
            {"missing": missing},
        )

    time_range = TimeRange(
        start=parse_timestamp(start, "start"),
        end=parse_timestamp(end, "end"),
    )
    if time_range.start > time_range.end:
        raise ValidationError(
            "RangeSelection",
            f"start ({start}) is after end ({end})",
            {"start": start, "end": end},
        )
    return time_range
