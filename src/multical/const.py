"""Constants for the multical calendar engine."""

from datetime import time
from typing import Final

__version__ = "0.1.0"

DEFAULT_TIMEZONE: Final = "UTC"

ALL_DAY_START: Final = time(8, 0)
ALL_DAY_END: Final = time(17, 0)

# Day-boundary reference for the tolerant date-overlap window.
LAST_MINUTE_OF_DAY: Final = time(23, 59)

# Weekday symbols in Monday-first order, matching ``date.weekday()``.
WEEKDAY_CODES: Final = "MTWRFSU"

MAX_OCCURRENCES: Final = 5000  # per series

PROP_SUBJECT: Final = "subject"
PROP_START: Final = "start"
PROP_END: Final = "end"
PROP_DESCRIPTION: Final = "description"
PROP_LOCATION: Final = "location"
PROP_STATUS: Final = "status"

EDITABLE_PROPERTIES: Final = frozenset(
    {
        PROP_SUBJECT,
        PROP_START,
        PROP_END,
        PROP_DESCRIPTION,
        PROP_LOCATION,
        PROP_STATUS,
    }
)
IDENTITY_PROPERTIES: Final = frozenset({PROP_SUBJECT, PROP_START, PROP_END})

DEFAULT_SCHEDULE_LIMIT: Final = 10
