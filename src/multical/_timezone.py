"""Zone lookup and wall-clock reinterpretation helpers."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import ValidationError


def get_zone(name: str) -> ZoneInfo:
    """Resolve an IANA zone name, raising ValidationError if unknown."""
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"Invalid timezone: {name!r}")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as err:
        raise ValidationError(f"Invalid timezone: {name}") from err


def to_instant(wall: datetime, zone: ZoneInfo) -> datetime:
    """Interpret a naive wall-clock value in ``zone`` as an aware instant."""
    return wall.replace(tzinfo=zone)


def convert_wall_clock(wall: datetime, from_zone: ZoneInfo, to_zone: ZoneInfo) -> datetime:
    """Re-express a ``from_zone`` wall-clock value as ``to_zone`` wall clock.

    The result is naive with ``fold`` cleared. Wall-clock values inside a
    DST gap resolve with the pre-transition offset, which moves them forward
    by the length of the gap. A result in a repeated fall-back hour is
    ambiguous once naive; converting it back picks the first occurrence.
    """
    converted = to_instant(wall, from_zone).astimezone(to_zone)
    return converted.replace(tzinfo=None, fold=0)
