"""Application search – DateRange and DateRangeResolver.

Symbolic tokens are resolved against the resolver clock at call time.
Month tokens all end on the last day of the previous calendar month; only
their lower bound moves back::

    last-month     [start of month -1, end of month -1]
    last-2-months  [start of month -2, end of month -1]
    last-3-months  [start of month -3, end of month -1]
"""
from __future__ import annotations

import dataclasses
import logging
from enum import Enum
from typing import Any

import pendulum

from mp_search.kernel.errors import InvalidDateFormatError, InvalidDateRangeError
from mp_search.kernel.time import Clock, SystemClock

logger = logging.getLogger(__name__)

DATETIME_FORMAT = "YYYY-MM-DD HH:mm:ss"
# the same layout in Elasticsearch (Joda/java.time) notation
ENGINE_DATETIME_FORMAT = "yyyy-MM-dd HH:mm:ss"


class RangeToken(str, Enum):
    ALL_TIME = "all-time"
    CUSTOM = "custom"
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_MONTH = "this-month"
    LAST_MONTH = "last-month"
    LAST_2_MONTHS = "last-2-months"
    LAST_3_MONTHS = "last-3-months"
    LAST_7_DAYS = "last-7-days"


_MONTHS_BACK = {
    RangeToken.LAST_MONTH: 1,
    RangeToken.LAST_2_MONTHS: 2,
    RangeToken.LAST_3_MONTHS: 3,
}


@dataclasses.dataclass(frozen=True)
class DateRange:
    """A pair of absolute instants; ``None`` marks an open bound."""

    start: pendulum.DateTime | None
    end: pendulum.DateTime | None

    @property
    def is_bounded(self) -> bool:
        return self.start is not None and self.end is not None

    @classmethod
    def for_day(cls, day: pendulum.DateTime) -> DateRange:
        return cls(day.start_of("day"), day.end_of("day"))

    def as_bounds(self, fmt: str | None = None) -> dict[str, Any]:
        """``{"from": ..., "to": ...}``, formatted with a pendulum token format if given."""
        return {"from": _format(self.start, fmt), "to": _format(self.end, fmt)}

    def to_range_clause(self, field: str, timezone: str) -> dict[str, Any]:
        bounds: dict[str, Any] = {}
        if self.start is not None:
            bounds["gte"] = self.start.format(DATETIME_FORMAT)
        if self.end is not None:
            bounds["lte"] = self.end.format(DATETIME_FORMAT)
        if not bounds:
            raise InvalidDateRangeError("Cannot build a range clause without any bound")
        bounds["format"] = ENGINE_DATETIME_FORMAT
        bounds["time_zone"] = timezone
        return {"range": {field: bounds}}


@dataclasses.dataclass(frozen=True)
class DateRangeResolution:
    """Outcome of parsing explicit bounds, with the bounds that were replaced."""

    range: DateRange
    invalid_start: bool = False
    invalid_end: bool = False


def _format(value: pendulum.DateTime | None, fmt: str | None) -> Any:
    if value is None or fmt is None:
        return value
    return value.format(fmt)


class DateRangeResolver:
    """Turn range tokens or explicit bounds into :class:`DateRange` values."""

    def __init__(self, clock: Clock | None = None, timezone: str = "UTC") -> None:
        self._clock = clock or SystemClock(timezone)
        self._timezone = timezone

    @property
    def timezone(self) -> str:
        return self._timezone

    def now(self) -> pendulum.DateTime:
        return self._clock.now().in_timezone(self._timezone)

    def resolve_token(self, token: str | RangeToken | None) -> DateRange:
        """Resolve a symbolic token; unknown tokens mean the last seven days."""
        now = self.now()
        try:
            kind = RangeToken(token)
        except ValueError:
            kind = RangeToken.LAST_7_DAYS

        if kind is RangeToken.TODAY:
            return DateRange.for_day(now)
        if kind is RangeToken.YESTERDAY:
            return DateRange.for_day(now.subtract(days=1))
        if kind is RangeToken.THIS_MONTH:
            return DateRange(now.start_of("month"), now.end_of("day"))
        if kind in _MONTHS_BACK:
            return DateRange(
                now.subtract(months=_MONTHS_BACK[kind]).start_of("month"),
                now.subtract(months=1).end_of("month"),
            )
        return self._last_seven_days(now)

    def parse_bound(self, text: str, *, end: bool = False) -> pendulum.DateTime:
        """Parse one explicit bound, snapped to start (or end) of its day.

        Raises :class:`InvalidDateFormatError` when *text* is not a date.
        """
        try:
            parsed = pendulum.parse(str(text), tz=self._timezone, strict=False)
        except (ValueError, TypeError, OverflowError) as exc:
            raise InvalidDateFormatError(text, str(exc)) from exc
        if isinstance(parsed, pendulum.DateTime):
            moment = parsed
        elif isinstance(parsed, pendulum.Date):
            moment = pendulum.datetime(parsed.year, parsed.month, parsed.day, tz=self._timezone)
        else:
            raise InvalidDateFormatError(text, "not a calendar date")
        return moment.end_of("day") if end else moment.start_of("day")

    def parse_explicit(self, start_text: str | None, end_text: str | None) -> DateRangeResolution:
        """Parse explicit bounds; each malformed bound falls back on its own.

        Fallbacks: start → start of the day one week ago, end → end of
        yesterday. Empty bounds stay open.
        """
        now = self.now()
        start = end = None
        invalid_start = invalid_end = False

        if start_text:
            try:
                start = self.parse_bound(start_text)
            except InvalidDateFormatError:
                logger.warning("search.invalid_start value=%r", start_text)
                invalid_start = True
                start = now.subtract(weeks=1).start_of("day")

        if end_text:
            try:
                end = self.parse_bound(end_text, end=True)
            except InvalidDateFormatError:
                logger.warning("search.invalid_end value=%r", end_text)
                invalid_end = True
                end = now.subtract(days=1).end_of("day")

        return DateRangeResolution(DateRange(start, end), invalid_start, invalid_end)

    def expand_to_daily_buckets(self, date_range: DateRange) -> list[DateRange]:
        """One bucket per calendar day from start to end, both included.

        When start and end are less than two days apart only the two boundary
        buckets are produced, even for a single-day range.
        """
        if not date_range.is_bounded:
            raise InvalidDateRangeError("Daily buckets need both a start and an end")
        first = date_range.start.in_timezone(self._timezone).start_of("day")  # type: ignore[union-attr]
        last = date_range.end.in_timezone(self._timezone).start_of("day")  # type: ignore[union-attr]
        num_days = first.diff(last).in_days()

        buckets = [DateRange.for_day(first)]
        buckets.extend(DateRange.for_day(first.add(days=offset)) for offset in range(1, num_days))
        buckets.append(DateRange.for_day(last))
        return buckets

    def _last_seven_days(self, now: pendulum.DateTime) -> DateRange:
        return DateRange(now.subtract(weeks=1).start_of("day"), now.subtract(days=1).end_of("day"))


__all__ = [
    "DATETIME_FORMAT",
    "ENGINE_DATETIME_FORMAT",
    "DateRange",
    "DateRangeResolution",
    "DateRangeResolver",
    "RangeToken",
]
