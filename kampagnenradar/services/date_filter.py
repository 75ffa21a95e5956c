"""
Row-level date filtering for product and shop aggregation.

Bounds are inclusive. A date-only `date_to` covers that whole day, and a
range with only `date_from` runs up to "now". Rows with a missing or
unparsable date are kept: dirty sheets should not silently lose revenue.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, List, Optional, Tuple, TypeVar, Union

DateLike = Union[date, datetime]
T = TypeVar("T")


def _start_of(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime.combine(value, time.min)


def _end_of(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime.combine(value, time.max)


@dataclass(frozen=True)
class DateRange:
    date_from: Optional[DateLike] = None
    date_to: Optional[DateLike] = None

    @property
    def is_empty(self) -> bool:
        return self.date_from is None and self.date_to is None

    def bounds(self, now: Optional[datetime] = None) -> Tuple[Optional[datetime], Optional[datetime]]:
        """Resolve to inclusive (start, end) datetimes."""
        start = _start_of(self.date_from) if self.date_from is not None else None
        if self.date_to is not None:
            end = _end_of(self.date_to)
        elif start is not None:
            end = now or datetime.now()
        else:
            end = None
        return start, end

    def contains(self, value: Optional[datetime], now: Optional[datetime] = None) -> bool:
        """True if value lies within the range. Undated values always match."""
        if value is None or self.is_empty:
            return True
        start, end = self.bounds(now)
        if start is not None and value < start:
            return False
        if end is not None and value > end:
            return False
        return True

    def previous_period(self, now: Optional[datetime] = None) -> Optional["DateRange"]:
        """The period of equal length immediately before this one."""
        start, end = self.bounds(now)
        if start is None or end is None:
            return None
        length = end - start
        prev_end = start - timedelta(microseconds=1)
        return DateRange(date_from=prev_end - length, date_to=prev_end)


def filter_by_date(
    items: Iterable[T],
    date_range: Optional[DateRange],
    get_date: Callable[[T], Optional[datetime]],
    now: Optional[datetime] = None,
) -> List[T]:
    """Keep items inside the range (or undated). No range keeps everything."""
    items = list(items)
    if date_range is None or date_range.is_empty:
        return items
    now = now or datetime.now()
    return [item for item in items if date_range.contains(get_date(item), now)]
