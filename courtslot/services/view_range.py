# courtslot/services/view_range.py
"""
Calendar view ranges.

Turns a view granularity (day / week / month) plus an anchor date into the
inclusive datetime range used to scope booking queries. Weeks start on
Sunday; every range ends at 23:59:59.999 of its last day.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
import logging
from typing import Optional, Union

from ..core.config import settings
from ..core.enums import BookingViewType

logger = logging.getLogger(__name__)

END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def _anchor_date(anchor: Union[date, datetime], tz: tzinfo) -> date:
    if isinstance(anchor, datetime):
        if anchor.tzinfo is not None:
            return anchor.astimezone(tz).date()
        return anchor.date()
    return anchor


def _start_of(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def _end_of(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, END_OF_DAY, tzinfo=tz)


def resolve_view_range(
    view_type: Union[BookingViewType, str],
    anchor: Union[date, datetime],
    tz: Optional[tzinfo] = None,
) -> DateRange:
    """
    Resolve the inclusive range covered by a calendar view.

    Args:
        view_type: day, week or month. Anything else yields a 24 hour
            window starting at the anchor's midnight.
        anchor: The date the view is centred on. Datetimes are reduced to
            their calendar date in ``tz``.
        tz: Timezone of the calendar, defaults to the facility timezone.

    Returns:
        DateRange with timezone-aware bounds
    """
    tz = tz or settings.tzinfo
    day = _anchor_date(anchor, tz)

    try:
        view = BookingViewType(view_type)
    except ValueError:
        logger.warning(f"Unknown view type {view_type!r}, using a 24 hour window")
        start = _start_of(day, tz)
        return DateRange(start=start, end=start + timedelta(hours=24))

    if view is BookingViewType.DAY:
        return DateRange(start=_start_of(day, tz), end=_end_of(day, tz))

    if view is BookingViewType.WEEK:
        # isoweekday: Monday=1 .. Sunday=7, so Sunday maps to 0
        first = day - timedelta(days=day.isoweekday() % 7)
        return DateRange(start=_start_of(first, tz), end=_end_of(first + timedelta(days=6), tz))

    last_day = calendar.monthrange(day.year, day.month)[1]
    return DateRange(
        start=_start_of(day.replace(day=1), tz),
        end=_end_of(day.replace(day=last_day), tz),
    )


def today_in(tz: Optional[tzinfo] = None) -> date:
    return datetime.now(tz or settings.tzinfo).date()
