from collections.abc import Iterable
from datetime import date
from datetime import timedelta

from contrib_chart.rendering.models import ActivityRecord
from contrib_chart.rendering.models import DenseCalendar


def sunday_offset(day: date) -> int:
    """Return how many days `day` lies after the Sunday starting its week."""

    return (day.weekday() + 1) % 7


def one_year_before(day: date) -> date:
    """Shift `day` back one calendar year, mapping 29 February to the 28th."""

    try:
        return day.replace(year=day.year - 1)
    except ValueError:
        return day.replace(year=day.year - 1, day=28)


def trailing_year_window(reference_date: date) -> tuple[date, date]:
    """Return the Sunday-to-Saturday window covering the year up to `reference_date`."""

    year_ago = one_year_before(reference_date)
    start = year_ago - timedelta(days=sunday_offset(year_ago))
    end = reference_date + timedelta(days=6 - sunday_offset(reference_date))
    return start, end


def normalize(
    records: Iterable[ActivityRecord], reference_date: date
) -> DenseCalendar:
    """Expand sparse records into a week-aligned, zero-filled calendar.

    When several records share a date the one appearing last in `records`
    wins. Records outside the window are ignored.
    """

    records_by_date = {record.date: record for record in records}
    start, end = trailing_year_window(reference_date)

    days: list[ActivityRecord] = []
    current_day = start
    while current_day <= end:
        record = records_by_date.get(current_day)
        if record is None:
            record = ActivityRecord(date=current_day, count=0, level=0)
        days.append(record)
        current_day += timedelta(days=1)

    return DenseCalendar(days=tuple(days))
