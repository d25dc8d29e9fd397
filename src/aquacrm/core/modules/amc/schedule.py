"""Service visit schedule generation for maintenance contracts.

Visits are spread evenly over [start_date, end_date]: the first falls on
start_date and, for more than one visit, the last falls on end_date. Offsets
use integer microsecond arithmetic so the schedule is exact and symmetric.
"""

from datetime import UTC, date, datetime, time

from aquacrm.core.modules.amc.models import AMC, ServiceVisit


def schedule_visit_dates(start_date: date, end_date: date, frequency_per_year: int) -> list[date]:
    """Evenly spaced visit dates between start_date and end_date inclusive.

    Returns an empty list when end_date is before start_date or the frequency
    is not positive. A frequency of 1 yields only start_date.
    """
    start = datetime.combine(start_date, time.min, tzinfo=UTC)
    duration = datetime.combine(end_date, time.min, tzinfo=UTC) - start
    if duration.total_seconds() < 0 or frequency_per_year <= 0:
        return []
    if frequency_per_year == 1:
        return [start_date]

    intervals = frequency_per_year - 1
    return [(start + duration * i // intervals).date() for i in range(frequency_per_year)]


def generate_service_visits(start_date: date, end_date: date, frequency_per_year: int) -> list[ServiceVisit]:
    """Fresh visit list, every visit in Scheduled state."""
    return [ServiceVisit(scheduled_date=d) for d in schedule_visit_dates(start_date, end_date, frequency_per_year)]


def reschedule_visits(
    amc: AMC, start_date: date | None = None, end_date: date | None = None, frequency_per_year: int | None = None
) -> list[ServiceVisit] | None:
    """Regenerate the whole schedule if any schedule input changed, else None.

    Regeneration is authoritative: completed and cancelled visits are dropped,
    nothing from the previous list is merged.
    """
    new_start = start_date if start_date is not None else amc.start_date
    new_end = end_date if end_date is not None else amc.end_date
    new_frequency = frequency_per_year if frequency_per_year is not None else amc.frequency_per_year

    if (new_start, new_end, new_frequency) == (amc.start_date, amc.end_date, amc.frequency_per_year):
        return None
    return generate_service_visits(new_start, new_end, new_frequency)
