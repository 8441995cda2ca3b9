"""Date projections for the calendar and academic calendar pages."""

import dataclasses

from dashboard.firestore_models import day_start
from dashboard.recurrence import LeapDayPolicy, is_anniversary, next_occurrence


def _recurs(event):
    return event.type == 'Birthday' and event.is_recurring


def events_on(events, selected, policy=LeapDayPolicy.FEB_28):
    """Events on ``selected``. Recurring birthdays match on month/day and are
    shown in the selected year."""
    result = []
    for event in events:
        if event.date is None:
            continue
        if _recurs(event):
            if is_anniversary(event.date, selected, policy):
                result.append(dataclasses.replace(event, date=day_start(selected)))
        elif event.date.date() == selected:
            result.append(event)
    return result


def upcoming_events(events, today, policy=LeapDayPolicy.FEB_28):
    """Future one-off events plus the next occurrence of recurring ones, by date."""
    result = []
    for event in events:
        if event.date is None:
            continue
        if _recurs(event):
            display = next_occurrence(event.date, today, policy)
            result.append(dataclasses.replace(event, date=day_start(display)))
        elif not event.is_recurring and event.date.date() >= today:
            result.append(event)
    return sorted(result, key=lambda e: e.date)


def split_academic_events(events, today):
    """(upcoming, past) where today's events count as upcoming."""
    upcoming, past = [], []
    for event in events:
        if event.date is None:
            continue
        (upcoming if event.date.date() >= today else past).append(event)
    return upcoming, past


def same_day(records, selected, field='date'):
    return [r for r in records if getattr(r, field) and getattr(r, field).date() == selected]
