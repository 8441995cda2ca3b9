"""Accessors for the dependencies injected by ``create_app``."""

from datetime import date

from flask import current_app, request

from dashboard.errors import InvalidInput
from dashboard.recurrence import LeapDayPolicy, now_in


def _ext():
    return current_app.extensions['dashboard']


def get_store():
    return _ext()['store']


def get_auth_service():
    return _ext()['auth']


def get_hub():
    return _ext()['hub']


def get_countdowns():
    return _ext()['countdowns']


def leap_day_policy():
    return LeapDayPolicy.from_config(current_app.config.get('LEAP_DAY_POLICY', 'feb_28'))


def local_now():
    return now_in(current_app.config.get('TIMEZONE', 'UTC'))


def local_today():
    return local_now().date()


def selected_date(param='date'):
    """The ``?date=YYYY-MM-DD`` the page is looking at, today by default."""
    value = request.args.get(param)
    if not value:
        return local_today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidInput(f'Invalid date: {value}')
