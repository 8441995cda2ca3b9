"""
Filter/sort/search for list pages.

Every list page narrows a snapshot with predicates and orders it with a
:class:`SortConfig`. Records may be dicts or dataclass instances.
"""

import functools
from dataclasses import dataclass
from datetime import date, datetime
from numbers import Number

ASCENDING = 'ascending'
DESCENDING = 'descending'
ALL = ('', 'all', 'All')


def _get(record, field):
    if isinstance(record, dict):
        return record.get(field)
    return getattr(record, field, None)


def _missing(value):
    return value is None or value == ''


def _normalize(value):
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day).timestamp()
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, Number):
        return value
    return str(value).casefold()


def compare_values(a, b):
    """Three-way compare; missing values sort first."""
    if _missing(a) and _missing(b):
        return 0
    if _missing(a):
        return -1
    if _missing(b):
        return 1
    a, b = _normalize(a), _normalize(b)
    if type(a) is not type(b) and not (isinstance(a, Number) and isinstance(b, Number)):
        a, b = str(a), str(b)
    return (a > b) - (a < b)


@dataclass(frozen=True)
class SortConfig:
    key: str
    direction: str = ASCENDING

    def toggle(self, key):
        """Clicking the active ascending column flips it; anything else sorts ascending."""
        if key == self.key and self.direction == ASCENDING:
            return SortConfig(key, DESCENDING)
        return SortConfig(key, ASCENDING)

    def sort(self, records):
        sign = 1 if self.direction == ASCENDING else -1

        def cmp(a, b):
            return sign * compare_values(_get(a, self.key), _get(b, self.key))

        return sorted(records, key=functools.cmp_to_key(cmp))

    def to_dict(self):
        return {'key': self.key, 'direction': self.direction}


def search(fields, term):
    """Case-insensitive substring match over ``fields``."""
    term = (term or '').strip().casefold()

    def predicate(record):
        if not term:
            return True
        return any(term in str(_get(record, f) or '').casefold() for f in fields)
    return predicate


def equals(field, value):
    """Category filter; an empty value or "All" keeps everything."""
    def predicate(record):
        if value is None or value in ALL:
            return True
        return _get(record, field) == value
    return predicate


class ListView:

    def __init__(self, predicates=(), sort=None):
        self.predicates = list(predicates)
        self.sort = sort

    def apply(self, records):
        rows = [r for r in records if all(p(r) for p in self.predicates)]
        if self.sort is not None:
            rows = self.sort.sort(rows)
        return rows


def view_from_args(args, search_fields=(), filter_field=None, filter_param=None,
                   sortable=(), default_sort=None):
    """Build a ListView from query-string args ``q``, the filter, ``sort`` and ``direction``."""
    predicates = []
    if search_fields:
        predicates.append(search(search_fields, args.get('q')))
    if filter_field:
        predicates.append(equals(filter_field, args.get(filter_param or filter_field)))

    sort = default_sort
    key = args.get('sort')
    if key and key in sortable:
        direction = args.get('direction', ASCENDING)
        if direction not in (ASCENDING, DESCENDING):
            direction = ASCENDING
        sort = SortConfig(key, direction)
    return ListView(predicates, sort)
