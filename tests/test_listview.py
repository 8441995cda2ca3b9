from datetime import datetime, timezone

from werkzeug.datastructures import MultiDict

from dashboard.firestore_models import Bot
from dashboard.listview import (ASCENDING, DESCENDING, ListView, SortConfig, equals,
                                search, view_from_args)

BOTS = [
    Bot(id='1', name='BetaTasker', status='inactive', description='Processes background tasks.'),
    Bot(id='2', name='alphaBot', status='active', description='Handles automated reporting.'),
    Bot(id='3', name='GammaNotifier', status='active', description='Sends project notifications.'),
]


def _ids(rows):
    return [r.id for r in rows]


def test_search_is_case_insensitive_over_fields():
    view = ListView([search(('name', 'description'), 'REPORT')])
    assert _ids(view.apply(BOTS)) == ['2']


def test_blank_search_keeps_everything():
    assert len(ListView([search(('name',), '  ')]).apply(BOTS)) == 3


def test_filter_all_keeps_everything():
    assert len(ListView([equals('status', 'All')]).apply(BOTS)) == 3
    assert _ids(ListView([equals('status', 'inactive')]).apply(BOTS)) == ['1']


def test_sort_ignores_case():
    assert _ids(SortConfig('name').sort(BOTS)) == ['2', '1', '3']
    assert _ids(SortConfig('name', DESCENDING).sort(BOTS)) == ['3', '1', '2']


def test_sort_is_stable_for_equal_keys():
    assert _ids(SortConfig('status').sort(BOTS)) == ['2', '3', '1']


def test_missing_values_sort_first():
    rows = [
        {'id': 'a', 'date': datetime(2024, 1, 2, tzinfo=timezone.utc)},
        {'id': 'b', 'date': None},
        {'id': 'c', 'date': datetime(2024, 1, 1, tzinfo=timezone.utc)},
    ]
    assert [r['id'] for r in SortConfig('date').sort(rows)] == ['b', 'c', 'a']


def test_toggle():
    sort = SortConfig('name')
    assert sort.toggle('name') == SortConfig('name', DESCENDING)
    assert sort.toggle('name').toggle('name') == SortConfig('name', ASCENDING)
    assert SortConfig('name', DESCENDING).toggle('status') == SortConfig('status', ASCENDING)


def test_view_from_args():
    args = MultiDict({'q': 'a', 'status': 'active', 'sort': 'name', 'direction': 'descending'})
    view = view_from_args(args, search_fields=('name',), filter_field='status',
                          sortable=('name',), default_sort=SortConfig('status'))
    assert _ids(view.apply(BOTS)) == ['3', '2']
    assert view.sort.to_dict() == {'key': 'name', 'direction': 'descending'}


def test_view_from_args_rejects_unknown_sort_key():
    view = view_from_args(MultiDict({'sort': 'secret'}), sortable=('name',),
                          default_sort=SortConfig('name'))
    assert view.sort == SortConfig('name')
