from flask import Blueprint, jsonify, request

from dashboard import firestore_dao as dao
from dashboard.context import selected_date
from dashboard.decorators import auth_required
from dashboard.firestore_models import ActivityLogEntry, from_docs
from dashboard.listview import DESCENDING, SortConfig, view_from_args
from dashboard.services.calendar import same_day

bp = Blueprint('activity', __name__, url_prefix='/activity')


@bp.route('')
@auth_required
def activity_log():
    selected = selected_date()
    view = view_from_args(
        request.args,
        search_fields=('title', 'details', 'source'),
        sortable=('date', 'title', 'source', 'original_event_time'),
        default_sort=SortConfig('date', DESCENDING),
    )
    entries = same_day(from_docs(ActivityLogEntry, dao.get_activity_log()), selected)
    return jsonify({
        'date': selected,
        'entries': view.apply(entries),
        'sort': view.sort.to_dict(),
    })
