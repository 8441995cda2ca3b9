from flask import Blueprint, jsonify, request, url_for

from dashboard import firestore_dao as dao
from dashboard.context import local_today, selected_date
from dashboard.decorators import auth_required
from dashboard.errors import RecordNotFound
from dashboard.firestore_models import AcademicEvent, Notification, day_start, from_docs
from dashboard.forms import AcademicEventForm, form_errors
from dashboard.listview import ASCENDING, DESCENDING, SortConfig
from dashboard.services.calendar import same_day, split_academic_events

bp = Blueprint('academic', __name__, url_prefix='/academic-calendar')

SORTABLE = ('date', 'title', 'category')


def _table_sort(prefix, default):
    """Each table keeps its own sort: ``<prefix>_sort`` / ``<prefix>_direction``."""
    key = request.args.get(f'{prefix}_sort')
    if key not in SORTABLE:
        return default
    direction = request.args.get(f'{prefix}_direction', ASCENDING)
    if direction not in (ASCENDING, DESCENDING):
        direction = ASCENDING
    return SortConfig(key, direction)


def _notify(message, icon_name):
    dao.create_notification(Notification(
        type='academic_event',
        message=message,
        link=url_for('academic.academic_calendar'),
        icon_name=icon_name,
    ).to_dict())


def _event_from_form(form):
    return AcademicEvent(
        title=form.title.data.strip(),
        description=(form.description.data or '').strip(),
        category=form.category.data,
        date=day_start(form.date.data),
    )


@bp.route('')
@auth_required
def academic_calendar():
    selected = selected_date()
    events = from_docs(AcademicEvent, dao.get_academic_events())
    upcoming, past = split_academic_events(events, local_today())
    upcoming_sort = _table_sort('upcoming', SortConfig('date', ASCENDING))
    past_sort = _table_sort('past', SortConfig('date', DESCENDING))
    return jsonify({
        'date': selected,
        'events': same_day(events, selected),
        'upcoming': upcoming_sort.sort(upcoming),
        'upcoming_sort': upcoming_sort.to_dict(),
        'past': past_sort.sort(past),
        'past_sort': past_sort.to_dict(),
    })


@bp.route('/<event_id>')
@auth_required
def get_event(event_id):
    doc = dao.get_academic_event(event_id)
    if not doc:
        raise RecordNotFound('Event not found.')
    return jsonify({'event': AcademicEvent.from_dict(doc, doc['id'])})


@bp.route('', methods=['POST'])
@auth_required
def create_event():
    form = AcademicEventForm()
    if not form.validate_on_submit():
        return form_errors(form)
    event = _event_from_form(form)
    event_id = dao.create_academic_event(event.to_dict())
    _notify(f'New academic event "{event.title}" on {form.date.data.isoformat()}.', 'CalendarPlus')
    return jsonify({'success': True, 'id': event_id}), 201


@bp.route('/<event_id>', methods=['PUT', 'POST'])
@auth_required
def update_event(event_id):
    form = AcademicEventForm()
    if not form.validate_on_submit():
        return form_errors(form)
    event = _event_from_form(form)
    dao.update_academic_event(event_id, event.to_dict())
    _notify(f'Academic event "{event.title}" was updated.', 'CalendarClock')
    return jsonify({'success': True, 'id': event_id})


@bp.route('/<event_id>', methods=['DELETE'])
@auth_required
def delete_event(event_id):
    doc = dao.get_academic_event(event_id)
    if not doc:
        raise RecordNotFound('Event not found.')
    dao.delete_academic_event(event_id)
    _notify(f'Academic event "{doc.get("title", "")}" was removed.', 'CalendarX')
    return jsonify({'success': True, 'id': event_id})
