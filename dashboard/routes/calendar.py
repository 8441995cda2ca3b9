from flask import Blueprint, jsonify

from dashboard import firestore_dao as dao
from dashboard.context import leap_day_policy, local_today, selected_date
from dashboard.decorators import auth_required
from dashboard.errors import RecordNotFound
from dashboard.firestore_models import CalendarEvent, day_start, from_docs
from dashboard.forms import CalendarEventForm, form_errors
from dashboard.services.calendar import events_on, upcoming_events

bp = Blueprint('calendar', __name__, url_prefix='/calendar')


@bp.route('')
@auth_required
def calendar():
    selected = selected_date()
    policy = leap_day_policy()
    events = from_docs(CalendarEvent, dao.get_calendar_events())
    return jsonify({
        'date': selected,
        'events': events_on(events, selected, policy),
        'upcoming': upcoming_events(events, local_today(), policy),
    })


@bp.route('/upcoming')
@auth_required
def upcoming():
    events = from_docs(CalendarEvent, dao.get_calendar_events())
    return jsonify({'upcoming': upcoming_events(events, local_today(), leap_day_policy())})


@bp.route('/<event_id>')
@auth_required
def get_event(event_id):
    doc = dao.get_calendar_event(event_id)
    if not doc:
        raise RecordNotFound('Event not found.')
    return jsonify({'event': CalendarEvent.from_dict(doc, doc['id'])})


@bp.route('', methods=['POST'])
@auth_required
def create_event():
    form = CalendarEventForm()
    if not form.validate_on_submit():
        return form_errors(form)
    event = CalendarEvent(
        title=form.title.data.strip(),
        description=(form.description.data or '').strip(),
        type=form.type.data,
        date=day_start(form.date.data),
        is_recurring=form.is_recurring.data,
    )
    event_id = dao.create_calendar_event(event.to_dict())
    return jsonify({'success': True, 'id': event_id}), 201


@bp.route('/<event_id>', methods=['DELETE'])
@auth_required
def delete_event(event_id):
    dao.delete_calendar_event(event_id)
    return jsonify({'success': True, 'id': event_id})
