import logging

from flask import request
from flask_socketio import emit, join_room, leave_room

from dashboard import socketio
from dashboard import firestore_dao as dao
from dashboard.context import get_hub, get_countdowns, leap_day_policy, local_today
from dashboard.decorators import get_current_user
from dashboard.errors import StoreError
from dashboard.firestore_models import BirthdayEvent
from dashboard.live import room_for
from dashboard.recurrence import next_occurrence
from dashboard.serializers import to_jsonable

logger = logging.getLogger(__name__)


def _get_socket_user():
    """Get current user from the Flask session context in Socket.IO events."""
    user = get_current_user()
    if user and user.is_authenticated:
        return user
    return None


@socketio.on('connect')
def handle_connect():
    user = _get_socket_user()
    if not user:
        return False
    emit('connected', {'user_id': user.uid, 'username': user.username})


@socketio.on('disconnect')
def handle_disconnect(reason=None):
    get_countdowns().cancel_owner(request.sid)


# ---------------------------------------------------------------------------
# Live collections
# ---------------------------------------------------------------------------

@socketio.on('subscribe')
def handle_subscribe(data):
    collection = (data or {}).get('collection')
    hub = get_hub()
    if not collection or not hub.is_live(collection):
        emit('subscription_error', {'collection': collection, 'message': 'Unknown collection.'})
        return

    try:
        records = hub.ensure(collection)
    except StoreError:
        emit('subscription_error', {
            'collection': collection,
            'message': f'Could not fetch {collection.replace("_", " ")}.',
        })
        return

    join_room(room_for(collection))
    emit('snapshot', {'collection': collection, 'records': to_jsonable(records)})
    if hub.error(collection):
        emit('subscription_error', {'collection': collection, 'message': hub.error(collection)})


@socketio.on('unsubscribe')
def handle_unsubscribe(data):
    collection = (data or {}).get('collection')
    if collection:
        leave_room(room_for(collection))


# ---------------------------------------------------------------------------
# Birthday countdowns
# ---------------------------------------------------------------------------

def _ticker(sid, item_id):
    def on_tick(time_left):
        payload = {'id': item_id, 'time_left': time_left.to_dict()}
        socketio.emit('countdown', payload, to=sid)
    return on_tick


@socketio.on('watch_countdowns')
def handle_watch_countdowns(data):
    if not _get_socket_user():
        emit('error', {'message': 'Authentication required'})
        return

    ids = (data or {}).get('ids') or []
    if not isinstance(ids, list):
        emit('error', {'message': 'ids must be a list'})
        return

    countdowns = get_countdowns()
    policy = leap_day_policy()
    today = local_today()
    watching = []
    for item_id in ids:
        doc = dao.get_birthday(item_id) if isinstance(item_id, str) and item_id else None
        if doc is None:
            continue
        birthday = BirthdayEvent.from_dict(doc, doc['id'])
        if birthday.anchor_date is None:
            continue
        target = next_occurrence(birthday.anchor_date, today, policy)
        countdowns.watch(request.sid, item_id, target, _ticker(request.sid, item_id))
        watching.append(item_id)

    emit('countdowns_started', {'ids': watching})


@socketio.on('unwatch_countdowns')
def handle_unwatch_countdowns(data):
    countdowns = get_countdowns()
    ids = (data or {}).get('ids')
    if ids:
        for item_id in ids:
            countdowns.cancel(request.sid, item_id)
    else:
        countdowns.cancel_owner(request.sid)
