from flask import Blueprint, jsonify, request, g

from dashboard import firestore_dao as dao
from dashboard.decorators import auth_required
from dashboard.errors import RecordNotFound
from dashboard.firestore_models import Notification, from_docs

bp = Blueprint('notifications', __name__, url_prefix='/notifications')


def _as_view(notification, uid):
    data = notification.to_dict()
    data.pop('read_by')
    data['id'] = notification.id
    data['created_at'] = notification.created_at
    data['read'] = notification.is_read_by(uid)
    return data


@bp.route('')
@auth_required
def list_notifications():
    uid = g.current_user.uid
    limit = request.args.get('limit', 50, type=int)
    notifications = from_docs(Notification, dao.get_notifications(uid, limit=limit))
    if request.args.get('unread') in ('1', 'true'):
        notifications = [n for n in notifications if not n.is_read_by(uid)]
    return jsonify({'notifications': [_as_view(n, uid) for n in notifications]})


@bp.route('/unread-count')
@auth_required
def unread_count():
    return jsonify({'count': dao.count_unread(g.current_user.uid)})


@bp.route('/<notification_id>/read', methods=['POST'])
@auth_required
def mark_read(notification_id):
    doc = dao.get_notification(notification_id)
    if not doc or doc.get('user_id') not in (None, g.current_user.uid):
        raise RecordNotFound('Notification not found.')
    dao.mark_notification_read(notification_id, g.current_user.uid)
    return jsonify({'success': True, 'id': notification_id})


@bp.route('/read-all', methods=['POST'])
@auth_required
def mark_all_read():
    count = dao.mark_all_read(g.current_user.uid)
    return jsonify({'success': True, 'count': count})
