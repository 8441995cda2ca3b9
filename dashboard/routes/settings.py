from flask import Blueprint, jsonify, request, g
from werkzeug.datastructures import ImmutableMultiDict

from dashboard import firestore_dao as dao
from dashboard.decorators import auth_required
from dashboard.errors import InvalidInput
from dashboard.firestore_models import UserSettings
from dashboard.forms import SettingsForm, form_errors

bp = Blueprint('settings', __name__, url_prefix='/settings')


def _load(uid):
    doc = dao.get_user_settings(uid)
    return UserSettings.from_dict(doc or {}, uid)


@bp.route('')
@auth_required
def get_settings():
    return jsonify({'settings': _load(g.current_user.uid)})


@bp.route('', methods=['PUT', 'POST'])
@auth_required
def update_settings():
    uid = g.current_user.uid
    current = _load(uid)
    # Partial updates keep the stored values for omitted fields
    payload = current.to_dict()
    changes = request.get_json(silent=True)
    if changes is None:
        changes = request.form.to_dict()
    if not isinstance(changes, dict):
        raise InvalidInput('Settings must be sent as a JSON object.')
    payload.update(changes)
    form = SettingsForm(formdata=ImmutableMultiDict(payload))
    if not form.validate_on_submit():
        return form_errors(form)
    settings = UserSettings(
        id=uid,
        theme=form.theme.data,
        email_notifications=form.email_notifications.data,
        push_notifications=form.push_notifications.data,
        notification_frequency=form.notification_frequency.data,
    )
    dao.save_user_settings(uid, settings.to_dict())
    return jsonify({'success': True, 'settings': settings})
