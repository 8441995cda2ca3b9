import logging

from flask import Blueprint, jsonify, session

from dashboard.context import get_auth_service
from dashboard.decorators import auth_required, get_current_user, refresh_current_user
from dashboard.forms import SignupForm, LoginForm, form_errors

logger = logging.getLogger(__name__)

bp = Blueprint('auth', __name__, url_prefix='/auth')


def _start_session(email, password):
    auth = get_auth_service()
    id_token = auth.sign_in(email, password)
    session['firebase_session'] = auth.create_session(id_token)
    return refresh_current_user()


@bp.route('/signup', methods=['POST'])
def signup():
    form = SignupForm()
    if not form.validate_on_submit():
        return form_errors(form)

    # The username doubles as the display name until the profile is edited.
    uid = get_auth_service().sign_up(form.email.data, form.password.data, form.username.data)
    logger.info('Created account %s', uid)
    user = _start_session(form.email.data, form.password.data)
    return jsonify({'success': True, 'uid': uid, 'user': user.to_dict()}), 201


@bp.route('/login', methods=['POST'])
def login():
    current_user = get_current_user()
    if current_user.is_authenticated:
        return jsonify({'success': True, 'user': current_user.to_dict()})

    form = LoginForm()
    if not form.validate_on_submit():
        return form_errors(form)

    user = _start_session(form.email.data, form.password.data)
    return jsonify({'success': True, 'user': user.to_dict()})


@bp.route('/logout', methods=['GET', 'POST'])
@auth_required
def logout():
    session.pop('firebase_session', None)
    return jsonify({'success': True, 'message': 'Logged out.'})


@bp.route('/me')
@auth_required
def me():
    return jsonify({'user': get_current_user().to_dict()})
