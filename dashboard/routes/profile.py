from flask import Blueprint, jsonify, g

from dashboard.context import get_auth_service
from dashboard.decorators import auth_required, refresh_current_user
from dashboard.errors import AuthError
from dashboard.forms import ProfileForm, PasswordChangeForm, form_errors

bp = Blueprint('profile', __name__, url_prefix='/profile')


@bp.route('')
@auth_required
def profile():
    return jsonify({'user': g.current_user.to_dict()})


@bp.route('', methods=['PUT', 'POST'])
@auth_required
def update_profile():
    form = ProfileForm()
    if not form.validate_on_submit():
        return form_errors(form)
    get_auth_service().update_profile(g.current_user.uid, form.display_name.data.strip())
    user = refresh_current_user()
    return jsonify({'success': True, 'message': 'Profile updated.', 'user': user.to_dict()})


@bp.route('/password', methods=['POST'])
@auth_required
def change_password():
    form = PasswordChangeForm()
    if not form.validate_on_submit():
        return form_errors(form)

    user = g.current_user
    if not user.email:
        return jsonify({'error': 'This account has no email address.'}), 400
    try:
        get_auth_service().change_password(user.uid, user.email,
                                           form.current_password.data,
                                           form.new_password.data)
    except AuthError as e:
        if e.code == 'wrong-password':
            return jsonify({'error': 'Incorrect current password.',
                            'fields': {'current_password': ['Incorrect current password.']}}), 400
        raise
    return jsonify({'success': True, 'message': 'Password changed successfully.'})
