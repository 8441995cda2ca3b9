from flask import Blueprint, jsonify, request, g

from dashboard import firestore_dao as dao
from dashboard.decorators import auth_required
from dashboard.errors import DeleteRestricted, RecordNotFound
from dashboard.firestore_models import Target, from_docs
from dashboard.forms import TargetForm, form_errors
from dashboard.listview import DESCENDING, SortConfig, view_from_args

bp = Blueprint('targets', __name__, url_prefix='/targets')


def _target_from_form(form):
    return Target(
        target_name=form.target_name.data.strip(),
        description=(form.description.data or '').strip(),
        follow_up_assignment=(form.follow_up_assignment.data or '').strip(),
        status=form.status.data,
    )


@bp.route('')
@auth_required
def list_targets():
    view = view_from_args(
        request.args,
        search_fields=('target_name', 'description', 'follow_up_assignment'),
        filter_field='status',
        sortable=('target_name', 'status', 'added_by_user_name', 'updated_at'),
        default_sort=SortConfig('updated_at', DESCENDING),
    )
    targets = view.apply(from_docs(Target, dao.get_targets()))
    return jsonify({'targets': targets, 'sort': view.sort.to_dict()})


@bp.route('/<target_id>')
@auth_required
def get_target(target_id):
    doc = dao.get_target(target_id)
    if not doc:
        raise RecordNotFound('Target not found.')
    return jsonify({'target': Target.from_dict(doc, doc['id'])})


@bp.route('', methods=['POST'])
@auth_required
def create_target():
    form = TargetForm()
    if not form.validate_on_submit():
        return form_errors(form)
    target = _target_from_form(form)
    target.added_by_user_id = g.current_user.uid
    target.added_by_user_name = g.current_user.username
    target_id = dao.create_target(target.to_dict())
    return jsonify({'success': True, 'id': target_id}), 201


@bp.route('/<target_id>', methods=['PUT', 'POST'])
@auth_required
def update_target(target_id):
    doc = dao.get_target(target_id)
    if not doc:
        raise RecordNotFound('Target not found.')
    form = TargetForm()
    if not form.validate_on_submit():
        return form_errors(form)
    target = _target_from_form(form)
    # The original author stays on the record
    target.added_by_user_id = doc.get('added_by_user_id')
    target.added_by_user_name = doc.get('added_by_user_name')
    dao.update_target(target_id, target.to_dict())
    return jsonify({'success': True, 'id': target_id})


@bp.route('/<target_id>', methods=['DELETE'])
@auth_required
def delete_target(target_id):
    raise DeleteRestricted()
