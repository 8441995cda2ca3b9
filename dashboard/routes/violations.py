import logging

from flask import Blueprint, jsonify, request, g, url_for

from dashboard import firestore_dao as dao
from dashboard.decorators import auth_required
from dashboard.errors import DeleteRestricted, RecordNotFound
from dashboard.firestore_models import Notification, Violation, day_start, from_docs
from dashboard.forms import ViolationForm, form_errors
from dashboard.listview import DESCENDING, SortConfig, view_from_args
from dashboard.services.storage import store_violation_photo

logger = logging.getLogger(__name__)

bp = Blueprint('violations', __name__, url_prefix='/violations')

EDIT_RESTRICTED = ('Editing violation records is restricted. '
                   'Please contact an administrator to change it.')


@bp.route('')
@auth_required
def list_violations():
    view = view_from_args(
        request.args,
        search_fields=('student_name', 'category', 'description'),
        filter_field='violation_type',
        filter_param='type',
        sortable=('date', 'student_name', 'violation_type', 'category', 'created_at'),
        default_sort=SortConfig('created_at', DESCENDING),
    )
    violations = view.apply(from_docs(Violation, dao.get_violations()))
    return jsonify({'violations': violations, 'sort': view.sort.to_dict()})


@bp.route('/<violation_id>')
@auth_required
def violation_detail(violation_id):
    doc = dao.get_violation(violation_id)
    if not doc:
        raise RecordNotFound('Violation not found.')
    return jsonify({'violation': Violation.from_dict(doc, doc['id'])})


@bp.route('', methods=['POST'])
@auth_required
def record_violation():
    form = ViolationForm()
    if not form.validate_on_submit():
        return form_errors(form)

    violation = Violation(
        student_name=form.student_name.data.strip(),
        date=day_start(form.date.data),
        violation_type=form.violation_type.data,
        category=form.category.data,
        description=form.description.data.strip(),
        action_taken=(form.action_taken.data or '').strip(),
        reported_by=g.current_user.username or '',
        reported_by_id=g.current_user.uid,
    )
    if form.photo_proof.data:
        for key, value in store_violation_photo(form.photo_proof.data).items():
            setattr(violation, key, value)

    violation_id = dao.create_violation(violation.to_dict())
    logger.info('Recorded violation %s for %s', violation_id, violation.student_name)

    dao.create_notification(Notification(
        type='violation',
        message=f'{violation.violation_type} violation recorded for {violation.student_name}.',
        link=url_for('violations.violation_detail', violation_id=violation_id),
        icon_name='ShieldAlert',
    ).to_dict())
    return jsonify({'success': True, 'id': violation_id}), 201


@bp.route('/<violation_id>', methods=['PUT', 'PATCH'])
@auth_required
def edit_violation(violation_id):
    raise DeleteRestricted(EDIT_RESTRICTED)


@bp.route('/<violation_id>', methods=['DELETE'])
@auth_required
def delete_violation(violation_id):
    raise DeleteRestricted()
