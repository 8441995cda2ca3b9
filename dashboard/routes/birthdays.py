import logging

from flask import Blueprint, jsonify, request

from dashboard import firestore_dao as dao
from dashboard.context import leap_day_policy, local_today, selected_date
from dashboard.decorators import auth_required
from dashboard.errors import InvalidInput, RecordNotFound
from dashboard.firestore_models import BirthdayEvent, from_docs
from dashboard.forms import BirthdayForm, form_errors
from dashboard.listview import SortConfig, view_from_args
from dashboard.services.birthdays import birthdays_on, upcoming_birthdays, todays_birthdays

logger = logging.getLogger(__name__)

bp = Blueprint('birthdays', __name__, url_prefix='/birthdays')


def _views(views):
    return [v.to_dict() for v in views]


def _all_birthdays():
    return from_docs(BirthdayEvent, dao.get_birthdays())


def _birthday_from_form(form):
    return BirthdayEvent(
        name=form.name.data.strip(),
        anchor_date=form.anchor_date.data,
        type=form.type.data,
        grade=form.grade.data or None,
    )


@bp.route('')
@auth_required
def list_birthdays():
    view = view_from_args(
        request.args,
        search_fields=('name',),
        filter_field='type',
        sortable=('name', 'anchor_date', 'grade', 'type'),
        default_sort=SortConfig('anchor_date'),
    )
    return jsonify({'birthdays': view.apply(_all_birthdays()), 'sort': view.sort.to_dict()})


@bp.route('/on')
@auth_required
def on_date():
    selected = selected_date()
    views = birthdays_on(_all_birthdays(), selected, leap_day_policy())
    return jsonify({'date': selected, 'birthdays': _views(views)})


@bp.route('/upcoming')
@auth_required
def upcoming():
    grouped = upcoming_birthdays(_all_birthdays(), local_today(), leap_day_policy())
    return jsonify({
        'teachers': _views(grouped['teachers']),
        'students_by_grade': {grade: _views(views)
                              for grade, views in grouped['students_by_grade'].items()},
    })


@bp.route('/today')
@auth_required
def today():
    grouped = todays_birthdays(_all_birthdays(), local_today(), leap_day_policy())
    return jsonify({key: _views(views) for key, views in grouped.items()})


@bp.route('', methods=['POST'])
@auth_required
def create_birthday():
    form = BirthdayForm()
    if not form.validate_on_submit():
        return form_errors(form)
    birthday_id = dao.create_birthday(_birthday_from_form(form).to_dict())
    return jsonify({'success': True, 'id': birthday_id}), 201


@bp.route('/<birthday_id>', methods=['PUT', 'POST'])
@auth_required
def update_birthday(birthday_id):
    form = BirthdayForm()
    if not form.validate_on_submit():
        return form_errors(form)
    dao.update_birthday(birthday_id, _birthday_from_form(form).to_dict())
    return jsonify({'success': True, 'id': birthday_id})


@bp.route('/<birthday_id>', methods=['DELETE'])
@auth_required
def delete_birthday(birthday_id):
    if not birthday_id.strip():
        raise InvalidInput('Invalid birthday id.')
    if not dao.get_birthday(birthday_id):
        raise RecordNotFound('Birthday not found.')
    dao.delete_birthday(birthday_id)
    logger.info('Deleted birthday %s', birthday_id)
    return jsonify({'success': True, 'id': birthday_id})
