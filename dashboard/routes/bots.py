from flask import Blueprint, jsonify, request

from dashboard import firestore_dao as dao
from dashboard.decorators import auth_required
from dashboard.errors import RecordNotFound
from dashboard.firestore_models import Bot, from_docs
from dashboard.forms import BotForm, form_errors
from dashboard.listview import SortConfig, view_from_args

bp = Blueprint('bots', __name__, url_prefix='/bots')


def _bot_from_form(form):
    return Bot(
        name=form.name.data.strip(),
        description=(form.description.data or '').strip(),
        status=form.status.data,
        enabled=form.enabled.data,
    )


@bp.route('')
@auth_required
def list_bots():
    view = view_from_args(
        request.args,
        search_fields=('name', 'description'),
        filter_field='status',
        sortable=('name', 'status', 'enabled', 'last_checkin', 'updated_at'),
        default_sort=SortConfig('name'),
    )
    bots = view.apply(from_docs(Bot, dao.get_bots()))
    return jsonify({'bots': bots, 'sort': view.sort.to_dict()})


@bp.route('/<bot_id>')
@auth_required
def get_bot(bot_id):
    doc = dao.get_bot(bot_id)
    if not doc:
        raise RecordNotFound('Bot not found.')
    return jsonify({'bot': Bot.from_dict(doc, doc['id'])})


@bp.route('', methods=['POST'])
@auth_required
def create_bot():
    form = BotForm()
    if not form.validate_on_submit():
        return form_errors(form)
    bot_id = dao.create_bot(_bot_from_form(form).to_dict())
    return jsonify({'success': True, 'id': bot_id}), 201


@bp.route('/<bot_id>', methods=['PUT', 'POST'])
@auth_required
def update_bot(bot_id):
    form = BotForm()
    if not form.validate_on_submit():
        return form_errors(form)
    data = _bot_from_form(form).to_dict()
    # last_checkin belongs to the bot itself, not the edit form
    data.pop('last_checkin')
    dao.update_bot(bot_id, data)
    return jsonify({'success': True, 'id': bot_id})


@bp.route('/<bot_id>/toggle', methods=['POST'])
@auth_required
def toggle_bot(bot_id):
    enabled = dao.toggle_bot(bot_id)
    return jsonify({'success': True, 'id': bot_id, 'enabled': enabled})


@bp.route('/<bot_id>', methods=['DELETE'])
@auth_required
def delete_bot(bot_id):
    dao.delete_bot(bot_id)
    return jsonify({'success': True, 'id': bot_id})
