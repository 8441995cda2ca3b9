from collections import Counter

from flask import Blueprint, redirect, url_for, jsonify
from flask_wtf.csrf import generate_csrf

from dashboard import collections as c
from dashboard import firestore_dao as dao
from dashboard.context import leap_day_policy, local_today
from dashboard.decorators import auth_required, get_current_user
from dashboard.firestore_models import BirthdayEvent, Project, Target, from_docs
from dashboard.services.birthdays import todays_birthdays

bp = Blueprint('main', __name__)

SUMMARY_COLLECTIONS = (
    c.BOTS, c.TEACHERS, c.STUDENTS, c.DRIVE_LINKS, c.CALENDAR_EVENTS,
    c.ACADEMIC_EVENTS, c.BIRTHDAY_EVENTS, c.PROJECTS, c.ARCHIVED_PROJECTS,
    c.TARGETS, c.VIOLATIONS,
)


@bp.route('/health')
def health():
    return jsonify({'status': 'ok'}), 200


@bp.route('/')
def index():
    user = get_current_user()
    if user.is_authenticated:
        return redirect(url_for('main.dashboard'))
    return jsonify({'login': url_for('auth.login'), 'signup': url_for('auth.signup')})


@bp.route('/csrf-token')
def csrf_token():
    return jsonify({'csrf_token': generate_csrf()})


@bp.route('/dashboard')
@auth_required
def dashboard():
    user = get_current_user()

    counts = {name: dao.count_records(name) for name in SUMMARY_COLLECTIONS}

    birthdays = from_docs(BirthdayEvent, dao.get_birthdays())
    today = todays_birthdays(birthdays, local_today(), leap_day_policy())

    targets = from_docs(Target, dao.get_targets())
    open_targets = [t for t in targets if t.status not in ('Done', 'Archived')]

    projects = from_docs(Project, dao.get_projects())
    by_status = Counter(p.status for p in projects)

    return jsonify({
        'user': user.to_dict(),
        'counts': counts,
        'todays_birthdays': {k: [v.to_dict() for v in views] for k, views in today.items()},
        'open_targets': len(open_targets),
        'projects_by_status': dict(by_status),
        'unread_notifications': dao.count_unread(user.uid),
    })
