from datetime import datetime, timezone

from flask import Blueprint, jsonify, request, g

from dashboard import firestore_dao as dao
from dashboard.decorators import auth_required
from dashboard.errors import DeleteRestricted, RecordNotFound
from dashboard.firestore_models import (Project, ArchivedProject, Task, UpdateNote,
                                        day_start, from_docs)
from dashboard.forms import ProjectForm, TaskForm, UpdateNoteForm, form_errors
from dashboard.listview import DESCENDING, SortConfig, view_from_args

bp = Blueprint('projects', __name__, url_prefix='/projects')
archived_bp = Blueprint('archived_projects', __name__, url_prefix='/archived-projects')


def _require_project(project_id):
    doc = dao.get_project(project_id)
    if not doc:
        raise RecordNotFound('Project not found.')
    return Project.from_dict(doc, doc['id'])


def _project_from_form(form):
    return Project(
        name=form.name.data.strip(),
        description=form.description.data.strip(),
        status=form.status.data,
        start_date=day_start(form.start_date.data),
        end_date=day_start(form.end_date.data) if form.end_date.data else None,
        budget=form.budget.data or 0,
        spent=form.spent.data,
    )


@bp.route('')
@auth_required
def list_projects():
    view = view_from_args(
        request.args,
        search_fields=('name', 'description', 'manager_name'),
        filter_field='status',
        sortable=('name', 'status', 'start_date', 'updated_at'),
        default_sort=SortConfig('updated_at', DESCENDING),
    )
    projects = view.apply(from_docs(Project, dao.get_projects()))
    return jsonify({'projects': projects, 'sort': view.sort.to_dict()})


@bp.route('/<project_id>')
@auth_required
def project_detail(project_id):
    project = _require_project(project_id)
    return jsonify({
        'project': project,
        'tasks': from_docs(Task, dao.get_project_tasks(project_id)),
        'updates': from_docs(UpdateNote, dao.get_project_updates(project_id)),
    })


@bp.route('', methods=['POST'])
@auth_required
def create_project():
    form = ProjectForm()
    if not form.validate_on_submit():
        return form_errors(form)
    project = _project_from_form(form)
    project.manager_id = g.current_user.uid
    project.manager_name = g.current_user.username or 'N/A'
    project_id = dao.create_project(project.to_dict())
    return jsonify({'success': True, 'id': project_id}), 201


@bp.route('/<project_id>', methods=['PUT', 'POST'])
@auth_required
def update_project(project_id):
    existing = _require_project(project_id)
    form = ProjectForm()
    if not form.validate_on_submit():
        return form_errors(form)
    project = _project_from_form(form)
    project.manager_id = existing.manager_id
    project.manager_name = existing.manager_name
    dao.update_project(project_id, project.to_dict())
    return jsonify({'success': True, 'id': project_id})


@bp.route('/<project_id>', methods=['DELETE'])
@auth_required
def delete_project(project_id):
    raise DeleteRestricted()


@bp.route('/<project_id>/tasks', methods=['POST'])
@auth_required
def add_task(project_id):
    _require_project(project_id)
    form = TaskForm()
    if not form.validate_on_submit():
        return form_errors(form)
    task = Task(
        project_id=project_id,
        title=form.title.data.strip(),
        description=(form.description.data or '').strip() or None,
        status=form.status.data,
    )
    task_id = dao.create_task(project_id, task.to_dict())
    return jsonify({'success': True, 'id': task_id}), 201


@bp.route('/<project_id>/updates', methods=['POST'])
@auth_required
def add_update(project_id):
    _require_project(project_id)
    form = UpdateNoteForm()
    if not form.validate_on_submit():
        return form_errors(form)
    note = UpdateNote(
        project_id=project_id,
        note=form.note.data.strip(),
        date=datetime.now(timezone.utc),
        author_id=g.current_user.uid,
        author_name=g.current_user.username or 'System User',
    )
    note_id = dao.create_update_note(project_id, note.to_dict())
    return jsonify({'success': True, 'id': note_id}), 201


# ========================================================================
# Archived projects (read-only)
# ========================================================================

@archived_bp.route('')
@auth_required
def list_archived():
    view = view_from_args(
        request.args,
        search_fields=('name', 'description', 'manager_name'),
        filter_field='status',
        sortable=('name', 'status', 'start_date', 'end_date', 'updated_at'),
        default_sort=SortConfig('updated_at', DESCENDING),
    )
    projects = view.apply(from_docs(ArchivedProject, dao.get_archived_projects()))
    return jsonify({'projects': projects, 'sort': view.sort.to_dict()})


@archived_bp.route('/<project_id>')
@auth_required
def archived_detail(project_id):
    doc = dao.get_archived_project(project_id)
    if not doc:
        raise RecordNotFound('Archived project not found.')
    return jsonify({'project': ArchivedProject.from_dict(doc, doc['id'])})
