"""Staff, student and shared-drive directories."""

from flask import Blueprint, jsonify, request

from dashboard import firestore_dao as dao
from dashboard.decorators import auth_required
from dashboard.errors import RecordNotFound
from dashboard.firestore_models import Teacher, Student, DriveLink, from_docs
from dashboard.forms import TeacherForm, StudentForm, DriveLinkForm, form_errors
from dashboard.listview import SortConfig, view_from_args

bp = Blueprint('organizer', __name__, url_prefix='/organizer')


def _clean(value):
    value = (value or '').strip()
    return value or None


# ========================================================================
# Teachers
# ========================================================================

def _teacher_from_form(form):
    return Teacher(
        name=form.name.data.strip(),
        subject=form.subject.data.strip(),
        email=form.email.data.strip(),
        phone=_clean(form.phone.data),
        status=form.status.data,
    )


@bp.route('/teachers')
@auth_required
def list_teachers():
    view = view_from_args(
        request.args,
        search_fields=('name', 'subject', 'email'),
        filter_field='status',
        sortable=('name', 'subject', 'status', 'updated_at'),
        default_sort=SortConfig('name'),
    )
    teachers = view.apply(from_docs(Teacher, dao.get_teachers()))
    return jsonify({'teachers': teachers, 'sort': view.sort.to_dict()})


@bp.route('/teachers/<teacher_id>')
@auth_required
def get_teacher(teacher_id):
    doc = dao.get_teacher(teacher_id)
    if not doc:
        raise RecordNotFound('Teacher not found.')
    return jsonify({'teacher': Teacher.from_dict(doc, doc['id'])})


@bp.route('/teachers', methods=['POST'])
@auth_required
def create_teacher():
    form = TeacherForm()
    if not form.validate_on_submit():
        return form_errors(form)
    teacher_id = dao.create_teacher(_teacher_from_form(form).to_dict())
    return jsonify({'success': True, 'id': teacher_id}), 201


@bp.route('/teachers/<teacher_id>', methods=['PUT', 'POST'])
@auth_required
def update_teacher(teacher_id):
    form = TeacherForm()
    if not form.validate_on_submit():
        return form_errors(form)
    dao.update_teacher(teacher_id, _teacher_from_form(form).to_dict())
    return jsonify({'success': True, 'id': teacher_id})


@bp.route('/teachers/<teacher_id>', methods=['DELETE'])
@auth_required
def delete_teacher(teacher_id):
    dao.delete_teacher(teacher_id)
    return jsonify({'success': True, 'id': teacher_id})


# ========================================================================
# Students
# ========================================================================

def _student_from_form(form):
    return Student(
        name=form.name.data.strip(),
        grade=form.grade.data,
        email=_clean(form.email.data),
        guardian_name=_clean(form.guardian_name.data),
        guardian_phone=_clean(form.guardian_phone.data),
        status=form.status.data,
    )


@bp.route('/students')
@auth_required
def list_students():
    view = view_from_args(
        request.args,
        search_fields=('name', 'guardian_name', 'email'),
        filter_field='grade',
        sortable=('name', 'grade', 'status', 'updated_at'),
        default_sort=SortConfig('name'),
    )
    students = view.apply(from_docs(Student, dao.get_students()))
    return jsonify({'students': students, 'sort': view.sort.to_dict()})


@bp.route('/students/<student_id>')
@auth_required
def get_student(student_id):
    doc = dao.get_student(student_id)
    if not doc:
        raise RecordNotFound('Student not found.')
    return jsonify({'student': Student.from_dict(doc, doc['id'])})


@bp.route('/students', methods=['POST'])
@auth_required
def create_student():
    form = StudentForm()
    if not form.validate_on_submit():
        return form_errors(form)
    student_id = dao.create_student(_student_from_form(form).to_dict())
    return jsonify({'success': True, 'id': student_id}), 201


@bp.route('/students/<student_id>', methods=['PUT', 'POST'])
@auth_required
def update_student(student_id):
    form = StudentForm()
    if not form.validate_on_submit():
        return form_errors(form)
    dao.update_student(student_id, _student_from_form(form).to_dict())
    return jsonify({'success': True, 'id': student_id})


@bp.route('/students/<student_id>', methods=['DELETE'])
@auth_required
def delete_student(student_id):
    dao.delete_student(student_id)
    return jsonify({'success': True, 'id': student_id})


# ========================================================================
# Drive links
# ========================================================================

def _link_from_form(form):
    return DriveLink(
        title=form.title.data.strip(),
        url=form.url.data.strip(),
        category=form.category.data,
        description=_clean(form.description.data),
        owner=_clean(form.owner.data),
    )


@bp.route('/drive-links')
@auth_required
def list_drive_links():
    view = view_from_args(
        request.args,
        search_fields=('title', 'description', 'owner'),
        filter_field='category',
        sortable=('title', 'category', 'owner', 'updated_at'),
        default_sort=SortConfig('title'),
    )
    links = view.apply(from_docs(DriveLink, dao.get_drive_links()))
    return jsonify({'drive_links': links, 'sort': view.sort.to_dict()})


@bp.route('/drive-links', methods=['POST'])
@auth_required
def create_drive_link():
    form = DriveLinkForm()
    if not form.validate_on_submit():
        return form_errors(form)
    link_id = dao.create_drive_link(_link_from_form(form).to_dict())
    return jsonify({'success': True, 'id': link_id}), 201


@bp.route('/drive-links/<link_id>', methods=['PUT', 'POST'])
@auth_required
def update_drive_link(link_id):
    form = DriveLinkForm()
    if not form.validate_on_submit():
        return form_errors(form)
    dao.update_drive_link(link_id, _link_from_form(form).to_dict())
    return jsonify({'success': True, 'id': link_id})


@bp.route('/drive-links/<link_id>', methods=['DELETE'])
@auth_required
def delete_drive_link(link_id):
    dao.delete_drive_link(link_id)
    return jsonify({'success': True, 'id': link_id})
