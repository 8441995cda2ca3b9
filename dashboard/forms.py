from urllib.parse import urlparse

from flask import jsonify
from flask_wtf import FlaskForm
from flask_wtf.file import FileField, FileAllowed
from wtforms import (StringField, PasswordField, TextAreaField, SelectField,
                     BooleanField, DateField, FloatField)
from wtforms.validators import (DataRequired, Email, Length, EqualTo,
                                NumberRange, ValidationError, Optional)

from dashboard.firestore_models import (
    BOT_STATUSES, TEACHER_STATUSES, STUDENT_STATUSES, GRADES,
    DRIVE_LINK_CATEGORIES, CALENDAR_EVENT_TYPES, ACADEMIC_CATEGORIES,
    BIRTHDAY_TYPES, PROJECT_STATUSES, TASK_STATUSES, TARGET_STATUSES,
    VIOLATION_TYPES, VIOLATION_CATEGORIES, THEMES, NOTIFICATION_FREQUENCIES,
)


def _choices(values):
    return [(v, v) for v in values]


def form_errors(form, message='Please correct the highlighted fields.'):
    """400 response for a form that failed validation."""
    return jsonify({'error': message, 'fields': form.errors}), 400


# ---------------------------------------------------------------------------
# Auth, profile, settings
# ---------------------------------------------------------------------------

class SignupForm(FlaskForm):
    username = StringField('Username', validators=[DataRequired(message='Username is required.'), Length(min=3, max=80, message='Username must be at least 3 characters.')])
    email = StringField('Email', validators=[DataRequired(message='Email is required.'), Email(message='Invalid email address.')])
    password = PasswordField('Password', validators=[DataRequired(message='Password is required.'), Length(min=6, message='Password must be at least 6 characters.')])


class LoginForm(FlaskForm):
    email = StringField('Email', validators=[DataRequired(message='Email is required.'), Email(message='Invalid email address.')])
    password = PasswordField('Password', validators=[DataRequired(message='Password is required.')])


class ProfileForm(FlaskForm):
    display_name = StringField('Display name', validators=[DataRequired(message='Display name is required.'), Length(min=3, max=80, message='Display name must be at least 3 characters.')])


class PasswordChangeForm(FlaskForm):
    current_password = PasswordField('Current password', validators=[DataRequired(message='Current password is required.')])
    new_password = PasswordField('New password', validators=[DataRequired(message='New password is required.'), Length(min=6, message='New password must be at least 6 characters.')])
    confirm_password = PasswordField('Confirm new password', validators=[DataRequired(message='Please confirm the new password.'), EqualTo('new_password', message="New passwords don't match.")])


class SettingsForm(FlaskForm):
    theme = SelectField('Theme', choices=_choices(THEMES), default='light')
    email_notifications = BooleanField('Email notifications', default=True)
    push_notifications = BooleanField('Push notifications', default=False)
    notification_frequency = SelectField('Frequency', choices=_choices(NOTIFICATION_FREQUENCIES), default='immediately')


# ---------------------------------------------------------------------------
# Bots & organizer
# ---------------------------------------------------------------------------

class BotForm(FlaskForm):
    name = StringField('Name', validators=[DataRequired(message='Bot name is required.'), Length(max=100)])
    description = TextAreaField('Description', validators=[Optional(), Length(max=500)])
    status = SelectField('Status', choices=_choices(BOT_STATUSES), default='inactive')
    enabled = BooleanField('Enabled', default=False)


class TeacherForm(FlaskForm):
    name = StringField('Name', validators=[DataRequired(message='Name is required.'), Length(max=120)])
    subject = StringField('Subject', validators=[DataRequired(message='Subject is required.'), Length(max=120)])
    email = StringField('Email', validators=[DataRequired(message='Email is required.'), Email(message='Invalid email address.')])
    phone = StringField('Phone', validators=[Optional(), Length(max=30)])
    status = SelectField('Status', choices=_choices(TEACHER_STATUSES), default='Active')


class StudentForm(FlaskForm):
    name = StringField('Name', validators=[DataRequired(message='Name is required.'), Length(max=120)])
    grade = SelectField('Grade', choices=_choices(GRADES), validators=[DataRequired(message='Grade is required.')])
    email = StringField('Email', validators=[Optional(), Email(message='Invalid email address.')])
    guardian_name = StringField('Guardian', validators=[Optional(), Length(max=120)])
    guardian_phone = StringField('Guardian phone', validators=[Optional(), Length(max=30)])
    status = SelectField('Status', choices=_choices(STUDENT_STATUSES), default='Enrolled')


class DriveLinkForm(FlaskForm):
    title = StringField('Title', validators=[DataRequired(message='Title is required.'), Length(max=200)])
    url = StringField('URL', validators=[DataRequired(message='URL is required.')])
    category = SelectField('Category', choices=_choices(DRIVE_LINK_CATEGORIES), default='Other')
    description = TextAreaField('Description', validators=[Optional(), Length(max=500)])
    owner = StringField('Owner', validators=[Optional(), Length(max=120)])

    def validate_url(self, url):
        parsed = urlparse((url.data or '').strip())
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ValidationError('Please enter a valid URL.')


# ---------------------------------------------------------------------------
# Calendars & birthdays
# ---------------------------------------------------------------------------

class CalendarEventForm(FlaskForm):
    title = StringField('Title', validators=[DataRequired(message='Title is required.'), Length(max=200)])
    description = TextAreaField('Description', validators=[Optional()])
    type = SelectField('Type', choices=_choices(CALENDAR_EVENT_TYPES), default='Meeting')
    date = DateField('Date', validators=[DataRequired(message='Date is required.')])
    is_recurring = BooleanField('Repeats yearly', default=False)


class AcademicEventForm(FlaskForm):
    title = StringField('Title', validators=[DataRequired(message='Title is required.'), Length(max=200)])
    description = TextAreaField('Description', validators=[Optional()])
    category = SelectField('Category', choices=_choices(ACADEMIC_CATEGORIES), default='School Event')
    date = DateField('Date', validators=[DataRequired(message='Date is required.')])


class BirthdayForm(FlaskForm):
    name = StringField('Name', validators=[DataRequired(message='Name is required.'), Length(max=120)])
    anchor_date = DateField('Birthday', validators=[DataRequired(message='Birthday is required.')])
    type = SelectField('Type', choices=_choices(BIRTHDAY_TYPES), default='Student')
    grade = SelectField('Grade', choices=[('', 'No grade')] + _choices(GRADES), default='')

    def validate_grade(self, grade):
        if self.type.data == 'Student' and not grade.data:
            raise ValidationError('Grade is required for students.')


# ---------------------------------------------------------------------------
# Projects & targets
# ---------------------------------------------------------------------------

class ProjectForm(FlaskForm):
    name = StringField('Project name', validators=[DataRequired(message='Project name is required.'), Length(min=3, max=200, message='Project name must be at least 3 characters.')])
    description = TextAreaField('Description', validators=[DataRequired(message='Description is required.'), Length(min=10, message='Description must be at least 10 characters.')])
    status = SelectField('Status', choices=_choices(PROJECT_STATUSES), default='Planning')
    start_date = DateField('Start date', validators=[DataRequired(message='Start date is required.')])
    end_date = DateField('End date', validators=[Optional()])
    budget = FloatField('Budget', default=0, validators=[Optional(), NumberRange(min=0, message='Budget must be a positive number.')])
    spent = FloatField('Spent', validators=[Optional(), NumberRange(min=0)])

    def validate_end_date(self, end_date):
        if end_date.data and self.start_date.data and end_date.data < self.start_date.data:
            raise ValidationError('End date cannot be before the start date.')


class TaskForm(FlaskForm):
    title = StringField('Title', validators=[DataRequired(message='Task title is required.'), Length(min=3, max=200, message='Task title must be at least 3 characters.')])
    description = TextAreaField('Description', validators=[Optional()])
    status = SelectField('Status', choices=_choices(TASK_STATUSES), default='To Do')


class UpdateNoteForm(FlaskForm):
    note = TextAreaField('Update', validators=[DataRequired(message='Update note is required.'), Length(min=5, message='Update note must be at least 5 characters.')])


class TargetForm(FlaskForm):
    target_name = StringField('Target', validators=[DataRequired(message='Target name is required.'), Length(max=200)])
    description = TextAreaField('Description', validators=[Optional()])
    follow_up_assignment = TextAreaField('Follow-up assignment', validators=[Optional()])
    status = SelectField('Status', choices=_choices(TARGET_STATUSES), default='To Do')


# ---------------------------------------------------------------------------
# Violations
# ---------------------------------------------------------------------------

class ViolationForm(FlaskForm):
    student_name = StringField('Student', validators=[DataRequired(message='Student name is required.'), Length(max=120)])
    date = DateField('Date', validators=[DataRequired(message='Date is required.')])
    violation_type = SelectField('Severity', choices=_choices(VIOLATION_TYPES), default='Minor')
    category = SelectField('Category', choices=_choices(VIOLATION_CATEGORIES), default='Other')
    description = TextAreaField('Description', validators=[DataRequired(message='Description is required.')])
    action_taken = TextAreaField('Action taken', validators=[Optional()])
    photo_proof = FileField('Photo proof', validators=[FileAllowed(['png', 'jpg', 'jpeg', 'gif', 'webp'], 'Images only.')])
