"""
Data Access Object (DAO) layer.

Route files call functions from this module instead of talking to the
store directly. Every function works against the store injected into the
running app, so the same code serves Firestore and the memory backend.
Functions return plain dicts with an 'id' field.
"""

from dashboard import collections as c
from dashboard.context import get_store
from dashboard.errors import RecordNotFound


def _store():
    return get_store()


def _require(collection, doc_id):
    doc = _store().get(collection, doc_id)
    if doc is None:
        raise RecordNotFound()
    return doc


# ========================================================================
# Bots  (collection: bots)
# ========================================================================

def get_bots():
    return _store().list(c.BOTS, order_by='name')


def get_bot(bot_id):
    return _store().get(c.BOTS, bot_id)


def create_bot(data):
    return _store().create(c.BOTS, data)


def update_bot(bot_id, data):
    _store().update(c.BOTS, bot_id, data)


def toggle_bot(bot_id):
    """Flip the enabled flag. Returns the new value."""
    bot = _require(c.BOTS, bot_id)
    enabled = not bot.get('enabled', False)
    _store().update(c.BOTS, bot_id, {'enabled': enabled})
    return enabled


def delete_bot(bot_id):
    _store().delete(c.BOTS, bot_id)


# ========================================================================
# Teachers / Students / Drive links  (organizer)
# ========================================================================

def get_teachers():
    return _store().list(c.TEACHERS, order_by='name')


def get_teacher(teacher_id):
    return _store().get(c.TEACHERS, teacher_id)


def create_teacher(data):
    return _store().create(c.TEACHERS, data)


def update_teacher(teacher_id, data):
    _store().update(c.TEACHERS, teacher_id, data)


def delete_teacher(teacher_id):
    _store().delete(c.TEACHERS, teacher_id)


def get_students():
    return _store().list(c.STUDENTS, order_by='name')


def get_student(student_id):
    return _store().get(c.STUDENTS, student_id)


def create_student(data):
    return _store().create(c.STUDENTS, data)


def update_student(student_id, data):
    _store().update(c.STUDENTS, student_id, data)


def delete_student(student_id):
    _store().delete(c.STUDENTS, student_id)


def get_drive_links():
    return _store().list(c.DRIVE_LINKS, order_by='title')


def get_drive_link(link_id):
    return _store().get(c.DRIVE_LINKS, link_id)


def create_drive_link(data):
    return _store().create(c.DRIVE_LINKS, data)


def update_drive_link(link_id, data):
    _store().update(c.DRIVE_LINKS, link_id, data)


def delete_drive_link(link_id):
    _store().delete(c.DRIVE_LINKS, link_id)


# ========================================================================
# Calendar events  (collection: calendar_events)
# ========================================================================

def get_calendar_events():
    return _store().list(c.CALENDAR_EVENTS, order_by='date')


def get_calendar_event(event_id):
    return _store().get(c.CALENDAR_EVENTS, event_id)


def create_calendar_event(data):
    return _store().create(c.CALENDAR_EVENTS, data)


def delete_calendar_event(event_id):
    _store().delete(c.CALENDAR_EVENTS, event_id)


# ========================================================================
# Academic events  (collection: academic_events)
# ========================================================================

def get_academic_events():
    return _store().list(c.ACADEMIC_EVENTS, order_by='date')


def get_academic_event(event_id):
    return _store().get(c.ACADEMIC_EVENTS, event_id)


def create_academic_event(data):
    return _store().create(c.ACADEMIC_EVENTS, data)


def update_academic_event(event_id, data):
    _store().update(c.ACADEMIC_EVENTS, event_id, data)


def delete_academic_event(event_id):
    _store().delete(c.ACADEMIC_EVENTS, event_id)


# ========================================================================
# Birthdays  (collection: birthday_events)
# ========================================================================

def get_birthdays():
    return _store().list(c.BIRTHDAY_EVENTS, order_by='anchor_date')


def get_birthday(birthday_id):
    return _store().get(c.BIRTHDAY_EVENTS, birthday_id)


def create_birthday(data):
    return _store().create(c.BIRTHDAY_EVENTS, data)


def update_birthday(birthday_id, data):
    _store().update(c.BIRTHDAY_EVENTS, birthday_id, data)


def delete_birthday(birthday_id):
    _store().delete(c.BIRTHDAY_EVENTS, birthday_id)


# ========================================================================
# Projects  (collection: projects, sub-collections: tasks, updates)
# ========================================================================

def get_projects():
    return _store().list(c.PROJECTS, order_by='created_at', descending=True)


def get_project(project_id):
    return _store().get(c.PROJECTS, project_id)


def create_project(data):
    return _store().create(c.PROJECTS, data)


def update_project(project_id, data):
    _store().update(c.PROJECTS, project_id, data)


def touch_project(project_id):
    """Bump the project's updated_at after a child write."""
    _store().update(c.PROJECTS, project_id, {})


def get_project_tasks(project_id):
    return _store().list(c.subcollection(c.PROJECTS, project_id, c.TASKS),
                         order_by='created_at', descending=True)


def create_task(project_id, data):
    task_id = _store().create(c.subcollection(c.PROJECTS, project_id, c.TASKS), data)
    touch_project(project_id)
    return task_id


def get_project_updates(project_id):
    return _store().list(c.subcollection(c.PROJECTS, project_id, c.UPDATES),
                         order_by='date', descending=True)


def create_update_note(project_id, data):
    note_id = _store().create(c.subcollection(c.PROJECTS, project_id, c.UPDATES), data)
    touch_project(project_id)
    return note_id


def get_archived_projects():
    return _store().list(c.ARCHIVED_PROJECTS, order_by='updated_at', descending=True)


def get_archived_project(project_id):
    return _store().get(c.ARCHIVED_PROJECTS, project_id)


# ========================================================================
# Targets  (collection: targets)
# ========================================================================

def get_targets():
    return _store().list(c.TARGETS, order_by='updated_at', descending=True)


def get_target(target_id):
    return _store().get(c.TARGETS, target_id)


def create_target(data):
    return _store().create(c.TARGETS, data)


def update_target(target_id, data):
    _store().update(c.TARGETS, target_id, data)


# ========================================================================
# Violations  (collection: violations)
# ========================================================================

def get_violations():
    return _store().list(c.VIOLATIONS, order_by='created_at', descending=True)


def get_violation(violation_id):
    return _store().get(c.VIOLATIONS, violation_id)


def create_violation(data):
    return _store().create(c.VIOLATIONS, data)


# ========================================================================
# Activity log  (collection: activity_log_entries)
# ========================================================================

def get_activity_log():
    return _store().list(c.ACTIVITY_LOG_ENTRIES, order_by='date', descending=True)


def create_activity_log_entry(data):
    return _store().create(c.ACTIVITY_LOG_ENTRIES, data)


# ========================================================================
# Notifications  (collection: notifications)
# ========================================================================

def create_notification(data):
    """Create a notification. ``user_id`` None addresses every staff member."""
    data.setdefault('user_id', None)
    data.setdefault('read_by', [])
    return _store().create(c.NOTIFICATIONS, data)


def get_notifications(user_id, limit=50):
    """Notifications visible to a user, newest first."""
    docs = _store().list(c.NOTIFICATIONS, order_by='created_at', descending=True)
    visible = [n for n in docs if n.get('user_id') in (None, user_id)]
    return visible[:limit]


def get_notification(notification_id):
    return _store().get(c.NOTIFICATIONS, notification_id)


def mark_notification_read(notification_id, user_id):
    note = _require(c.NOTIFICATIONS, notification_id)
    read_by = list(note.get('read_by') or [])
    if user_id not in read_by:
        read_by.append(user_id)
        _store().update(c.NOTIFICATIONS, notification_id, {'read_by': read_by})


def mark_all_read(user_id):
    """Mark every visible notification as read. Returns how many changed."""
    count = 0
    for note in get_notifications(user_id, limit=None):
        if user_id not in (note.get('read_by') or []):
            mark_notification_read(note['id'], user_id)
            count += 1
    return count


def count_unread(user_id):
    return sum(1 for n in get_notifications(user_id, limit=None)
               if user_id not in (n.get('read_by') or []))


# ========================================================================
# User settings  (collection: user_settings, doc id = uid)
# ========================================================================

def get_user_settings(uid):
    return _store().get(c.USER_SETTINGS, uid)


def save_user_settings(uid, data):
    _store().set(c.USER_SETTINGS, uid, data, merge=True)


# ========================================================================
# Dashboard summary
# ========================================================================

def count_records(collection):
    return _store().count(collection)
