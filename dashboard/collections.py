"""Firestore collection names.

Firestore creates collections on first write, so these constants are the
only schema there is. Sub-collections are addressed as
``<parent>/<doc_id>/<child>`` paths, see :func:`subcollection`.
"""

BOTS = 'bots'
TEACHERS = 'teachers'
STUDENTS = 'students'
DRIVE_LINKS = 'drive_links'
CALENDAR_EVENTS = 'calendar_events'
ACADEMIC_EVENTS = 'academic_events'
BIRTHDAY_EVENTS = 'birthday_events'
PROJECTS = 'projects'
ARCHIVED_PROJECTS = 'archived_projects'
TARGETS = 'targets'
VIOLATIONS = 'violations'
ACTIVITY_LOG_ENTRIES = 'activity_log_entries'
NOTIFICATIONS = 'notifications'
USER_SETTINGS = 'user_settings'

# Project children
TASKS = 'tasks'
UPDATES = 'updates'


def subcollection(parent, doc_id, child):
    return f'{parent}/{doc_id}/{child}'


# Collections a Socket.IO client may subscribe to, with their live ordering.
LIVE_COLLECTIONS = {
    BOTS: ('name', False),
    TEACHERS: ('name', False),
    STUDENTS: ('name', False),
    DRIVE_LINKS: ('title', False),
    CALENDAR_EVENTS: ('date', False),
    ACADEMIC_EVENTS: ('date', False),
    BIRTHDAY_EVENTS: ('anchor_date', False),
    PROJECTS: ('created_at', True),
    ARCHIVED_PROJECTS: ('updated_at', True),
    TARGETS: ('updated_at', True),
    VIOLATIONS: ('created_at', True),
    ACTIVITY_LOG_ENTRIES: ('date', True),
}
