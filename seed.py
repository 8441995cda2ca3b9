from datetime import date, datetime, timedelta, timezone

from dashboard import create_app
from dashboard import firestore_dao as dao
from dashboard.context import get_auth_service
from dashboard.errors import AuthError
from dashboard.firestore_models import (Bot, Teacher, Student, DriveLink, BirthdayEvent,
                                        AcademicEvent, CalendarEvent, Project, Task,
                                        Target, ActivityLogEntry, day_start)


def seed_database():
    app = create_app()
    with app.app_context():
        auth = get_auth_service()
        password = 'password123'
        now = datetime.now(timezone.utc)
        today = now.date()

        print("Creating admin account...")
        try:
            admin_uid = auth.sign_up('admin@example.com', password, 'admin')
        except AuthError as e:
            if e.code != 'email-already-in-use':
                raise
            admin_uid = None
            print("  admin@example.com already exists")

        print("Creating bots...")
        for name, status, description, minutes_ago, enabled in [
            ('AlphaBot', 'active', 'Handles automated reporting.', 2, True),
            ('BetaTasker', 'inactive', 'Processes background tasks.', 24 * 60, False),
            ('GammaNotifier', 'active', 'Sends project notifications.', 5, True),
            ('DeltaScraper', 'error', 'Collects external data.', 60, True),
        ]:
            dao.create_bot(Bot(
                name=name, status=status, description=description, enabled=enabled,
                last_checkin=now - timedelta(minutes=minutes_ago),
            ).to_dict())

        print("Creating teachers and students...")
        dao.create_teacher(Teacher(name='Maria Santos', subject='Mathematics',
                                   email='maria.santos@example.com').to_dict())
        dao.create_teacher(Teacher(name='John Reyes', subject='Science',
                                   email='john.reyes@example.com', status='On Leave').to_dict())
        dao.create_student(Student(name='Ana Cruz', grade='7',
                                   guardian_name='Lito Cruz').to_dict())
        dao.create_student(Student(name='Ben Lim', grade='10').to_dict())
        dao.create_drive_link(DriveLink(title='Grade 7 Curriculum',
                                        url='https://drive.google.com/drive/folders/grade7',
                                        category='Curriculum').to_dict())

        print("Creating birthdays...")
        dao.create_birthday(BirthdayEvent(name='Maria Santos', type='Teacher',
                                          anchor_date=date(1985, today.month, today.day)
                                          if (today.month, today.day) != (2, 29)
                                          else date(1984, 2, 29)).to_dict())
        dao.create_birthday(BirthdayEvent(name='Ana Cruz', type='Student', grade='7',
                                          anchor_date=date(2012, 2, 29)).to_dict())
        dao.create_birthday(BirthdayEvent(name='Ben Lim', type='Student', grade='10',
                                          anchor_date=date(2009, 12, 3)).to_dict())

        print("Creating calendar entries...")
        dao.create_academic_event(AcademicEvent(title='First Quarter Exams', category='Exam',
                                                date=day_start(today + timedelta(days=14))).to_dict())
        dao.create_academic_event(AcademicEvent(title='Foundation Day', category='Holiday',
                                                date=day_start(today - timedelta(days=30))).to_dict())
        dao.create_calendar_event(CalendarEvent(title='Faculty Meeting', type='Meeting',
                                                date=day_start(today + timedelta(days=3))).to_dict())

        print("Creating projects and targets...")
        project_id = dao.create_project(Project(
            name='Library Renovation',
            description='Refurbish the reading area and replace old shelves.',
            status='In Progress',
            start_date=day_start(today - timedelta(days=20)),
            budget=150000,
            manager_id=admin_uid,
            manager_name='admin',
        ).to_dict())
        dao.create_task(project_id, Task(project_id=project_id, title='Order new shelves').to_dict())
        dao.create_target(Target(target_name='Raise reading scores',
                                 description='Grade 7 reading comprehension',
                                 follow_up_assignment='Weekly reading log',
                                 added_by_user_id=admin_uid,
                                 added_by_user_name='admin').to_dict())

        dao.create_activity_log_entry(ActivityLogEntry(
            title='Seed data loaded', details='Sample records created.',
            date=now, source='seed').to_dict())

        print("\n" + "=" * 60)
        print("  Test account: admin@example.com / password123")
        print("=" * 60)
        print("Database seeded!")


if __name__ == '__main__':
    seed_database()
