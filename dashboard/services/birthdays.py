"""Birthday views derived from anchor dates; nothing here is persisted."""

from dataclasses import dataclass
from datetime import date

from dashboard.firestore_models import BirthdayEvent, UNGRADED
from dashboard.recurrence import (LeapDayPolicy, is_anniversary, next_occurrence,
                                  age_at)


@dataclass
class BirthdayView:
    birthday: BirthdayEvent
    display_date: date
    age: int

    def to_dict(self):
        return {
            'id': self.birthday.id,
            'name': self.birthday.name,
            'type': self.birthday.type,
            'grade': self.birthday.grade,
            'anchor_date': self.birthday.anchor_date,
            'display_date': self.display_date,
            'age': self.age,
        }


def _view(birthday, display_date, policy):
    return BirthdayView(birthday, display_date, age_at(birthday.anchor_date, display_date, policy))


def birthdays_on(birthdays, selected, policy=LeapDayPolicy.FEB_28):
    """Birthdays whose anniversary falls on ``selected``, aged as of that day."""
    result = []
    for birthday in birthdays:
        if not birthday.anchor_date:
            continue
        if is_anniversary(birthday.anchor_date, selected, policy):
            result.append(_view(birthday, selected, policy))
    return result


def upcoming_birthdays(birthdays, today, policy=LeapDayPolicy.FEB_28):
    """Next occurrence of every birthday, teachers apart and students by grade.

    Each group is sorted by its next occurrence.
    """
    teachers = []
    students_by_grade = {}
    for birthday in birthdays:
        if not birthday.anchor_date:
            continue
        view = _view(birthday, next_occurrence(birthday.anchor_date, today, policy), policy)
        if birthday.type == 'Teacher':
            teachers.append(view)
        else:
            students_by_grade.setdefault(birthday.grade or UNGRADED, []).append(view)

    teachers.sort(key=lambda v: v.display_date)
    for views in students_by_grade.values():
        views.sort(key=lambda v: v.display_date)
    return {'teachers': teachers, 'students_by_grade': students_by_grade}


def todays_birthdays(birthdays, today, policy=LeapDayPolicy.FEB_28):
    result = {'teachers': [], 'students': []}
    for view in birthdays_on(birthdays, today, policy):
        key = 'teachers' if view.birthday.type == 'Teacher' else 'students'
        result[key].append(view)
    return result
