"""
Firestore document models using Python dataclasses.

Each model includes:
  - An `id` field for the Firestore document ID
  - A `to_dict()` instance method producing the fields a page writes
  - A `from_dict(data, doc_id)` classmethod for deserialization
  - Sensible defaults for all fields

`created_at` / `updated_at` are assigned by the store and therefore never
appear in `to_dict()`. Calendar dates are stored as midnight-UTC datetimes
because Firestore has no date-only type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------

BOT_STATUSES = ["active", "inactive", "error"]
TEACHER_STATUSES = ["Active", "On Leave", "Inactive"]
STUDENT_STATUSES = ["Enrolled", "Graduated", "Transferred"]
GRADES = ["K", "1", "2", "3", "4", "5", "6", "7", "8", "9", "10", "11", "12", "College"]
DRIVE_LINK_CATEGORIES = ["Curriculum", "Administration", "Reports", "Media", "Other"]
CALENDAR_EVENT_TYPES = ["Deadline", "Meeting", "Milestone", "Reminder", "Birthday"]
ACADEMIC_CATEGORIES = ["Holiday", "Exam", "School Event", "Term Break", "Reminder", "Other"]
BIRTHDAY_TYPES = ["Teacher", "Student"]
PROJECT_STATUSES = ["Planning", "In Progress", "Completed", "On Hold", "Cancelled"]
TASK_STATUSES = ["To Do", "In Progress", "Done"]
TARGET_STATUSES = ["To Do", "In Progress", "Done", "Archived"]
VIOLATION_TYPES = ["Minor", "Moderate", "Severe"]
VIOLATION_CATEGORIES = ["Tardiness", "Dress Code", "Disruptive Behavior",
                        "Academic Dishonesty", "Bullying", "Other"]
THEMES = ["light", "dark"]
NOTIFICATION_FREQUENCIES = ["immediately", "daily", "weekly"]

UNGRADED = "Ungraded"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_datetime(value) -> Optional[datetime]:
    """Convert a value to an aware datetime. Accepts datetime objects,
    dates, ISO-format strings, and Firestore DatetimeWithNanoseconds."""
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str):
        value = value.replace("Z", "+00:00")
        try:
            return _parse_datetime(datetime.fromisoformat(value))
        except (ValueError, TypeError):
            return None
    return None


def _parse_date(value) -> Optional[date]:
    dt = _parse_datetime(value)
    return dt.date() if dt else None


def day_start(value: date) -> datetime:
    """Midnight UTC for a calendar date, the stored form of date fields."""
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _choice(value, options, default):
    return value if value in options else default


# ===========================================================================
# Bots
# ===========================================================================

@dataclass
class Bot:
    id: Optional[str] = None
    name: str = ""
    description: str = ""
    status: str = "inactive"
    enabled: bool = False
    last_checkin: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "enabled": self.enabled,
            "last_checkin": self.last_checkin,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> Bot:
        return cls(
            id=doc_id,
            name=data.get("name", ""),
            description=data.get("description", ""),
            status=_choice(data.get("status"), BOT_STATUSES, "inactive"),
            enabled=bool(data.get("enabled", False)),
            last_checkin=_parse_datetime(data.get("last_checkin")),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
        )


# ===========================================================================
# Organizer: teachers, students, drive links
# ===========================================================================

@dataclass
class Teacher:
    id: Optional[str] = None
    name: str = ""
    subject: str = ""
    email: str = ""
    phone: Optional[str] = None
    status: str = "Active"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "subject": self.subject,
            "email": self.email,
            "phone": self.phone,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> Teacher:
        return cls(
            id=doc_id,
            name=data.get("name", ""),
            subject=data.get("subject", ""),
            email=data.get("email", ""),
            phone=data.get("phone"),
            status=_choice(data.get("status"), TEACHER_STATUSES, "Active"),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
        )


@dataclass
class Student:
    id: Optional[str] = None
    name: str = ""
    grade: str = ""
    email: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None
    status: str = "Enrolled"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "grade": self.grade,
            "email": self.email,
            "guardian_name": self.guardian_name,
            "guardian_phone": self.guardian_phone,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> Student:
        return cls(
            id=doc_id,
            name=data.get("name", ""),
            grade=data.get("grade", ""),
            email=data.get("email"),
            guardian_name=data.get("guardian_name"),
            guardian_phone=data.get("guardian_phone"),
            status=_choice(data.get("status"), STUDENT_STATUSES, "Enrolled"),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
        )


@dataclass
class DriveLink:
    id: Optional[str] = None
    title: str = ""
    url: str = ""
    category: str = "Other"
    description: Optional[str] = None
    owner: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "category": self.category,
            "description": self.description,
            "owner": self.owner,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> DriveLink:
        return cls(
            id=doc_id,
            title=data.get("title", ""),
            url=data.get("url", ""),
            category=_choice(data.get("category"), DRIVE_LINK_CATEGORIES, "Other"),
            description=data.get("description"),
            owner=data.get("owner"),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
        )


# ===========================================================================
# Calendars
# ===========================================================================

@dataclass
class CalendarEvent:
    id: Optional[str] = None
    title: str = ""
    description: str = ""
    type: str = "Meeting"
    date: Optional[datetime] = None     # anchor date when recurring
    is_recurring: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "type": self.type,
            "date": self.date,
            "is_recurring": self.is_recurring,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> CalendarEvent:
        return cls(
            id=doc_id,
            title=data.get("title", ""),
            description=data.get("description", ""),
            type=_choice(data.get("type"), CALENDAR_EVENT_TYPES, "Meeting"),
            date=_parse_datetime(data.get("date")),
            is_recurring=bool(data.get("is_recurring", False)),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
        )


@dataclass
class AcademicEvent:
    id: Optional[str] = None
    title: str = ""
    description: str = ""
    category: str = "School Event"
    date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> AcademicEvent:
        return cls(
            id=doc_id,
            title=data.get("title", ""),
            description=data.get("description", ""),
            category=_choice(data.get("category"), ACADEMIC_CATEGORIES, "Other"),
            date=_parse_datetime(data.get("date")),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
        )


@dataclass
class BirthdayEvent:
    id: Optional[str] = None
    name: str = ""
    anchor_date: Optional[date] = None
    type: str = "Student"
    grade: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "anchor_date": day_start(self.anchor_date) if self.anchor_date else None,
            "type": self.type,
            "grade": self.grade if self.type == "Student" else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> BirthdayEvent:
        return cls(
            id=doc_id,
            name=data.get("name", ""),
            anchor_date=_parse_date(data.get("anchor_date")),
            # Older documents were written without a type
            type=_choice(data.get("type"), BIRTHDAY_TYPES, "Student"),
            grade=data.get("grade"),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
        )


# ===========================================================================
# Projects
# ===========================================================================

@dataclass
class Project:
    id: Optional[str] = None
    name: str = "Untitled Project"
    description: str = "No description provided."
    status: str = "Planning"
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    budget: float = 0
    manager_id: Optional[str] = None
    manager_name: str = "N/A"
    spent: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "budget": self.budget,
            "manager_id": self.manager_id,
            "manager_name": self.manager_name,
        }
        if self.spent is not None:
            d["spent"] = self.spent
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> Project:
        budget = data.get("budget")
        spent = data.get("spent")
        created_at = _parse_datetime(data.get("created_at"))
        return cls(
            id=doc_id,
            name=data.get("name") if isinstance(data.get("name"), str) else "Untitled Project",
            description=(data.get("description") if isinstance(data.get("description"), str)
                         else "No description provided."),
            status=_choice(data.get("status"), PROJECT_STATUSES, "Planning"),
            start_date=_parse_datetime(data.get("start_date")),
            end_date=_parse_datetime(data.get("end_date")),
            budget=budget if isinstance(budget, (int, float)) else 0,
            manager_id=data.get("manager_id"),
            manager_name=data.get("manager_name") or "N/A",
            spent=spent if isinstance(spent, (int, float)) else None,
            created_at=created_at,
            updated_at=_parse_datetime(data.get("updated_at")) or created_at,
        )


@dataclass
class Task:
    id: Optional[str] = None
    project_id: str = ""
    title: str = ""
    description: Optional[str] = None
    status: str = "To Do"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project_id": self.project_id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> Task:
        return cls(
            id=doc_id,
            project_id=data.get("project_id", ""),
            title=data.get("title", ""),
            description=data.get("description"),
            status=_choice(data.get("status"), TASK_STATUSES, "To Do"),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
        )


@dataclass
class UpdateNote:
    id: Optional[str] = None
    project_id: str = ""
    note: str = ""
    date: Optional[datetime] = None
    author_id: Optional[str] = None
    author_name: str = "System User"
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project_id": self.project_id,
            "note": self.note,
            "date": self.date,
            "author_id": self.author_id,
            "author_name": self.author_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> UpdateNote:
        return cls(
            id=doc_id,
            project_id=data.get("project_id", ""),
            note=data.get("note", ""),
            date=_parse_datetime(data.get("date")),
            author_id=data.get("author_id"),
            author_name=data.get("author_name") or "System User",
            created_at=_parse_datetime(data.get("created_at")),
        )


@dataclass
class UploadedFile:
    name: str = ""
    url: str = ""
    type: str = ""
    size: int = 0
    storage_path: str = ""
    uploaded_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> UploadedFile:
        return cls(
            name=data.get("name", ""),
            url=data.get("url", ""),
            type=data.get("type", ""),
            size=data.get("size", 0),
            storage_path=data.get("storage_path", ""),
            uploaded_at=_parse_datetime(data.get("uploaded_at")),
        )


@dataclass
class ArchivedProject(Project):
    uploaded_files: List[UploadedFile] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> ArchivedProject:
        project = Project.from_dict(data, doc_id)
        archived = cls(**project.__dict__)
        archived.status = _choice(data.get("status"), PROJECT_STATUSES, "Completed")
        archived.uploaded_files = [UploadedFile.from_dict(f) for f in data.get("uploaded_files") or []]
        return archived


# ===========================================================================
# Targets, violations, activity
# ===========================================================================

@dataclass
class Target:
    id: Optional[str] = None
    target_name: str = ""
    description: str = ""
    follow_up_assignment: str = ""
    status: str = "To Do"
    added_by_user_id: Optional[str] = None
    added_by_user_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_name": self.target_name,
            "description": self.description,
            "follow_up_assignment": self.follow_up_assignment,
            "status": self.status,
            "added_by_user_id": self.added_by_user_id,
            "added_by_user_name": self.added_by_user_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> Target:
        return cls(
            id=doc_id,
            target_name=data.get("target_name", ""),
            description=data.get("description", ""),
            follow_up_assignment=data.get("follow_up_assignment", ""),
            status=_choice(data.get("status"), TARGET_STATUSES, "To Do"),
            added_by_user_id=data.get("added_by_user_id"),
            added_by_user_name=data.get("added_by_user_name"),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
        )


@dataclass
class Violation:
    id: Optional[str] = None
    student_name: str = ""
    date: Optional[datetime] = None
    violation_type: str = "Minor"
    category: str = "Other"
    description: str = ""
    action_taken: str = ""
    reported_by: str = ""
    reported_by_id: str = ""
    photo_proof_url: Optional[str] = None
    photo_proof_path: Optional[str] = None
    photo_proof_base64: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "student_name": self.student_name,
            "date": self.date,
            "violation_type": self.violation_type,
            "category": self.category,
            "description": self.description,
            "action_taken": self.action_taken,
            "reported_by": self.reported_by,
            "reported_by_id": self.reported_by_id,
        }
        # Photo fields are only written when a proof was attached
        for key in ("photo_proof_url", "photo_proof_path", "photo_proof_base64"):
            if getattr(self, key):
                d[key] = getattr(self, key)
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> Violation:
        return cls(
            id=doc_id,
            student_name=data.get("student_name", ""),
            date=_parse_datetime(data.get("date")),
            violation_type=_choice(data.get("violation_type"), VIOLATION_TYPES, "Minor"),
            category=_choice(data.get("category"), VIOLATION_CATEGORIES, "Other"),
            description=data.get("description", ""),
            action_taken=data.get("action_taken", ""),
            reported_by=data.get("reported_by", ""),
            reported_by_id=data.get("reported_by_id", ""),
            photo_proof_url=data.get("photo_proof_url"),
            photo_proof_path=data.get("photo_proof_path"),
            photo_proof_base64=data.get("photo_proof_base64"),
            created_at=_parse_datetime(data.get("created_at")),
        )


@dataclass
class ActivityLogEntry:
    id: Optional[str] = None
    title: str = ""
    details: str = ""
    date: Optional[datetime] = None
    source: Optional[str] = None
    source_event_id: Optional[str] = None
    original_event_time: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "details": self.details,
            "date": self.date,
            "source": self.source,
            "source_event_id": self.source_event_id,
            "original_event_time": self.original_event_time,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> ActivityLogEntry:
        return cls(
            id=doc_id,
            title=data.get("title", ""),
            details=data.get("details", ""),
            date=_parse_datetime(data.get("date")),
            source=data.get("source"),
            source_event_id=data.get("source_event_id"),
            original_event_time=_parse_datetime(data.get("original_event_time")),
        )


# ===========================================================================
# Notifications & settings
# ===========================================================================

@dataclass
class Notification:
    id: Optional[str] = None
    user_id: Optional[str] = None   # None means every staff member
    type: str = "generic"
    message: str = ""
    link: Optional[str] = None
    icon_name: str = "Bell"
    read_by: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None

    def is_read_by(self, uid: str) -> bool:
        return uid in self.read_by

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "type": self.type,
            "message": self.message,
            "link": self.link,
            "icon_name": self.icon_name,
            "read_by": list(self.read_by),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> Notification:
        return cls(
            id=doc_id,
            user_id=data.get("user_id"),
            type=data.get("type", "generic"),
            message=data.get("message", ""),
            link=data.get("link"),
            icon_name=data.get("icon_name", "Bell"),
            read_by=list(data.get("read_by") or []),
            created_at=_parse_datetime(data.get("created_at")),
        )


@dataclass
class UserSettings:
    id: Optional[str] = None        # the user's UID
    theme: str = "light"
    email_notifications: bool = True
    push_notifications: bool = False
    notification_frequency: str = "immediately"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "theme": self.theme,
            "email_notifications": self.email_notifications,
            "push_notifications": self.push_notifications,
            "notification_frequency": self.notification_frequency,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> UserSettings:
        return cls(
            id=doc_id,
            theme=_choice(data.get("theme"), THEMES, "light"),
            email_notifications=bool(data.get("email_notifications", True)),
            push_notifications=bool(data.get("push_notifications", False)),
            notification_frequency=_choice(data.get("notification_frequency"),
                                           NOTIFICATION_FREQUENCIES, "immediately"),
        )


def from_docs(model, docs):
    """Deserialize a list of store documents (each carrying its 'id')."""
    return [model.from_dict(d, d.get("id")) for d in docs]
