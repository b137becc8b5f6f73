import enum
import uuid
from datetime import datetime, timezone

from extensions import db

EMAIL_MAX_LENGTH = 254
PASSWORD_MAX_LENGTH = 100
TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


def new_id():
    return uuid.uuid4().hex


def utcnow():
    return datetime.now(timezone.utc)


def _isoformat(value):
    # SQLite hands back naive datetimes; everything is stored as UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class TaskStatus(str, enum.Enum):
    TODO = "ToDo"
    IN_PROGRESS = "InProgress"
    DONE = "Done"


class User(db.Model):                                   # Model for storing user credentials
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    email = db.Column(db.String(EMAIL_MAX_LENGTH), unique=True, nullable=False)
    password = db.Column(db.String(100), nullable=False)     # bcrypt digest, never the raw password
    joined_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self):
        return {"id": self.id, "email": self.email, "joined_at": _isoformat(self.joined_at)}


class Task(db.Model):                                   # Model for storing the details of a task
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(TITLE_MAX_LENGTH), nullable=False)
    description = db.Column(db.String(DESCRIPTION_MAX_LENGTH), nullable=False, default="")
    status = db.Column(
        db.Enum(TaskStatus, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
        default=TaskStatus.TODO,
    )
    user_id = db.Column(db.String(32), db.ForeignKey("user.id"), nullable=False, index=True)  # owner
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "owner": self.user_id,
            "created_at": _isoformat(self.created_at),
        }
