"""Explicit request schemas, one per operation.

Payloads are parsed into these models before they reach a store. Unknown
keys (an ``owner`` or ``user_id`` smuggled into a body, say) are dropped.
"""

import re
from typing import Annotated, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, StringConstraints, field_validator

from errors import ValidationError
from models import (
    DESCRIPTION_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    PASSWORD_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TaskStatus,
)

EMAIL_REGEX = r'^[\w\.+-]+@[\w\.-]+\.\w+$'  # basic email pattern

Email = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=EMAIL_MAX_LENGTH)]
Password = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=DESCRIPTION_MAX_LENGTH)]


class _Schema(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Credentials(_Schema):
    """Login payload: both fields present, nothing more is checked."""

    email: Email
    password: Password


class RegisterRequest(Credentials):
    password: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=PASSWORD_MAX_LENGTH)]

    @field_validator("email")
    @classmethod
    def _email_format(cls, value):
        if not re.match(EMAIL_REGEX, value):
            raise ValueError("Invalid email format")
        return value


class TaskCreate(_Schema):
    title: Title
    description: Optional[Description] = ""
    status: TaskStatus = TaskStatus.TODO

    @field_validator("description")
    @classmethod
    def _empty_description(cls, value):
        return "" if value is None else value


class TaskUpdate(_Schema):
    """Partial update. Only keys present in the payload are applied."""

    title: Title = None
    description: Optional[Description] = None
    status: TaskStatus = None

    @field_validator("title", "status", mode="before")
    @classmethod
    def _not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    @field_validator("description")
    @classmethod
    def _empty_description(cls, value):
        return "" if value is None else value

    def changes(self):
        return self.model_dump(exclude_unset=True)


def _describe(error):
    field = ".".join(str(part) for part in error["loc"]) or "body"
    if error["type"] == "enum":
        allowed = ", ".join(s.value for s in TaskStatus)
        return f"{field}: must be one of {allowed}"
    message = error["msg"]
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"{field}: {message}"


def parse(schema, payload):
    """Validate ``payload`` against ``schema`` or raise ValidationError."""
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return schema.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError([_describe(e) for e in exc.errors()]) from None
