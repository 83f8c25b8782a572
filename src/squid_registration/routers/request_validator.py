"""Request body validation for registration submissions.

Turns a raw JSON or form-encoded body into a role-tagged submission, or
raises ValidationError with one entry per offending field.
"""

from __future__ import annotations

from typing import Any, Mapping

import pydantic

from squid_registration.errors import ValidationError
from squid_registration.models.registration import RegistrationRole
from squid_registration.models.submission import SUBMISSION_MODELS, Submission

FIELD_MESSAGES = {
    "role": "Invalid role",
    "firstName": "First name must be 1-50 characters",
    "lastName": "Last name must be 1-50 characters",
    "class": "Class must be 1-10 characters",
    "phone": "Invalid phone number format",
    "bringsPhone": "Invalid bringsPhone value",
    "willingToHelp": "Invalid willingToHelp value",
    "guardName": "Guard name must be 1-100 characters",
    "guardClass": "Guard class must be 1-10 characters",
    "guardPhone": "Invalid guard phone number format",
}


def _error(field: str, message: str | None = None) -> dict:
    return {"field": field, "message": message or FIELD_MESSAGES.get(field, "Invalid value")}


def parse_submission(data: Any) -> Submission:
    """Validate a request body and return the matching submission model.

    Raises ValidationError if the body is not an object, the role is not
    player/guard, or any field breaks its constraints.
    """
    if not isinstance(data, Mapping):
        raise ValidationError([_error("body", "Request body must be an object")])

    role = data.get("role")
    try:
        role = RegistrationRole(role.strip() if isinstance(role, str) else role)
    except ValueError:
        raise ValidationError([_error("role")])

    model = SUBMISSION_MODELS[role]
    try:
        return model.model_validate({**data, "role": role})
    except pydantic.ValidationError as e:
        details = []
        seen = set()
        for err in e.errors():
            field = str(err["loc"][0]) if err["loc"] else "body"
            if field in seen:
                continue
            seen.add(field)
            details.append(_error(field, FIELD_MESSAGES.get(field, err["msg"])))
        raise ValidationError(details)
