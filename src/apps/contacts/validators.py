"""Validation of untrusted contact form input."""

import re
from dataclasses import dataclass

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email, validate_ipv4_address

from apps.core.errors import ValidationError

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
MESSAGE_MIN_LENGTH = 10
MESSAGE_MAX_LENGTH = 1000
EMAIL_MAX_LENGTH = 254

_NAME_PATTERN = re.compile(r"^[A-Za-z\s\-']+$")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ContactInput:
    """A contact submission that passed validation, normalized for storage."""

    name: str
    email: str
    message: str


def _text(data: dict, field: str, label: str, errors: dict[str, list[str]]) -> str | None:
    value = data.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        errors.setdefault(field, []).append(f"{label} is required")
        return None
    if not isinstance(value, str):
        errors.setdefault(field, []).append(f"{label} must be a string")
        return None
    return value.strip()


def validate_contact(data: dict) -> ContactInput:
    """
    Validate a raw ``{name, email, message}`` mapping.

    Every field is checked; the raised ``ValidationError`` lists each failing
    field, not only the first one found.
    """
    errors: dict[str, list[str]] = {}

    name = _text(data, "name", "Name", errors)
    if name is not None:
        name = _WHITESPACE.sub(" ", name)
        if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
            errors.setdefault("name", []).append(
                f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
            )
        if not _NAME_PATTERN.match(name):
            errors.setdefault("name", []).append("Name can only contain letters, spaces, hyphens, and apostrophes")

    email = _text(data, "email", "Email", errors)
    if email is not None:
        email = email.lower()
        if len(email) > EMAIL_MAX_LENGTH:
            errors.setdefault("email", []).append(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
        else:
            try:
                validate_email(email)
            except DjangoValidationError:
                errors.setdefault("email", []).append("Please provide a valid email address")

    message = _text(data, "message", "Message", errors)
    if message is not None and not MESSAGE_MIN_LENGTH <= len(message) <= MESSAGE_MAX_LENGTH:
        errors.setdefault("message", []).append(
            f"Message must be between {MESSAGE_MIN_LENGTH} and {MESSAGE_MAX_LENGTH} characters"
        )

    if errors:
        raise ValidationError(errors)
    return ContactInput(name=name, email=email, message=message)


def normalize_ip(value: str | None) -> str | None:
    """Return *value* if it is an IPv4 dotted quad, else None."""
    if not value:
        return None
    try:
        validate_ipv4_address(value)
    except DjangoValidationError:
        return None
    return value
