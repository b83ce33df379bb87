"""Password rules for admin accounts."""

import re

from django.core.exceptions import ValidationError

ADMIN_PASSWORD_MIN_LENGTH = 8
ADMIN_PASSWORD_SPECIALS = "@$!%*?&"

_RULES = (
    (re.compile(r"[a-z]"), "one lowercase letter"),
    (re.compile(r"[A-Z]"), "one uppercase letter"),
    (re.compile(r"\d"), "one number"),
    (re.compile(f"[{re.escape(ADMIN_PASSWORD_SPECIALS)}]"), f"one special character ({ADMIN_PASSWORD_SPECIALS})"),
)


def validate_admin_password(password: str) -> None:
    """Raise ``django.core.exceptions.ValidationError`` listing every unmet rule."""
    problems: list[str] = []
    if len(password.strip()) < ADMIN_PASSWORD_MIN_LENGTH:
        problems.append(f"Password must be at least {ADMIN_PASSWORD_MIN_LENGTH} characters")
    missing = [label for pattern, label in _RULES if not pattern.search(password)]
    if missing:
        problems.append(f"Password must contain at least {', '.join(missing)}")
    if problems:
        raise ValidationError(problems)
