"""
Signed bearer tokens for admin sessions.

An admin is "logged in" exactly while they hold a token that verifies here.
Nothing is stored server-side, so a token stays valid until it expires;
logging out means the client discards it.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

import jwt
from django.conf import settings
from django.utils import timezone

from apps.core.errors import InvalidToken

from .models import Admin

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    """Decoded claims of a verified admin token."""

    admin_id: int
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime

    @property
    def is_expired(self) -> bool:
        return timezone.now() >= self.expires_at

    def as_dict(self) -> dict:
        return {"id": self.admin_id, "email": self.email, "role": self.role}


def issue_token(admin: Admin, *, now: datetime | None = None) -> str:
    """Return a signed token carrying the admin's id, email and role."""
    issued_at = now or timezone.now()
    payload = {
        "sub": str(admin.pk),
        "email": admin.email,
        "role": admin.role,
        "iat": issued_at,
        "exp": issued_at + settings.JWT_EXPIRATION,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> TokenClaims:
    """
    Check signature and expiry and return the token's claims.

    Expired, malformed and badly signed tokens all raise ``InvalidToken``;
    the specific reason only goes to the log.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "email", "role", "iat", "exp"]},
        )
        admin_id = int(payload["sub"])
    except jwt.ExpiredSignatureError as exc:
        logger.info("Rejected expired admin token")
        raise InvalidToken() from exc
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected invalid admin token: %s", exc)
        raise InvalidToken() from exc
    except ValueError as exc:
        logger.info("Rejected admin token with non-numeric subject")
        raise InvalidToken() from exc

    return TokenClaims(
        admin_id=admin_id,
        email=payload["email"],
        role=payload["role"],
        issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
    )
