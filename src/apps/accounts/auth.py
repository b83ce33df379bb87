"""Admin login and bearer-token authorization."""

import logging
from dataclasses import dataclass

from asgiref.sync import sync_to_async
from django.conf import settings
from django.db.models import F, Q
from django.utils import timezone

from apps.core.errors import (
    AccountDisabled,
    AccountLocked,
    InvalidCredentials,
    InvalidToken,
    Unauthorized,
)

from .models import Admin
from .tokens import TokenClaims, issue_token, verify_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    admin: Admin
    token: str


async def _record_failed_attempt(admin: Admin) -> None:
    """Count a wrong password and lock the account once the limit is reached."""
    now = timezone.now()
    if admin.lock_until and admin.lock_until <= now:
        # Previous lock has expired; start counting again.
        admin.login_attempts = 1
        admin.lock_until = None
        await admin.asave(update_fields=["login_attempts", "lock_until", "updated_at"])
        return

    # Lock on the stored counter, not the one read at login.
    account = Admin.objects.filter(pk=admin.pk)
    await account.aupdate(login_attempts=F("login_attempts") + 1)
    locked = await account.filter(
        Q(lock_until__isnull=True) | Q(lock_until__lte=now),
        login_attempts__gte=settings.ADMIN_MAX_LOGIN_ATTEMPTS,
    ).aupdate(lock_until=now + settings.ADMIN_LOCKOUT_DURATION)
    if locked:
        logger.warning(
            "Locking admin %s after %d failed login attempts", admin.email, settings.ADMIN_MAX_LOGIN_ATTEMPTS
        )


async def login(email: str, password: str) -> LoginResult:
    """
    Verify credentials and issue a token.

    Unknown email and wrong password raise the same ``InvalidCredentials``.
    Lock and active checks only run once the password is known to be right.
    """
    try:
        admin = await Admin.objects.aget(email=email)
    except Admin.DoesNotExist as exc:
        # Hash anyway so an unknown email costs about as much as a wrong password.
        await sync_to_async(Admin().set_password)(password)
        logger.info("Login failed: unknown admin email")
        raise InvalidCredentials() from exc

    if not await sync_to_async(admin.check_password)(password):
        if not admin.is_locked:
            await _record_failed_attempt(admin)
        logger.info("Login failed: wrong password for admin %s", admin.pk)
        raise InvalidCredentials()

    if admin.is_locked:
        raise AccountLocked()

    if not admin.is_active:
        raise AccountDisabled()

    admin.last_login = timezone.now()
    admin.login_attempts = 0
    admin.lock_until = None
    await admin.asave(update_fields=["last_login", "login_attempts", "lock_until", "updated_at"])

    logger.info("Admin %s logged in", admin.pk)
    return LoginResult(admin=admin, token=issue_token(admin))


async def authenticate_token(token: str) -> tuple[Admin, TokenClaims]:
    """Verify *token* and load the admin it was issued to, who must still be active."""
    claims = verify_token(token)
    try:
        admin = await Admin.objects.aget(pk=claims.admin_id, is_active=True)
    except Admin.DoesNotExist as exc:
        logger.info("Token for missing or inactive admin %s", claims.admin_id)
        raise InvalidToken() from exc
    return admin, claims


def get_bearer_token(request) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header, or ''."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return ""
    return auth_header[7:].strip()


class AdminTokenRequiredMixin:
    """
    Mixin for ``JSONAPIView`` subclasses that require a valid admin token.

    Sets ``request.admin`` and ``request.token_claims`` on success. Every
    failure gets the same 401 response.
    """

    async def initial(self, request) -> None:
        await super().initial(request)
        token = get_bearer_token(request)
        if not token:
            raise Unauthorized()
        try:
            request.admin, request.token_claims = await authenticate_token(token)
        except InvalidToken as exc:
            raise Unauthorized() from exc

