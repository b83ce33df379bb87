"""Tests for admin accounts, tokens and the auth endpoints."""

import json
from datetime import timedelta
from io import StringIO

import jwt
import pytest
from asgiref.sync import async_to_sync
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.management import CommandError, call_command
from django.test import Client
from django.urls import reverse
from django.utils import timezone

from apps.accounts import auth
from apps.accounts.models import Admin
from apps.accounts.tokens import issue_token, verify_token
from apps.accounts.validators import validate_admin_password
from apps.core.errors import AccountDisabled, AccountLocked, InvalidCredentials, InvalidToken

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


def _login(client: Client, email: str, password: str):
    return client.post(
        reverse("accounts:login"),
        data=json.dumps({"email": email, "password": password}),
        content_type="application/json",
    )


# ───────────────────────────── Password rules ────────────────────────────────


class TestAdminPasswordValidator:
    """Tests for validate_admin_password()."""

    def test_strong_password(self) -> None:
        validate_admin_password("MyStr0ngP@ssw0rd!")

    @pytest.mark.parametrize(
        "password",
        ["Sh0rt!a", "alllower1!", "ALLUPPER1!", "NoDigits!!", "NoSpecial12", "        "],
    )
    def test_weak_passwords(self, password: str) -> None:
        with pytest.raises(DjangoValidationError):
            validate_admin_password(password)

    def test_lists_every_missing_rule(self) -> None:
        with pytest.raises(DjangoValidationError) as excinfo:
            validate_admin_password("abc")
        messages = " ".join(excinfo.value.messages)
        assert "at least 8 characters" in messages
        assert "uppercase" in messages
        assert "number" in messages


# ──────────────────────────────── Model ──────────────────────────────────────


@pytest.mark.django_db
class TestAdminModel:
    """Tests for the Admin model."""

    def test_create_admin_hashes_password(self) -> None:
        admin = Admin.objects.create_admin("Boss@Example.com", ADMIN_PASSWORD)
        assert admin.email == "boss@example.com"
        assert admin.password != ADMIN_PASSWORD
        assert admin.check_password(ADMIN_PASSWORD)
        assert not admin.check_password("wrong")

    def test_defaults(self, admin_account: Admin) -> None:
        assert admin_account.role == "admin"
        assert admin_account.is_active is True
        assert admin_account.login_attempts == 0
        assert admin_account.is_locked is False
        assert str(admin_account) == ADMIN_EMAIL

    def test_create_admin_rejects_weak_password(self, db) -> None:
        with pytest.raises(DjangoValidationError):
            Admin.objects.create_admin("weak@example.com", "password")

    def test_email_unique(self, admin_account: Admin) -> None:
        from django.db import IntegrityError

        with pytest.raises(IntegrityError):
            Admin.objects.create(email=ADMIN_EMAIL, password="x")

    def test_is_locked(self, admin_account: Admin) -> None:
        admin_account.lock_until = timezone.now() + timedelta(minutes=5)
        assert admin_account.is_locked is True
        admin_account.lock_until = timezone.now() - timedelta(minutes=5)
        assert admin_account.is_locked is False


# ──────────────────────────────── Tokens ─────────────────────────────────────


@pytest.mark.django_db
class TestTokens:
    """Tests for token issuance and verification."""

    def test_round_trip(self, admin_account: Admin) -> None:
        claims = verify_token(issue_token(admin_account))
        assert claims.admin_id == admin_account.pk
        assert claims.email == ADMIN_EMAIL
        assert claims.role == "admin"
        assert claims.is_expired is False
        assert claims.expires_at - claims.issued_at == timedelta(hours=24)

    def test_expired_token(self, admin_account: Admin) -> None:
        """A correctly signed token past its expiry is rejected."""
        token = issue_token(admin_account, now=timezone.now() - timedelta(hours=25))
        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_bad_signature(self, admin_account: Admin) -> None:
        token = jwt.encode(
            {"sub": str(admin_account.pk), "email": ADMIN_EMAIL, "role": "admin", "iat": timezone.now(),
             "exp": timezone.now() + timedelta(hours=1)},
            "some-other-secret-that-is-long-enough",
            algorithm="HS256",
        )
        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_malformed_token(self) -> None:
        with pytest.raises(InvalidToken):
            verify_token("not.a.token")

    def test_missing_claims(self, settings) -> None:
        token = jwt.encode({"sub": "1"}, settings.JWT_SECRET_KEY, algorithm="HS256")
        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_all_failures_share_one_message(self, admin_account: Admin) -> None:
        expired = issue_token(admin_account, now=timezone.now() - timedelta(days=2))
        messages = set()
        for token in (expired, "garbage", expired + "x"):
            with pytest.raises(InvalidToken) as excinfo:
                verify_token(token)
            messages.add(str(excinfo.value))
        assert messages == {"Invalid token"}


# ──────────────────────────────── Login ──────────────────────────────────────


@pytest.mark.django_db
class TestLogin:
    """Tests for auth.login()."""

    def test_success(self, admin_account: Admin) -> None:
        result = async_to_sync(auth.login)(ADMIN_EMAIL, ADMIN_PASSWORD)
        claims = verify_token(result.token)
        assert (claims.email, claims.role) == (ADMIN_EMAIL, "admin")
        admin_account.refresh_from_db()
        assert admin_account.last_login is not None

    def test_unknown_email(self, db) -> None:
        with pytest.raises(InvalidCredentials):
            async_to_sync(auth.login)("nobody@example.com", ADMIN_PASSWORD)

    def test_wrong_password_counts_attempts(self, admin_account: Admin) -> None:
        with pytest.raises(InvalidCredentials):
            async_to_sync(auth.login)(ADMIN_EMAIL, "Wr0ng!Pass")
        admin_account.refresh_from_db()
        assert admin_account.login_attempts == 1

    def test_lockout_after_max_attempts(self, admin_account: Admin, settings) -> None:
        """Five wrong passwords lock the account, even for the right password."""
        settings.ADMIN_MAX_LOGIN_ATTEMPTS = 5
        for _ in range(5):
            with pytest.raises(InvalidCredentials):
                async_to_sync(auth.login)(ADMIN_EMAIL, "Wr0ng!Pass")
        admin_account.refresh_from_db()
        assert admin_account.is_locked

        with pytest.raises(AccountLocked):
            async_to_sync(auth.login)(ADMIN_EMAIL, ADMIN_PASSWORD)

    def test_expired_lock_restarts_count(self, admin_account: Admin) -> None:
        admin_account.login_attempts = 5
        admin_account.lock_until = timezone.now() - timedelta(minutes=1)
        admin_account.save()
        with pytest.raises(InvalidCredentials):
            async_to_sync(auth.login)(ADMIN_EMAIL, "Wr0ng!Pass")
        admin_account.refresh_from_db()
        assert admin_account.login_attempts == 1
        assert admin_account.lock_until is None

    def test_lock_uses_stored_attempt_count(self, admin_account: Admin, settings) -> None:
        """A failure counted by a concurrent request still tips the account into lockout."""
        settings.ADMIN_MAX_LOGIN_ATTEMPTS = 5
        stale = Admin.objects.get(pk=admin_account.pk)
        Admin.objects.filter(pk=admin_account.pk).update(login_attempts=4)
        assert stale.login_attempts == 0

        async_to_sync(auth._record_failed_attempt)(stale)

        admin_account.refresh_from_db()
        assert admin_account.login_attempts == 5
        assert admin_account.is_locked

    def test_locked_account_keeps_original_lock(self, admin_account: Admin) -> None:
        """Wrong passwords during a lock neither count nor extend it."""
        lock_until = timezone.now() + timedelta(minutes=30)
        admin_account.login_attempts = 5
        admin_account.lock_until = lock_until
        admin_account.save()
        with pytest.raises(InvalidCredentials):
            async_to_sync(auth.login)(ADMIN_EMAIL, "Wr0ng!Pass")
        admin_account.refresh_from_db()
        assert (admin_account.login_attempts, admin_account.lock_until) == (5, lock_until)

    def test_success_resets_attempts(self, admin_account: Admin) -> None:
        admin_account.login_attempts = 3
        admin_account.save()
        async_to_sync(auth.login)(ADMIN_EMAIL, ADMIN_PASSWORD)
        admin_account.refresh_from_db()
        assert admin_account.login_attempts == 0

    def test_disabled_account(self, admin_account: Admin) -> None:
        admin_account.is_active = False
        admin_account.save()
        with pytest.raises(AccountDisabled):
            async_to_sync(auth.login)(ADMIN_EMAIL, ADMIN_PASSWORD)

    def test_disabled_account_wrong_password(self, admin_account: Admin) -> None:
        """A wrong password on a disabled account is still just invalid credentials."""
        admin_account.is_active = False
        admin_account.save()
        with pytest.raises(InvalidCredentials):
            async_to_sync(auth.login)(ADMIN_EMAIL, "Wr0ng!Pass")


# ────────────────────────────── Auth API ─────────────────────────────────────


@pytest.mark.django_db
class TestLoginAPI:
    """Tests for POST /api/auth/login/."""

    def test_login_success(self, client: Client, admin_account: Admin) -> None:
        response = _login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"]["email"] == ADMIN_EMAIL
        assert data["user"]["role"] == "admin"
        assert data["user"]["lastLogin"]
        assert verify_token(data["token"]).admin_id == admin_account.pk

    def test_wrong_password_matches_unknown_email(self, client: Client, admin_account: Admin) -> None:
        """The response never reveals whether the account exists."""
        wrong_password = _login(client, ADMIN_EMAIL, "Wr0ng!Pass")
        unknown_email = _login(client, "ghost@example.com", ADMIN_PASSWORD)
        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"success": False, "message": "Invalid credentials"}

    def test_disabled_account(self, client: Client, admin_account: Admin) -> None:
        admin_account.is_active = False
        admin_account.save()
        response = _login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_locked_account(self, client: Client, admin_account: Admin) -> None:
        admin_account.lock_until = timezone.now() + timedelta(hours=1)
        admin_account.save()
        response = _login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
        assert response.status_code == 423

    def test_missing_fields(self, client: Client, db) -> None:
        response = client.post(reverse("accounts:login"), data="{}", content_type="application/json")
        assert response.status_code == 400
        assert set(response.json()["errors"]) == {"email", "password"}

    def test_rate_limited(self, client: Client, admin_account: Admin, settings) -> None:
        settings.RATE_LIMITS = {"auth": {"limit": 2, "window": 900, "message": "Too many login attempts"}}
        _login(client, ADMIN_EMAIL, "Wr0ng!Pass")
        _login(client, ADMIN_EMAIL, "Wr0ng!Pass")
        response = _login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
        assert response.status_code == 429
        assert response.json()["message"] == "Too many login attempts"

    def test_rate_limit_ignores_spoofed_forwarded_for(self, client: Client, admin_account: Admin, settings) -> None:
        """Rotating X-Forwarded-For doesn't earn a fresh allowance without a trusted proxy."""
        settings.RATE_LIMITS = {"auth": {"limit": 2, "window": 900, "message": "Too many login attempts"}}
        statuses = [
            client.post(
                reverse("accounts:login"),
                data=json.dumps({"email": ADMIN_EMAIL, "password": "Wr0ng!Pass"}),
                content_type="application/json",
                HTTP_X_FORWARDED_FOR=f"10.0.0.{i}",
            ).status_code
            for i in range(4)
        ]
        assert statuses == [401, 401, 429, 429]


@pytest.mark.django_db
class TestVerifyTokenAPI:
    """Tests for POST /api/auth/verify-token/."""

    def test_bearer_header(self, client: Client, admin_account: Admin, auth_headers: dict) -> None:
        response = client.post(reverse("accounts:verify_token"), **auth_headers)
        assert response.status_code == 200
        assert response.json()["user"] == {"id": admin_account.pk, "email": ADMIN_EMAIL, "role": "admin"}

    def test_token_in_body(self, client: Client, admin_token: str) -> None:
        response = client.post(
            reverse("accounts:verify_token"),
            data=json.dumps({"token": admin_token}),
            content_type="application/json",
        )
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_missing_token(self, client: Client, db) -> None:
        response = client.post(reverse("accounts:verify_token"))
        assert response.status_code == 400
        assert response.json()["message"] == "Token is required"

    def test_missing_token_form_body(self, client: Client, db) -> None:
        """A form-encoded body is not searched for a token."""
        response = client.post(
            reverse("accounts:verify_token"),
            data="token=abc",
            content_type="application/x-www-form-urlencoded",
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Token is required"

    def test_missing_token_empty_json(self, client: Client, db) -> None:
        response = client.post(reverse("accounts:verify_token"), data="", content_type="application/json")
        assert response.status_code == 400
        assert response.json()["message"] == "Token is required"

    def test_expired_token(self, client: Client, admin_account: Admin) -> None:
        token = issue_token(admin_account, now=timezone.now() - timedelta(hours=25))
        response = client.post(reverse("accounts:verify_token"), HTTP_AUTHORIZATION=f"Bearer {token}")
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid token"}

    def test_deactivated_admin(self, client: Client, admin_account: Admin, auth_headers: dict) -> None:
        admin_account.is_active = False
        admin_account.save()
        response = client.post(reverse("accounts:verify_token"), **auth_headers)
        assert response.status_code == 401


# ─────────────────────────── create_admin command ────────────────────────────


@pytest.mark.django_db
class TestCreateAdminCommand:
    """Tests for the create_admin management command."""

    def test_creates_admin(self) -> None:
        out = StringIO()
        call_command("create_admin", "Owner@Example.com", "--password", ADMIN_PASSWORD, stdout=out)
        admin = Admin.objects.get(email="owner@example.com")
        assert admin.check_password(ADMIN_PASSWORD)
        assert "created" in out.getvalue()

    def test_refuses_existing_without_reset(self, admin_account: Admin) -> None:
        with pytest.raises(CommandError):
            call_command("create_admin", ADMIN_EMAIL, "--password", ADMIN_PASSWORD)

    def test_reset_clears_lockout(self, admin_account: Admin) -> None:
        admin_account.login_attempts = 5
        admin_account.lock_until = timezone.now() + timedelta(hours=1)
        admin_account.is_active = False
        admin_account.save()
        call_command("create_admin", ADMIN_EMAIL, "--password", "N3w!Password", "--reset", stdout=StringIO())
        admin_account.refresh_from_db()
        assert admin_account.check_password("N3w!Password")
        assert (admin_account.login_attempts, admin_account.lock_until, admin_account.is_active) == (0, None, True)

    def test_rejects_weak_password(self) -> None:
        with pytest.raises(CommandError):
            call_command("create_admin", "owner@example.com", "--password", "weakpass")

    def test_rejects_bad_email(self) -> None:
        with pytest.raises(CommandError):
            call_command("create_admin", "not-an-email", "--password", ADMIN_PASSWORD)
