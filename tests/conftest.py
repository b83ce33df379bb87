"""Pytest configuration for the portfolio backend tests."""

import django
import pytest
from django.conf import settings

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "Str0ng!Pass"  # noqa: S105


def pytest_configure() -> None:
    """Configure Django settings for pytest."""
    settings.DJANGO_SETTINGS_MODULE = "config.settings.test"
    django.setup()


@pytest.fixture(autouse=True)
def _reset_in_memory_state():
    """Rate-limit hits and the GitHub cache are per-process; start each test clean."""
    from apps.core.ratelimit import reset_rate_limits
    from apps.github.services import clear_cache

    reset_rate_limits()
    clear_cache()
    yield


@pytest.fixture
def admin_account(db):
    """Create an active admin account."""
    from apps.accounts.models import Admin

    return Admin.objects.create_admin(ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def admin_token(admin_account) -> str:
    """Return a valid bearer token for the admin account."""
    from apps.accounts.tokens import issue_token

    return issue_token(admin_account)


@pytest.fixture
def auth_headers(admin_token: str) -> dict:
    """Extra kwargs for the test client carrying the admin bearer token."""
    return {"HTTP_AUTHORIZATION": f"Bearer {admin_token}"}
