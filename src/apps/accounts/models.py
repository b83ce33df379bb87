"""Admin accounts allowed to use the contact management API."""

from typing import ClassVar

from django.contrib.auth.hashers import check_password, make_password
from django.core.validators import validate_email
from django.db import models
from django.utils import timezone

from .validators import validate_admin_password


class AdminManager(models.Manager):
    """Manager with a validated constructor for admin accounts."""

    def create_admin(self, email: str, password: str, **extra_fields) -> "Admin":
        """Create an admin after checking the email and password rules."""
        email = email.strip().lower()
        validate_email(email)
        validate_admin_password(password)
        admin = self.model(email=email, **extra_fields)
        admin.set_password(password)
        admin.save()
        return admin


class Admin(models.Model):
    """An operator credential. Created out-of-band, never through a public endpoint."""

    ROLE_ADMIN = "admin"

    email = models.EmailField("email address", unique=True)
    password = models.CharField("password", max_length=128)
    role = models.CharField(max_length=20, choices=[(ROLE_ADMIN, "Admin")], default=ROLE_ADMIN, editable=False)
    is_active = models.BooleanField("active", default=True)
    login_attempts = models.PositiveIntegerField(default=0)
    lock_until = models.DateTimeField(null=True, blank=True)
    last_login = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AdminManager()

    class Meta:
        ordering: ClassVar[list[str]] = ["-created_at"]
        verbose_name = "admin"
        verbose_name_plural = "admins"

    def __str__(self) -> str:
        return self.email

    def set_password(self, raw_password: str) -> None:
        self.password = make_password(raw_password)

    def check_password(self, raw_password: str) -> bool:
        return check_password(raw_password, self.password)

    @property
    def is_locked(self) -> bool:
        return bool(self.lock_until and self.lock_until > timezone.now())

    def as_dict(self) -> dict:
        return {"id": self.pk, "email": self.email, "role": self.role}
