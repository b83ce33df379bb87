"""Contact app models."""

import uuid
from typing import ClassVar

from django.db import models


class Contact(models.Model):
    """A visitor inquiry submitted through the public contact form."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    email = models.EmailField(db_index=True)
    message = models.TextField(max_length=1000)
    ip_address = models.GenericIPAddressField(protocol="IPv4", null=True, blank=True)
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering: ClassVar[list[str]] = ["-created_at"]
        verbose_name = "contact"
        verbose_name_plural = "contacts"
        indexes: ClassVar[list[models.Index]] = [
            models.Index(fields=["-created_at"], name="contact_created_desc_idx"),
            models.Index(fields=["read", "-created_at"], name="contact_read_created_idx"),
            models.Index(fields=["email", "-created_at"], name="contact_email_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.email} ({self.created_at:%Y-%m-%d})"

    def as_dict(self) -> dict:
        """JSON representation returned by the admin API."""
        return {
            "id": str(self.pk),
            "name": self.name,
            "email": self.email,
            "message": self.message,
            "read": self.read,
            "ipAddress": self.ip_address,
            "createdAt": self.created_at.isoformat(),
        }
