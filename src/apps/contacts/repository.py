"""Persistence and queries for contact submissions."""

import logging
import math
import uuid
from dataclasses import dataclass
from functools import wraps

from django.db import DatabaseError

from apps.core.errors import NotFound, StorageError

from .models import Contact
from .validators import ContactInput

logger = logging.getLogger(__name__)

DASHBOARD_RECENT_LIMIT = 5


@dataclass(frozen=True)
class ContactPage:
    """One page of contacts, newest first, with pagination totals."""

    contacts: list[Contact]
    page: int
    page_size: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    def pagination(self) -> dict:
        return {"page": self.page, "limit": self.page_size, "total": self.total, "pages": self.pages}


def _storage_errors(func):
    """Re-raise database failures as ``StorageError``."""

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except DatabaseError as exc:
            logger.exception("Contact store operation %s failed", func.__name__)
            raise StorageError() from exc

    return wrapper


def _parse_id(contact_id) -> uuid.UUID:
    try:
        return uuid.UUID(str(contact_id))
    except ValueError as exc:
        raise NotFound("Contact not found") from exc


@_storage_errors
async def create(contact: ContactInput, ip_address: str | None = None) -> Contact:
    """Insert a new unread contact."""
    return await Contact.objects.acreate(
        name=contact.name,
        email=contact.email,
        message=contact.message,
        ip_address=ip_address,
    )


@_storage_errors
async def list_page(page: int, page_size: int) -> ContactPage:
    offset = (page - 1) * page_size
    total = await Contact.objects.acount()
    contacts = [c async for c in Contact.objects.order_by("-created_at")[offset : offset + page_size]]
    return ContactPage(contacts=contacts, page=page, page_size=page_size, total=total)


@_storage_errors
async def get(contact_id) -> Contact:
    try:
        return await Contact.objects.aget(pk=_parse_id(contact_id))
    except Contact.DoesNotExist as exc:
        raise NotFound("Contact not found") from exc


@_storage_errors
async def set_read(contact_id, read: bool) -> Contact:
    """Set the read flag. Setting it to its current value changes nothing."""
    contact = await get(contact_id)
    if contact.read != read:
        contact.read = read
        await contact.asave(update_fields=["read", "updated_at"])
    return contact


@_storage_errors
async def delete(contact_id) -> None:
    deleted, _ = await Contact.objects.filter(pk=_parse_id(contact_id)).adelete()
    if not deleted:
        raise NotFound("Contact not found")


@_storage_errors
async def count_all() -> int:
    return await Contact.objects.acount()


@_storage_errors
async def count_unread() -> int:
    return await Contact.objects.filter(read=False).acount()


@_storage_errors
async def recent(n: int = DASHBOARD_RECENT_LIMIT) -> list[Contact]:
    return [c async for c in Contact.objects.order_by("-created_at")[:n]]
