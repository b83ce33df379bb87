"""Contact intake and admin contact management API views."""

import logging

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt

from apps.accounts.auth import AdminTokenRequiredMixin
from apps.core.errors import ValidationError
from apps.core.http import JSONAPIView, get_client_ip, parse_json_body
from apps.core.ratelimit import RateLimitMixin

from . import repository
from .services import send_contact_notification
from .validators import normalize_ip, validate_contact

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def _int_param(value: str | None, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@method_decorator(csrf_exempt, name="dispatch")
class ContactSubmitView(RateLimitMixin, JSONAPIView):
    """API: accept a public contact form submission."""

    rate_limit_scope = "contact"

    async def post(self, request: HttpRequest) -> JsonResponse:
        contact = validate_contact(parse_json_body(request))
        submission = await repository.create(contact, ip_address=normalize_ip(get_client_ip(request)))
        logger.info("Contact submission %s stored", submission.pk)

        await send_contact_notification(submission)

        return JsonResponse(
            {"success": True, "message": "Contact form submitted successfully", "id": str(submission.pk)},
            status=201,
        )


@method_decorator(csrf_exempt, name="dispatch")
class AdminContactListView(AdminTokenRequiredMixin, JSONAPIView):
    """API: paginated contacts, newest first."""

    async def get(self, request: HttpRequest) -> JsonResponse:
        page = max(_int_param(request.GET.get("page"), 1), 1)
        limit = min(max(_int_param(request.GET.get("limit"), DEFAULT_PAGE_SIZE), 1), MAX_PAGE_SIZE)

        result = await repository.list_page(page, limit)
        return JsonResponse(
            {
                "success": True,
                "contacts": [c.as_dict() for c in result.contacts],
                "pagination": result.pagination(),
            }
        )


@method_decorator(csrf_exempt, name="dispatch")
class AdminContactDetailView(AdminTokenRequiredMixin, JSONAPIView):
    """API: fetch, mark read/unread, or delete a single contact."""

    async def get(self, request: HttpRequest, contact_id: str) -> JsonResponse:
        contact = await repository.get(contact_id)
        return JsonResponse({"success": True, "contact": contact.as_dict()})

    async def put(self, request: HttpRequest, contact_id: str) -> JsonResponse:
        read = parse_json_body(request).get("read", True)
        if not isinstance(read, bool):
            raise ValidationError({"read": ["Must be a boolean"]})

        contact = await repository.set_read(contact_id, read)
        logger.info("Admin %s marked contact %s read=%s", request.admin.pk, contact.pk, read)
        return JsonResponse({"success": True, "message": "Contact updated successfully", "contact": contact.as_dict()})

    async def delete(self, request: HttpRequest, contact_id: str) -> JsonResponse:
        await repository.delete(contact_id)
        logger.info("Admin %s deleted contact %s", request.admin.pk, contact_id)
        return JsonResponse({"success": True, "message": "Contact deleted successfully"})


@method_decorator(csrf_exempt, name="dispatch")
class AdminDashboardView(AdminTokenRequiredMixin, JSONAPIView):
    """API: summary counts and the most recent submissions."""

    async def get(self, request: HttpRequest) -> JsonResponse:
        total = await repository.count_all()
        unread = await repository.count_unread()
        recent = await repository.recent()
        return JsonResponse(
            {
                "success": True,
                "stats": {
                    "totalContacts": total,
                    "unreadContacts": unread,
                    "recentContacts": [c.as_dict() for c in recent],
                },
            }
        )
