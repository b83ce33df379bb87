"""Shared plumbing for the JSON API views."""

import json
import logging

from django.conf import settings
from django.db import DatabaseError
from django.http import HttpRequest, JsonResponse
from django.views import View
from django.views.defaults import page_not_found

from .errors import MethodNotAllowed, NotFound, ServiceError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def get_client_ip(request: HttpRequest) -> str:
    """
    Return the address of the client that made the request.

    ``X-Forwarded-For`` is only honoured when ``TRUSTED_PROXY_COUNT`` proxies
    sit in front of the app; the client is then the entry that many places
    from the right. Anything further left was supplied by the client.
    """
    remote_addr = request.META.get("REMOTE_ADDR", "unknown")
    proxies = getattr(settings, "TRUSTED_PROXY_COUNT", 0)
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if not proxies or not forwarded:
        return remote_addr
    hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
    if not hops:
        return remote_addr
    return hops[-proxies] if len(hops) >= proxies else hops[0]


def parse_json_body(request: HttpRequest) -> dict:
    """Decode the request body as a JSON object. An empty body decodes to ``{}``."""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationError({"body": ["Invalid JSON body"]}) from exc
    if not isinstance(data, dict):
        raise ValidationError({"body": ["Expected a JSON object"]})
    return data


def error_response(error: ServiceError) -> JsonResponse:
    return JsonResponse(error.as_payload(), status=error.status)


def route_not_found(request: HttpRequest, exception=None):
    """``handler404``: unknown routes under ``/api/`` get the JSON error shape."""
    if not request.path.startswith("/api/"):
        return page_not_found(request, exception)
    return error_response(NotFound("Route not found"))


def server_error(request: HttpRequest) -> JsonResponse:
    """``handler500``: errors raised outside ``JSONAPIView`` still answer in JSON."""
    return error_response(ServiceError())


class JSONAPIView(View):
    """
    Async base view for the ``/api/`` endpoints.

    Subclasses implement async handlers and raise ``ServiceError`` subclasses;
    this class turns them into ``{"success": false, "message": ...}`` responses.
    Mixins hook into ``initial()`` to run checks before the handler.
    """

    async def initial(self, request: HttpRequest) -> None:
        """Run before the handler. Cooperative: mixins call ``super().initial()``."""

    async def http_method_not_allowed(self, request, *args, **kwargs):
        logger.warning("Method Not Allowed (%s): %s", request.method, request.path)
        response = error_response(MethodNotAllowed())
        response["Allow"] = ", ".join(self._allowed_methods())
        return response

    async def dispatch(self, request, *args, **kwargs):
        try:
            await self.initial(request)
            return await super().dispatch(request, *args, **kwargs)
        except ServiceError as exc:
            return error_response(exc)
        except DatabaseError:
            logger.exception("Database error handling %s %s", request.method, request.path)
            return error_response(StorageError())
        except Exception:
            logger.exception("Unhandled error handling %s %s", request.method, request.path)
            return error_response(ServiceError())
