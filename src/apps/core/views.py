"""Core app views."""

from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from .http import JSONAPIView


class HealthView(JSONAPIView):
    """Liveness check used by the container health check."""

    async def get(self, request: HttpRequest) -> JsonResponse:
        return JsonResponse({"status": "OK", "timestamp": timezone.now().isoformat()})
