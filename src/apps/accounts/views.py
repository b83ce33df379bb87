"""Admin authentication API views."""

import logging

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt

from apps.core.errors import ValidationError
from apps.core.http import JSONAPIView, parse_json_body
from apps.core.ratelimit import RateLimitMixin

from . import auth

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class LoginView(RateLimitMixin, JSONAPIView):
    """API: exchange admin email/password for a bearer token."""

    rate_limit_scope = "auth"

    async def post(self, request: HttpRequest) -> JsonResponse:
        data = parse_json_body(request)

        errors: dict[str, list[str]] = {}
        email = data.get("email")
        password = data.get("password")
        if not isinstance(email, str) or not email.strip():
            errors["email"] = ["Please provide a valid email address"]
        if not isinstance(password, str) or not password:
            errors["password"] = ["Password is required"]
        if errors:
            raise ValidationError(errors)

        result = await auth.login(email.strip(), password)
        admin = result.admin
        return JsonResponse(
            {
                "success": True,
                "message": "Login successful",
                "token": result.token,
                "user": {
                    **admin.as_dict(),
                    "lastLogin": admin.last_login.isoformat() if admin.last_login else None,
                },
            }
        )


@method_decorator(csrf_exempt, name="dispatch")
class VerifyTokenView(RateLimitMixin, JSONAPIView):
    """API: check a bearer token and return the admin it belongs to."""

    rate_limit_scope = "auth"

    async def post(self, request: HttpRequest) -> JsonResponse:
        token = auth.get_bearer_token(request)
        if not token and request.content_type == "application/json":
            token = parse_json_body(request).get("token") or ""
        if not isinstance(token, str) or not token:
            raise ValidationError({"token": ["Token is required"]}, message="Token is required")

        admin, _claims = await auth.authenticate_token(token)
        return JsonResponse({"success": True, "message": "Token is valid", "user": admin.as_dict()})
