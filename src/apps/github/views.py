"""GitHub repository listing API views."""

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt

from apps.core.errors import NotFound
from apps.core.http import JSONAPIView
from apps.core.ratelimit import RateLimitMixin

from . import services

PROFILE_FIELDS = (
    "login",
    "name",
    "bio",
    "location",
    "blog",
    "public_repos",
    "followers",
    "following",
    "avatar_url",
    "html_url",
)


class GitHubAPIView(RateLimitMixin, JSONAPIView):
    rate_limit_scope = "github"


class ReposView(GitHubAPIView):
    """API: pinned repositories for the projects page."""

    async def get(self, request: HttpRequest) -> JsonResponse:
        was_cached = services.is_cache_valid(services.repos_cache_key(settings.GITHUB_USERNAME))
        repos = await services.fetch_pinned_repos()
        return JsonResponse(
            {
                "success": True,
                "repos": repos,
                "cached": was_cached,
                "timestamp": timezone.now().isoformat(),
            }
        )


class ProfileView(GitHubAPIView):
    """API: public GitHub profile summary."""

    async def get(self, request: HttpRequest) -> JsonResponse:
        was_cached = services.is_cache_valid(services.profile_cache_key(settings.GITHUB_USERNAME))
        profile = await services.fetch_user_profile()
        return JsonResponse(
            {
                "success": True,
                "profile": {field: profile.get(field) for field in PROFILE_FIELDS},
                "cached": was_cached,
                "timestamp": timezone.now().isoformat(),
            }
        )


@method_decorator(csrf_exempt, name="dispatch")
class RefreshView(GitHubAPIView):
    """API: drop the cache and fetch fresh repositories."""

    async def post(self, request: HttpRequest) -> JsonResponse:
        services.clear_cache()
        repos = await services.fetch_pinned_repos()
        return JsonResponse(
            {
                "success": True,
                "message": "GitHub data refreshed successfully",
                "repos": repos,
                "timestamp": timezone.now().isoformat(),
            }
        )


class CacheStatsView(JSONAPIView):
    """API: cache statistics, only exposed with DEBUG on."""

    async def get(self, request: HttpRequest) -> JsonResponse:
        if not settings.DEBUG:
            raise NotFound("Endpoint not available in production")
        return JsonResponse(
            {"success": True, "cache": services.cache_stats(), "timestamp": timezone.now().isoformat()}
        )
