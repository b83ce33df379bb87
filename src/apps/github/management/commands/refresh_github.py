"""
Refresh the cached GitHub repositories and profile.

Run once at deploy time to warm the cache, then every 2 hours from cron:

    0 */2 * * * cd /path/to/src && python manage.py refresh_github

The web process only sees the result when CACHE_URL names a shared backend.
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from apps.github import services


class Command(BaseCommand):
    help = "Fetch fresh GitHub data into the cache (stale entries are kept if GitHub is unreachable)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--username",
            type=str,
            default="",
            help="GitHub user to refresh (default: settings.GITHUB_USERNAME).",
        )

    def handle(self, *args, **options):
        username = options["username"] or settings.GITHUB_USERNAME

        repos = async_to_sync(services.fetch_pinned_repos)(username, refresh=True)
        if not services.is_cache_valid(services.repos_cache_key(username)):
            raise CommandError(f"Could not refresh GitHub repositories for {username}.")
        self.stdout.write(f"Cached {len(repos)} repositories for {username}")

        try:
            async_to_sync(services.fetch_user_profile)(username, refresh=True)
        except services.GitHubError as exc:
            raise CommandError(f"Could not refresh GitHub profile for {username}.") from exc
        if not services.is_cache_valid(services.profile_cache_key(username)):
            raise CommandError(f"Could not refresh GitHub profile for {username}.")

        self.stdout.write(self.style.SUCCESS(f"GitHub data for {username} refreshed."))
