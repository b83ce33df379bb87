"""
GitHub repository listing for the projects page.

Uses the public REST API (https://api.github.com). Responses are kept in
Django's default cache and count as fresh for 30 minutes (configurable via
settings.GITHUB_CACHE_TTL); when GitHub is unreachable the last cached value,
or a built-in fallback list, is served instead. Point CACHE_URL at a shared
backend (e.g. filecache://) so the refresh_github command warms the cache the
web process reads.
"""

import asyncio
import json
import logging
import threading
import time
from datetime import UTC, datetime, timedelta
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from django.conf import settings
from django.core.cache import cache

from apps.core.errors import ServiceError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
GITHUB_API_URL = "https://api.github.com"
MAX_PINNED_REPOS = 6
MIN_FALLBACK_REPOS = 3
RECENT_ACTIVITY_DAYS = 90

FALLBACK_REPOS: list[dict] = [
    {
        "id": 1,
        "name": "PHARMUP",
        "description": "A comprehensive pharmaceutical management system built with modern web technologies",
        "html_url": "https://github.com/lewisgathaiya/pharmup",
        "language": "JavaScript",
        "stargazers_count": 0,
        "updated_at": None,
        "topics": ["pharmacy", "management", "healthcare"],
        "homepage": None,
    },
    {
        "id": 2,
        "name": "SECULEARN",
        "description": "An innovative security learning platform for cybersecurity education",
        "html_url": "https://github.com/lewisgathaiya/seculearn",
        "language": "Python",
        "stargazers_count": 0,
        "updated_at": None,
        "topics": ["security", "education", "cybersecurity"],
        "homepage": None,
    },
    {
        "id": 3,
        "name": "lewis-portfolio-website",
        "description": "Modern portfolio website with animated backgrounds and multilingual support",
        "html_url": "https://github.com/lewisgathaiya/lewis-portfolio-website",
        "language": "JavaScript",
        "stargazers_count": 0,
        "updated_at": None,
        "topics": ["portfolio", "react", "nextjs"],
        "homepage": "https://mwangilewis.com",
    },
]


class GitHubError(ServiceError):
    status = 502
    message = "Failed to fetch GitHub data"


# ---------------------------------------------------------------------------
# Cache: entries live in Django's default cache as {"data": ..., "fetched": epoch}
# and never expire there, so a stale copy stays available when GitHub is down.
# Freshness is judged against GITHUB_CACHE_TTL on read.
# ---------------------------------------------------------------------------
CACHE_PREFIX = "github"
_KEY_INDEX = f"{CACHE_PREFIX}:keys"
_index_lock = threading.Lock()


def _cache_ttl() -> int:
    return getattr(settings, "GITHUB_CACHE_TTL", 30 * 60)


def repos_cache_key(username: str) -> str:
    return f"{CACHE_PREFIX}:pinned_repos:{username}"


def profile_cache_key(username: str) -> str:
    return f"{CACHE_PREFIX}:user_profile:{username}"


def _is_fresh(entry: dict) -> bool:
    return (time.time() - entry["fetched"]) < _cache_ttl()


def is_cache_valid(key: str) -> bool:
    """True if *key* is cached and younger than the TTL."""
    entry = cache.get(key)
    return entry is not None and _is_fresh(entry)


def _cached(key: str, *, allow_stale: bool = False):
    entry = cache.get(key)
    if entry is None:
        return None
    if allow_stale or _is_fresh(entry):
        return entry["data"]
    return None


def _store(key: str, data) -> None:
    cache.set(key, {"data": data, "fetched": time.time()}, timeout=None)
    with _index_lock:
        keys = cache.get(_KEY_INDEX, [])
        if key not in keys:
            cache.set(_KEY_INDEX, [*keys, key], timeout=None)


def clear_cache() -> None:
    with _index_lock:
        cache.delete_many([*cache.get(_KEY_INDEX, []), _KEY_INDEX])
    logger.info("GitHub service cache cleared")


def cache_stats() -> dict:
    keys = cache.get(_KEY_INDEX, [])
    return {"size": len(keys), "keys": keys, "timeout": _cache_ttl()}


# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------
def _default_username() -> str:
    return settings.GITHUB_USERNAME


def _get_json_sync(path: str):
    """GET ``GITHUB_API_URL + path`` (synchronous, for executor use). Raises GitHubError."""
    headers = {
        "User-Agent": "Portfolio-Website",
        "Accept": "application/vnd.github.v3+json",
    }
    token = getattr(settings, "GITHUB_TOKEN", "")
    if token:
        headers["Authorization"] = f"token {token}"

    req = Request(f"{GITHUB_API_URL}{path}", headers=headers)  # noqa: S310
    try:
        resp = urlopen(req, timeout=10)  # noqa: S310
        return json.loads(resp.read())
    except HTTPError as exc:
        body = exc.read().decode(errors="replace")[:300]
        msg = f"GitHub API returned HTTP {exc.code}: {body}"
        logger.error(msg)
        raise GitHubError() from exc
    except Exception as exc:
        logger.error("GitHub API request failed: %s", exc)
        raise GitHubError() from exc


async def _get_json(path: str):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, _get_json_sync, path)


def _parse_updated(repo: dict) -> datetime:
    value = repo.get("updated_at")
    if not value:
        return datetime.min.replace(tzinfo=UTC)
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _stars(repo: dict) -> int:
    return repo.get("stargazers_count") or 0


def fallback_repos() -> list[dict]:
    """Fresh copies of the built-in list, safe for callers to modify."""
    return [dict(repo, topics=list(repo["topics"])) for repo in FALLBACK_REPOS]


def _format_repo(repo: dict) -> dict:
    return {
        "id": repo.get("id"),
        "name": repo.get("name"),
        "description": repo.get("description") or "No description available",
        "html_url": repo.get("html_url"),
        "language": repo.get("language") or "Unknown",
        "stargazers_count": _stars(repo),
        "updated_at": repo.get("updated_at"),
        "topics": repo.get("topics") or [],
        "homepage": repo.get("homepage"),
    }


def select_pinned_repos(repos: list[dict], *, now: datetime | None = None) -> list[dict]:
    """
    Pick the repositories to show on the projects page.

    Forks are ignored. Featured names (settings.GITHUB_FEATURED_REPOS, matched
    case-insensitively as substrings) come first, then repos that have stars,
    a description or recent activity, by stars and then by last update.
    """
    if not repos:
        return fallback_repos()

    now = now or datetime.now(UTC)
    recent_cutoff = now - timedelta(days=RECENT_ACTIVITY_DAYS)
    featured_names = [name.lower() for name in getattr(settings, "GITHUB_FEATURED_REPOS", [])]

    originals = [repo for repo in repos if not repo.get("fork")]
    featured = [
        repo for repo in originals if any(name in (repo.get("name") or "").lower() for name in featured_names)
    ]
    others = [
        repo
        for repo in originals
        if repo not in featured
        and (_stars(repo) > 0 or repo.get("description") or _parse_updated(repo) > recent_cutoff)
    ]
    others.sort(key=lambda repo: (_stars(repo), _parse_updated(repo)), reverse=True)

    pinned = (featured + others)[:MAX_PINNED_REPOS]
    if not pinned:
        if not originals:
            return fallback_repos()
        pinned = originals[:MIN_FALLBACK_REPOS]

    return [_format_repo(repo) for repo in pinned]


async def fetch_pinned_repos(username: str | None = None, *, refresh: bool = False) -> list[dict]:
    """Return the selected repositories, from cache when fresh unless *refresh* is set."""
    username = username or _default_username()
    key = repos_cache_key(username)

    cached = None if refresh else _cached(key)
    if cached is not None:
        return cached

    try:
        repos = await _get_json(f"/users/{username}/repos?sort=updated&per_page=100")
    except GitHubError:
        stale = _cached(key, allow_stale=True)
        if stale is not None:
            logger.warning("Returning stale cached GitHub repos for %s", username)
            return stale
        logger.warning("Returning fallback GitHub repos for %s", username)
        return fallback_repos()

    pinned = select_pinned_repos(repos)
    _store(key, pinned)
    logger.info("Fetched %d pinned repositories from GitHub for %s", len(pinned), username)
    return pinned


async def fetch_user_profile(username: str | None = None, *, refresh: bool = False) -> dict:
    """Return the GitHub profile. Raises GitHubError when nothing is cached to fall back on."""
    username = username or _default_username()
    key = profile_cache_key(username)

    cached = None if refresh else _cached(key)
    if cached is not None:
        return cached

    try:
        profile = await _get_json(f"/users/{username}")
    except GitHubError:
        stale = _cached(key, allow_stale=True)
        if stale is not None:
            return stale
        raise

    _store(key, profile)
    return profile
