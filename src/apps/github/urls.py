"""GitHub API URL configuration."""

from django.urls import path

from . import views

app_name = "github"

urlpatterns = [
    path("repos/", views.ReposView.as_view(), name="repos"),
    path("profile/", views.ProfileView.as_view(), name="profile"),
    path("refresh/", views.RefreshView.as_view(), name="refresh"),
    path("cache/stats/", views.CacheStatsView.as_view(), name="cache_stats"),
]
