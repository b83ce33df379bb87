"""
URL configuration for the portfolio backend.
"""

from django.conf import settings
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("apps.core.urls")),
    path("api/contact/", include("apps.contacts.urls")),
    path("api/auth/", include("apps.accounts.urls")),
    path("api/admin/", include("apps.contacts.admin_urls")),
    path("api/github/", include("apps.github.urls")),
]

if settings.DEBUG:
    import debug_toolbar

    urlpatterns = [
        path("__debug__/", include(debug_toolbar.urls)),
        *urlpatterns,
    ]

handler404 = "apps.core.http.route_not_found"
handler500 = "apps.core.http.server_error"
