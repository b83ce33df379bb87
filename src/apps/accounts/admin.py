"""Admin configuration for accounts app."""

from django.contrib import admin

from .models import Admin


@admin.register(Admin)
class AdminAccountAdmin(admin.ModelAdmin):
    """Back-office view of API admin accounts. Passwords are set with ``create_admin``."""

    list_display = ("email", "role", "is_active", "login_attempts", "lock_until", "last_login", "created_at")
    list_filter = ("is_active",)
    search_fields = ("email",)
    readonly_fields = ("password", "role", "last_login", "created_at", "updated_at")
    ordering = ("-created_at",)
