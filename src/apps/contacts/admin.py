"""Contact app admin configuration."""

from django.contrib import admin

from .models import Contact


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    """Admin interface for contact form submissions."""

    list_display = ("name", "email", "read", "ip_address", "created_at")
    list_filter = ("read", "created_at")
    search_fields = ("name", "email", "message")
    readonly_fields = ("ip_address", "created_at", "updated_at")
    ordering = ("-created_at",)
