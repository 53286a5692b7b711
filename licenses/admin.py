"""
Django admin configuration for licenses app.
"""
from django.contrib import admin

from licenses.infrastructure.models import LicenseKey


@admin.register(LicenseKey)
class LicenseKeyAdmin(admin.ModelAdmin):
    """Admin interface for LicenseKey model."""

    list_display = ["key", "used", "created_at", "updated_at"]
    list_filter = ["used", "created_at"]
    search_fields = ["key"]
    readonly_fields = ["id", "key", "used", "created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "key", "used"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def has_delete_permission(self, request, obj=None):
        """Keys are never deleted."""
        return False
