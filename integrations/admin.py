"""
Django admin configuration for integrations app.
"""

from django.contrib import admin

from integrations.infrastructure.models import RegisteredApp


@admin.register(RegisteredApp)
class RegisteredAppAdmin(admin.ModelAdmin):
    """Admin interface for RegisteredApp model. Apps are created with register_app."""

    list_display = ["name", "key_prefix_display", "is_admin", "last_used_at", "created_at"]
    list_filter = ["is_admin", "created_at"]
    search_fields = ["name", "key_prefix"]
    readonly_fields = ["id", "key_prefix", "key_hash", "created_at", "last_used_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "name", "is_admin"),
            },
        ),
        (
            "Key Information",
            {
                "fields": ("key_prefix", "key_hash"),
                "description": "The raw key is only shown once by register_app.",
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "last_used_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def key_prefix_display(self, obj):
        """Display key prefix with ellipsis."""
        return f"{obj.key_prefix}..."

    key_prefix_display.short_description = "Key Prefix"

    def has_add_permission(self, request):
        """Keys must be generated by the management command."""
        return False
