"""
Django admin configuration for corporations app.
"""

from django.contrib import admin

from corporations.infrastructure.models import (
    ClientAttachment,
    Corporation,
    EntitlementPeriod,
)


class ClientAttachmentInline(admin.TabularInline):
    """Inline for attachments on the corporation page."""

    model = ClientAttachment
    extra = 0
    fields = ["consumer_key", "license_key", "disabled", "unlink_date", "token_end_date"]
    readonly_fields = fields
    can_delete = False
    show_change_link = True


class EntitlementPeriodInline(admin.TabularInline):
    """Inline for periods on the attachment page."""

    model = EntitlementPeriod
    extra = 0
    fields = ["position", "begin_date", "end_date", "is_demo"]
    readonly_fields = fields
    can_delete = False


@admin.register(Corporation)
class CorporationAdmin(admin.ModelAdmin):
    """Admin interface for Corporation model."""

    list_display = ["code", "description", "town", "city", "banned", "active_clients", "created_at"]
    list_filter = ["banned", "created_at"]
    search_fields = ["code", "description", "town", "city"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [ClientAttachmentInline]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "code", "description", "town", "city", "banned"),
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

    @admin.display(description="Active clients")
    def active_clients(self, obj):
        """Display active attachment count."""
        return obj.active_clients


@admin.register(ClientAttachment)
class ClientAttachmentAdmin(admin.ModelAdmin):
    """Admin interface for ClientAttachment model."""

    list_display = [
        "consumer_key",
        "corporation",
        "license_key",
        "disabled",
        "unlink_date",
        "token_end_date",
        "created_at",
    ]
    list_filter = ["disabled", "created_at"]
    search_fields = ["consumer_key", "license_key", "corporation__code"]
    readonly_fields = [
        "id",
        "corporation",
        "consumer_key",
        "license_key",
        "disabled",
        "unlink_date",
        "token",
        "token_given_date",
        "token_end_date",
        "created_at",
    ]
    inlines = [EntitlementPeriodInline]

    def has_add_permission(self, request):
        """Attachments are created through the API only."""
        return False

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("corporation")
