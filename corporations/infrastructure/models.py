"""
Corporation, ClientAttachment and EntitlementPeriod models.
"""
import uuid

from django.db import models
from django.db.models import F, Q


class Corporation(models.Model):
    """
    An organizational account holding linked clients.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=100, unique=True, help_text="Unique human identifier")
    description = models.CharField(max_length=255, blank=True, default="")
    town = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=255, blank=True, default="")
    banned = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "corporations"
        ordering = ["code"]

    def __str__(self):
        return self.code

    @property
    def active_clients(self) -> int:
        """
        Count active attachments.

        Returns:
            Number of attachments that are not disabled
        """
        return self.attachments.filter(disabled=False).count()


class ClientAttachment(models.Model):
    """
    A consumer's link to a corporation.

    Rows are soft-disabled on unlink and never deleted while the
    corporation exists.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    corporation = models.ForeignKey(
        Corporation, on_delete=models.CASCADE, related_name="attachments"
    )
    consumer_key = models.CharField(max_length=255, db_index=True)
    license_key = models.CharField(max_length=100, help_text="License key value (weak reference)")
    disabled = models.BooleanField(default=False)
    unlink_date = models.DateTimeField(null=True, blank=True)
    token = models.CharField(max_length=64, null=True, blank=True, db_index=True)
    token_given_date = models.DateTimeField(null=True, blank=True)
    token_end_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "client_attachments"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["consumer_key"],
                condition=Q(disabled=False),
                name="unique_active_consumer",
            ),
        ]
        indexes = [
            models.Index(
                fields=["corporation", "license_key", "unlink_date"],
                name="attachment_continuity_idx",
            ),
            models.Index(fields=["corporation", "disabled"], name="attachment_active_idx"),
        ]

    def __str__(self):
        return f"{self.consumer_key} @ {self.corporation_id}"


class EntitlementPeriod(models.Model):
    """
    A time window during which an attachment grants access.

    Periods are appended, never edited; the highest position governs.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    attachment = models.ForeignKey(
        ClientAttachment, on_delete=models.CASCADE, related_name="periods"
    )
    position = models.PositiveIntegerField(default=0)
    begin_date = models.DateTimeField()
    end_date = models.DateTimeField()
    is_demo = models.BooleanField(default=False)

    class Meta:
        db_table = "entitlement_periods"
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(
                fields=["attachment", "position"],
                name="unique_period_position",
            ),
            models.CheckConstraint(
                condition=Q(end_date__gt=F("begin_date")),
                name="period_ends_after_begin",
            ),
        ]

    def __str__(self):
        return f"{self.begin_date:%Y-%m-%d} - {self.end_date:%Y-%m-%d}"
