"""
LicenseKey model.
"""
import uuid

from django.db import models


class LicenseKey(models.Model):
    """
    A license key in the inventory.

    The used flag is only ever flipped by conditional updates in the
    repository so two callers cannot acquire the same key.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.CharField(max_length=100, unique=True)
    used = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "license_keys"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["used", "created_at"]),
        ]

    def __str__(self):
        return self.key
