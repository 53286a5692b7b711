"""
Django ORM models for integrations app.
"""

import uuid

from django.db import models


class RegisteredApp(models.Model):
    """
    Applications allowed to call the administrative API.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    key_prefix = models.CharField(max_length=8, editable=False)
    key_hash = models.CharField(max_length=64, editable=False, db_index=True)
    is_admin = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    last_used_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "registered_apps"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_admin"]),
        ]

    def __str__(self):
        return f"{self.name} - {self.key_prefix}..."
