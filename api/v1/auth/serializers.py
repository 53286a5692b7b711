"""
Serializers for the app authentication endpoint.
"""

from rest_framework import serializers


class AuthenticateAppRequestSerializer(serializers.Serializer):
    """Serializer for the app credential exchange request."""

    app_id = serializers.CharField(required=True, max_length=64)
    app_key = serializers.CharField(required=True, max_length=255, trim_whitespace=False)


class SessionResponseSerializer(serializers.Serializer):
    """Serializer for SessionDTO."""

    token = serializers.CharField()
    expires_at = serializers.DateTimeField()
