"""
Serializers for Corporation API endpoints.
"""

from rest_framework import serializers


class CreateCorporationRequestSerializer(serializers.Serializer):
    """Serializer for create corporation request."""

    # Blank codes are rejected by the domain with CODE_UNSPECIFIED.
    code = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None, max_length=100
    )
    description = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=255
    )
    town = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
    city = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)


class UpdateCorporationRequestSerializer(serializers.Serializer):
    """Serializer for update corporation request. Omitted fields stay unchanged."""

    code = serializers.CharField(required=False, allow_blank=True, max_length=100)
    description = serializers.CharField(required=False, allow_blank=True, max_length=255)
    town = serializers.CharField(required=False, allow_blank=True, max_length=255)
    city = serializers.CharField(required=False, allow_blank=True, max_length=255)
    banned = serializers.BooleanField(required=False)


class CorporationProfileSerializer(serializers.Serializer):
    """Serializer for CorporationProfileDTO."""

    code = serializers.CharField()
    description = serializers.CharField()
    town = serializers.CharField()
    city = serializers.CharField()
    banned = serializers.BooleanField()


class CorporationResponseSerializer(CorporationProfileSerializer):
    """Serializer for CorporationDTO."""

    active_clients = serializers.IntegerField()
