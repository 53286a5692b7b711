"""
Serializers for Client API endpoints.
"""

from rest_framework import serializers

from api.v1.corporations.serializers import CorporationProfileSerializer


class GrantDemoRequestSerializer(serializers.Serializer):
    """Serializer for demo grant request."""

    code = serializers.CharField(required=True, max_length=100)


class LinkClientRequestSerializer(serializers.Serializer):
    """Serializer for link request."""

    code = serializers.CharField(required=True, max_length=100)
    license_key = serializers.CharField(required=True, max_length=100)


class EntitlementResponseSerializer(serializers.Serializer):
    """Serializer for EntitlementDTO."""

    license_key = serializers.CharField()
    begin_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()
    is_demo = serializers.BooleanField()
    remain_days = serializers.IntegerField()


class ClientStatusResponseSerializer(serializers.Serializer):
    """Serializer for ClientStatusDTO."""

    consumer_key = serializers.CharField()
    corporation = CorporationProfileSerializer()
    license_key = serializers.CharField()
    begin_date = serializers.DateTimeField(allow_null=True)
    end_date = serializers.DateTimeField(allow_null=True)
    is_demo = serializers.BooleanField()
    remain_days = serializers.IntegerField()


class UnlinkResponseSerializer(serializers.Serializer):
    """Serializer for UnlinkedClientDTO."""

    consumer_key = serializers.CharField()
    license_key = serializers.CharField()
    unlink_date = serializers.DateTimeField()


class ClientTokenResponseSerializer(serializers.Serializer):
    """Serializer for ClientTokenDTO."""

    token = serializers.CharField()
    given_at = serializers.DateTimeField()
    expires_at = serializers.DateTimeField()
