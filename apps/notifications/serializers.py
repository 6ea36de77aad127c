"""Serializers for notifications."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    """Serializer for notifications."""

    class Meta:
        model = Notification
        fields = ['id', 'kind', 'title', 'message', 'payload', 'is_read', 'created_at']
        read_only_fields = fields


class NotificationSummarySerializer(serializers.Serializer):
    unread_notifications = serializers.IntegerField()
    unread_conversations = serializers.IntegerField()
    has_unread = serializers.BooleanField()
    upcoming_bookings = serializers.IntegerField()
    pending_offers = serializers.IntegerField()
