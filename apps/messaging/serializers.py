"""Serializers for conversations and messages."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Message


class OpenConversationSerializer(serializers.Serializer):
    artist_id = serializers.IntegerField()
    venue_id = serializers.IntegerField()


class SendMessageSerializer(serializers.Serializer):
    # Length and blank checks happen in the service after trimming
    body = serializers.CharField(allow_blank=True, trim_whitespace=False)


class MessageSerializer(serializers.ModelSerializer):
    sender_name = serializers.SerializerMethodField()

    class Meta:
        model = Message
        fields = [
            "id",
            "conversation",
            "sender",
            "sender_name",
            "body",
            "is_system",
            "system_flags",
            "is_read",
            "read_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_sender_name(self, obj: Message) -> str:
        return obj.sender.display_name


class ConversationSummarySerializer(serializers.Serializer):
    conversation_id = serializers.IntegerField()
    other_user_id = serializers.IntegerField()
    other_user_name = serializers.CharField()
    last_message_body = serializers.CharField(allow_blank=True)
    last_message_at = serializers.DateTimeField(allow_null=True)
    has_unread = serializers.BooleanField()
    unread_count = serializers.IntegerField()


class FeedItemSerializer(serializers.Serializer):
    """One entry of the merged feed: {"kind", "created_at", "data"}."""

    def to_representation(self, instance):  # type: ignore
        from apps.bookings.serializers import OfferSerializer

        if instance["kind"] == "offer":
            data = OfferSerializer(instance["item"], context=self.context).data
        else:
            data = MessageSerializer(instance["item"], context=self.context).data
        return {
            "kind": instance["kind"],
            "created_at": serializers.DateTimeField().to_representation(instance["created_at"]),
            "data": data,
        }
