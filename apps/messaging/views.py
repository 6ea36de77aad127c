"""Messaging API views."""

from __future__ import annotations

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import HasMarketplaceRole

from . import services
from .serializers import (
    ConversationSummarySerializer,
    FeedItemSerializer,
    MessageSerializer,
    OpenConversationSerializer,
    SendMessageSerializer,
)


class ConversationViewSet(viewsets.ViewSet):
    """Inbox, thread feed and message sending."""

    permission_classes = [permissions.IsAuthenticated, HasMarketplaceRole]

    def list(self, request):  # type: ignore
        summaries = services.get_user_conversations(request.user)
        return Response(ConversationSummarySerializer(summaries, many=True).data)

    def create(self, request):  # type: ignore
        """Get or open the conversation between an artist and a venue."""
        serializer = OpenConversationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        conversation, created = services.get_or_create_conversation(
            request.user,
            serializer.validated_data["artist_id"],
            serializer.validated_data["venue_id"],
        )
        return Response(
            {"conversation_id": conversation.pk, "created": created},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    def retrieve(self, request, pk=None):  # type: ignore
        conversation = services.get_conversation(int(pk), request.user)
        feed = services.conversation_feed(conversation, request.user)
        other = conversation.get_other_user(request.user)
        return Response(
            {
                "conversation_id": conversation.pk,
                "artist_id": conversation.artist_id,
                "venue_id": conversation.venue_id,
                "other_user_id": other.pk,
                "other_user_name": other.display_name,
                "feed": FeedItemSerializer(feed, many=True, context={"request": request}).data,
            }
        )

    def destroy(self, request, pk=None):  # type: ignore
        conversation = services.get_conversation(int(pk), request.user)
        services.delete_conversation(conversation, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def messages(self, request, pk=None):  # type: ignore
        conversation = services.get_conversation(int(pk), request.user)
        serializer = SendMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message = services.send_message(conversation, request.user, serializer.validated_data["body"])
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)
