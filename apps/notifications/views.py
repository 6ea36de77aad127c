"""API views for notifications."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from . import services
from .serializers import NotificationSerializer, NotificationSummarySerializer


class NotificationViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """List the authenticated user's notifications and manage their read state."""

    serializer_class = NotificationSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        unread_only = self.request.query_params.get('unread_only', '').lower() in ('1', 'true', 'yes')
        return services.list_notifications(self.request.user, unread_only=unread_only)

    @action(detail=True, methods=['post'])
    def mark_read(self, request, pk=None):  # type: ignore
        notification = services.mark_read(int(pk), request.user)
        return Response(NotificationSerializer(notification).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'])
    def mark_all_read(self, request):  # type: ignore
        updated = services.mark_all_read(request.user)
        return Response({'updated': updated}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'])
    def summary(self, request):  # type: ignore
        data = services.notification_summary(request.user)
        return Response(NotificationSummarySerializer(data).data)
