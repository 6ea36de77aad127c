"""Discovery API views."""

from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import HasMarketplaceRole

from . import services
from .filters import MatchFilterSet
from .serializers import (
    ArtistSearchParamsSerializer,
    ArtistSearchResultSerializer,
    MatchSerializer,
    VenueSearchParamsSerializer,
    VenueSearchResultSerializer,
)

logger = logging.getLogger(__name__)


class VenueSearchView(APIView):
    """GET venues for an artist: date, price window and genres."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):  # type: ignore
        params = VenueSearchParamsSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        results = services.search_venues(request.user, **params.validated_data)
        return Response(VenueSearchResultSerializer(results, many=True).data)


class ArtistSearchView(APIView):
    """GET artists for a venue: date, budget window and genres."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):  # type: ignore
        params = ArtistSearchParamsSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        results = services.search_artists(request.user, **params.validated_data)
        return Response(ArtistSearchResultSerializer(results, many=True).data)


class MatchViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """The caller's matches, dismissal and the on-demand matching run."""

    serializer_class = MatchSerializer
    permission_classes = [permissions.IsAuthenticated, HasMarketplaceRole]
    filter_backends = [DjangoFilterBackend]
    filterset_class = MatchFilterSet

    def get_queryset(self):  # type: ignore
        include_dismissed = self.request.query_params.get("include_dismissed", "").lower() in ("1", "true")
        return services.list_my_matches(self.request.user, include_dismissed=include_dismissed)

    @action(detail=True, methods=["post"])
    def dismiss(self, request, pk=None):  # type: ignore
        match = services.dismiss_match(int(pk), request.user)
        return Response(MatchSerializer(match).data)

    @action(detail=False, methods=["post"], permission_classes=[permissions.IsAdminUser])
    def run(self, request):  # type: ignore
        try:
            result = services.generate_matches()
        except Exception as e:
            logger.error(f"Matching job failed: {e}", exc_info=True)
            return Response(
                {"message": "Matching job failed to complete.", "details": str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response({"message": "Matching job executed successfully.", **result}, status=status.HTTP_200_OK)
