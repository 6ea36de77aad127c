"""Profile API views."""

from __future__ import annotations

from rest_framework import permissions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import HasMarketplaceRole

from . import services
from .serializers import (
    PublicArtistProfileSerializer,
    PublicVenueProfileSerializer,
    serializer_class_for,
)


class MyProfileView(APIView):
    """The caller's own profile. The table follows the caller's role.

    PUT and PATCH upsert: a missing profile is created.
    """

    permission_classes = [permissions.IsAuthenticated, HasMarketplaceRole]

    def get(self, request):  # type: ignore
        profile = services.get_my_profile(request.user)
        serializer_class = serializer_class_for(request.user)
        return Response(serializer_class(profile).data)

    def put(self, request):  # type: ignore
        return self._upsert(request, partial=False)

    def patch(self, request):  # type: ignore
        return self._upsert(request, partial=True)

    def _upsert(self, request, *, partial: bool):
        serializer_class = serializer_class_for(request.user)
        model = serializer_class.Meta.model
        instance = model.objects.filter(user=request.user).first()
        # A first save needs the required fields even on PATCH
        serializer = serializer_class(instance, data=request.data, partial=partial and instance is not None)
        serializer.is_valid(raise_exception=True)
        profile, created = services.upsert_my_profile(request.user, serializer.validated_data)
        return Response(
            serializer_class(profile).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class PublicArtistProfileView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, artist_id: int):  # type: ignore
        profile = services.get_artist_profile(artist_id)
        return Response(PublicArtistProfileSerializer(profile).data)


class PublicVenueProfileView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, venue_id: int):  # type: ignore
        profile = services.get_venue_profile(venue_id)
        return Response(PublicVenueProfileSerializer(profile).data)
