"""Availability API views."""

from __future__ import annotations

from datetime import date

from django.contrib.auth import get_user_model  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsArtist, IsVenue
from shared.domain.exceptions import DomainError

from . import services
from .serializers import (
    CalendarQuerySerializer,
    DateNeedSerializer,
    OpenDateSerializer,
    SyncOpenDatesSerializer,
)

User = get_user_model()


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise DomainError(f"Invalid date: {value}. Use YYYY-MM-DD.", code="invalid_date")


def _calendar_params(request) -> tuple[int, int]:
    today = timezone.localdate()
    serializer = CalendarQuerySerializer(
        data={
            "year": request.query_params.get("year", today.year),
            "month": request.query_params.get("month", today.month),
        }
    )
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data["year"], serializer.validated_data["month"]


class OpenDateViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """The artist's own open dates. Items are addressed by ISO date."""

    serializer_class = OpenDateSerializer
    permission_classes = [permissions.IsAuthenticated, IsArtist]
    lookup_field = "date"
    lookup_value_regex = r"\d{4}-\d{2}-\d{2}"

    def get_queryset(self):  # type: ignore
        return services.list_open_dates(
            self.request.user,
            _parse_date(self.request.query_params.get("start")),
            _parse_date(self.request.query_params.get("end")),
        )

    def perform_create(self, serializer):  # type: ignore
        serializer.instance = services.add_open_date(self.request.user, serializer.validated_data["date"])

    def destroy(self, request, *args, **kwargs):  # type: ignore
        services.remove_open_date(request.user, _parse_date(kwargs["date"]))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["post"])
    def sync(self, request):  # type: ignore
        """Replace the future open dates with the submitted set."""
        serializer = SyncOpenDatesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.sync_open_dates(
            request.user,
            serializer.validated_data["dates"],
            serializer.validated_data.get("recurrence"),
        )
        return Response(result)

    @action(detail=False, methods=["get"])
    def calendar(self, request):  # type: ignore
        year, month = _calendar_params(request)
        return Response(services.month_calendar(request.user, year, month))


class DateNeedViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """The venue's own date needs."""

    serializer_class = DateNeedSerializer
    permission_classes = [permissions.IsAuthenticated, IsVenue]

    def get_queryset(self):  # type: ignore
        include_past = self.request.query_params.get("include_past") in {"1", "true"}
        return services.list_date_needs(self.request.user, include_past=include_past)

    def perform_create(self, serializer):  # type: ignore
        serializer.instance = services.add_date_need(
            self.request.user,
            serializer.validated_data["date"],
            serializer.validated_data.get("notes", ""),
        )

    def destroy(self, request, *args, **kwargs):  # type: ignore
        services.remove_date_need(request.user, int(kwargs["pk"]))
        return Response(status=status.HTTP_204_NO_CONTENT)


class ArtistAvailabilityView(APIView):
    """Upcoming open dates of any artist."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, artist_id: int):  # type: ignore
        artist = get_object_or_404(User, pk=artist_id, role=User.Role.ARTIST)
        return Response(OpenDateSerializer(services.get_artist_availability(artist), many=True).data)


class ArtistCalendarView(APIView):
    """Read-only month grid of any artist."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, artist_id: int):  # type: ignore
        artist = get_object_or_404(User, pk=artist_id, role=User.Role.ARTIST)
        year, month = _calendar_params(request)
        return Response(services.month_calendar(artist, year, month))


class VenueAvailabilityView(APIView):
    """Upcoming open date needs of any venue."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, venue_id: int):  # type: ignore
        venue = get_object_or_404(User, pk=venue_id, role=User.Role.VENUE)
        return Response(DateNeedSerializer(services.get_venue_availability(venue), many=True).data)
