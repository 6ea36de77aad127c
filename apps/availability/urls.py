"""URL declarations for the availability app."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import (
    ArtistAvailabilityView,
    ArtistCalendarView,
    DateNeedViewSet,
    OpenDateViewSet,
    VenueAvailabilityView,
)

router = DefaultRouter()
router.register(r"open-dates", OpenDateViewSet, basename="open-date")
router.register(r"date-needs", DateNeedViewSet, basename="date-need")

urlpatterns = [
    path("", include(router.urls)),
    path("artists/<int:artist_id>/", ArtistAvailabilityView.as_view(), name="artist-availability"),
    path("artists/<int:artist_id>/calendar/", ArtistCalendarView.as_view(), name="artist-calendar"),
    path("venues/<int:venue_id>/", VenueAvailabilityView.as_view(), name="venue-availability"),
]
