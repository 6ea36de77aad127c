"""URL routing for discovery."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import ArtistSearchView, MatchViewSet, VenueSearchView

router = DefaultRouter()
router.register(r"matches", MatchViewSet, basename="match")

urlpatterns = [
    path("venues/", VenueSearchView.as_view(), name="venue-search"),
    path("artists/", ArtistSearchView.as_view(), name="artist-search"),
    path("", include(router.urls)),
]
