"""URL declarations for the profiles app."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import MyProfileView, PublicArtistProfileView, PublicVenueProfileView

urlpatterns = [
    path("me/", MyProfileView.as_view(), name="profile-me"),
    path("artists/<int:artist_id>/", PublicArtistProfileView.as_view(), name="artist-profile"),
    path("venues/<int:venue_id>/", PublicVenueProfileView.as_view(), name="venue-profile"),
]
