"""Integration tests for venue and artist search."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.availability.models import DateNeed, OpenDate
from apps.profiles.models import ArtistProfile, VenueProfile
from apps.users.models import User


class SearchAPITestBase(APITestCase):
    def _user(self, email: str, role: str) -> User:
        return User.objects.create_user(email=email, password="SearchPass123", role=role)

    def _venue(self, name: str, **fields) -> VenueProfile:
        user = self._user(f"{name.lower().replace(' ', '')}@example.com", User.Role.VENUE)
        return VenueProfile.objects.create(user=user, venue_name=name, **fields)

    def _artist(self, name: str, **fields) -> ArtistProfile:
        user = self._user(f"{name.lower().replace(' ', '')}@example.com", User.Role.ARTIST)
        return ArtistProfile.objects.create(user=user, stage_name=name, **fields)


class VenueSearchAPITests(SearchAPITestBase):
    def setUp(self) -> None:
        self.day = timezone.localdate() + timedelta(days=12)
        self.me = self._artist("Night Owls", price_min=Decimal("400"), genres=["rock"], home_city="Austin")
        self.client.force_authenticate(self.me.user)
        self.url = reverse("venue-search")

    def test_uses_artist_profile_when_no_filters_given(self) -> None:
        self._venue("Too Cheap", budget_min=Decimal("50"), budget_max=Decimal("100"))
        self._venue("Rock Room", budget_max=Decimal("800"), genres_preferred=["rock"], city="Austin")
        self._venue("Jazz Cellar", budget_max=Decimal("800"), genres_preferred=["jazz"])
        self._venue("Open Mind", budget_max=Decimal("800"))

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        names = [venue["venue_name"] for venue in response.data]
        self.assertEqual(names, ["Rock Room", "Open Mind"])
        self.assertGreater(response.data[0]["match_score"], response.data[1]["match_score"])

    def test_date_limits_to_venues_needing_that_day(self) -> None:
        busy = self._venue("Busy Bar")
        free = self._venue("Free Bar")
        DateNeed.objects.create(venue=free.user, date=self.day)
        DateNeed.objects.create(venue=busy.user, date=self.day, status=DateNeed.Status.FILLED)

        response = self.client.get(self.url, {"search_date": str(self.day)})

        self.assertEqual([venue["venue_id"] for venue in response.data], [free.user_id])

    def test_explicit_genres_override_profile(self) -> None:
        self._venue("Jazz Cellar", genres_preferred=["jazz"])
        response = self.client.get(self.url, {"artist_genres": "Jazz, Funk"})
        self.assertEqual([venue["venue_name"] for venue in response.data], ["Jazz Cellar"])


class ArtistSearchAPITests(SearchAPITestBase):
    def setUp(self) -> None:
        self.day = timezone.localdate() + timedelta(days=12)
        self.me = self._venue("Blue Room", budget_max=Decimal("600"), genres_preferred=["blues"], city="Austin")
        self.client.force_authenticate(self.me.user)
        self.url = reverse("artist-search")

    def test_budget_window_bounds_artist_price(self) -> None:
        self._artist("Cheap Trick", price_min=Decimal("100"))
        self._artist("Mid Band", price_min=Decimal("400"))
        self._artist("Star", price_min=Decimal("5000"))

        response = self.client.get(self.url, {"budget_min_search": "200", "budget_max_search": "600"})

        self.assertEqual([artist["stage_name"] for artist in response.data], ["Mid Band"])

    def test_genre_and_date_filters(self) -> None:
        blues = self._artist("Blue Notes", genres=["blues", "soul"])
        self._artist("Metal Heads", genres=["metal"])
        late = self._artist("Late Blues", genres=["blues"])
        OpenDate.objects.create(artist=blues.user, date=self.day)
        OpenDate.objects.create(artist=late.user, date=self.day + timedelta(days=1))

        response = self.client.get(self.url, {"genres_search": "blues", "search_date": str(self.day)})

        self.assertEqual([artist["artist_id"] for artist in response.data], [blues.user_id])

    def test_ordered_by_score_then_name(self) -> None:
        self._artist("Zed", genres=["blues"], home_city="Austin")
        self._artist("Alpha", genres=["polka"])
        self._artist("Beta", genres=["polka"])

        response = self.client.get(self.url)

        self.assertEqual([artist["stage_name"] for artist in response.data], ["Zed", "Alpha", "Beta"])

    def test_invalid_budget_window_is_rejected(self) -> None:
        response = self.client.get(self.url, {"budget_min_search": "900", "budget_max_search": "100"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
