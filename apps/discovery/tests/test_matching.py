"""Tests for match scoring and the matching job."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest import mock

import pytest
from django.urls import reverse
from django.utils import timezone

from apps.discovery import matching
from apps.discovery.models import Match
from apps.discovery.services import dismiss_match, generate_matches, list_my_matches
from apps.discovery.tasks import generate_matches_task
from conftest import (
    ArtistProfileFactory,
    DateNeedFactory,
    MatchFactory,
    OpenDateFactory,
    StaffUserFactory,
    VenueProfileFactory,
)
from shared.domain.exceptions import NotFound


def _day(days: int):
    return timezone.localdate() + timedelta(days=days)


# ===== Scoring =====

def test_haversine_distance():
    # Austin to Dallas is roughly 300 km
    assert 280 < matching.haversine_km(30.2672, -97.7431, 32.7767, -96.7970) < 320


def test_genre_similarity_is_jaccard_with_neutral_empty_side():
    assert matching.genre_similarity(["rock", "blues"], ["rock"]) == 0.5
    assert matching.genre_similarity(["Rock"], ["rock "]) == 1.0
    assert matching.genre_similarity([], ["rock"]) == 0.5
    assert matching.genre_similarity(["jazz"], ["rock"]) == 0.0


def test_score_pair_same_city_full_fit():
    artist = matching.ArtistCriteria(price_min=Decimal("300"), genres=("rock",), home_city="Austin")
    venue = matching.VenueCriteria(budget_max=Decimal("500"), genres_preferred=("rock",), city="austin")

    score = matching.score_pair(artist, venue)

    assert score.value == 100
    assert score.compatible
    assert score.breakdown == {"genre": 50, "budget": 30, "proximity": 20}


def test_budget_below_artist_minimum_is_incompatible():
    artist = matching.ArtistCriteria(price_min=Decimal("900"))
    venue = matching.VenueCriteria(budget_max=Decimal("500"))
    assert not matching.score_pair(artist, venue).compatible


def test_venue_outside_service_radius_is_incompatible():
    artist = matching.ArtistCriteria(
        latitude=Decimal("30.2672"), longitude=Decimal("-97.7431"), service_radius_km=100
    )
    venue = matching.VenueCriteria(latitude=Decimal("32.7767"), longitude=Decimal("-96.7970"))
    score = matching.score_pair(artist, venue)
    assert not score.compatible
    assert score.breakdown["proximity"] == 0


def test_same_state_scores_half_the_proximity_points():
    artist = matching.ArtistCriteria(home_city="Austin", home_state="TX")
    venue = matching.VenueCriteria(city="Dallas", state="tx")
    assert matching.score_pair(artist, venue).breakdown["proximity"] == 10


# ===== Matching job =====

@pytest.mark.django_db
def test_generate_matches_creates_updates_and_removes():
    artist_profile = ArtistProfileFactory(price_min=Decimal("300"), genres=["rock"])
    venue_profile = VenueProfileFactory(budget_max=Decimal("600"), genres_preferred=["rock"])
    pricey = ArtistProfileFactory(price_min=Decimal("5000"), genres=["rock"])
    day = _day(5)
    OpenDateFactory(artist=artist_profile.user, date=day)
    OpenDateFactory(artist=pricey.user, date=day)
    need = DateNeedFactory(venue=venue_profile.user, date=day)

    assert generate_matches() == {"created": 1, "updated": 0, "removed": 0}
    match = Match.objects.get()
    assert (match.artist, match.venue, match.date) == (artist_profile.user, venue_profile.user, day)
    assert match.score == 100

    venue_profile.city = "Houston"
    venue_profile.save()
    assert generate_matches() == {"created": 0, "updated": 1, "removed": 0}

    need.mark_filled()
    assert generate_matches() == {"created": 0, "updated": 0, "removed": 1}
    assert not Match.objects.exists()


@pytest.mark.django_db
def test_dismissed_matches_survive_and_are_hidden():
    artist_profile = ArtistProfileFactory()
    venue_profile = VenueProfileFactory()
    day = _day(3)
    OpenDateFactory(artist=artist_profile.user, date=day)
    DateNeedFactory(venue=venue_profile.user, date=day)
    generate_matches()
    match = Match.objects.get()

    dismiss_match(match.pk, venue_profile.user)
    generate_matches()

    match.refresh_from_db()
    assert match.status == Match.Status.DISMISSED
    assert list(list_my_matches(artist_profile.user)) == []


@pytest.mark.django_db
def test_outsider_cannot_dismiss_match(artist):
    match = MatchFactory()
    with pytest.raises(NotFound):
        dismiss_match(match.pk, artist)


@pytest.mark.django_db
def test_task_returns_job_counts():
    assert generate_matches_task() == {"created": 0, "updated": 0, "removed": 0}


# ===== API =====

@pytest.mark.django_db
def test_match_list_and_dismiss(artist, artist_client):
    mine = MatchFactory(artist=artist, score=90)
    MatchFactory(artist=artist, score=30)
    MatchFactory()

    response = artist_client.get(reverse("match-list"), {"min_score": 50})
    assert response.status_code == 200
    assert [item["id"] for item in response.data["results"]] == [mine.pk]

    response = artist_client.post(reverse("match-dismiss", args=[mine.pk]))
    assert response.data["status"] == "dismissed"


@pytest.mark.django_db
def test_matching_run_is_staff_only(artist_client, api_client):
    assert artist_client.post(reverse("match-run")).status_code == 403

    api_client.force_authenticate(StaffUserFactory())
    response = api_client.post(reverse("match-run"))
    assert response.status_code == 200
    assert response.data["message"] == "Matching job executed successfully."


@pytest.mark.django_db
def test_matching_run_failure_reports_details(api_client):
    api_client.force_authenticate(StaffUserFactory())
    with mock.patch("apps.discovery.services.generate_matches", side_effect=RuntimeError("db down")):
        response = api_client.post(reverse("match-run"))
    assert response.status_code == 500
    assert response.data == {"message": "Matching job failed to complete.", "details": "db down"}
