"""Discovery services: venue and artist search, match generation."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore

from apps.availability.models import DateNeed, OpenDate
from apps.profiles.models import ArtistProfile, VenueProfile
from apps.profiles.services import normalize_genres
from shared.domain.exceptions import NotFound

from .matching import ArtistCriteria, VenueCriteria, genres_overlap, score_pair
from .models import Match

logger = logging.getLogger(__name__)


def _artist_profile_of(user) -> ArtistProfile | None:
    if user is None or not getattr(user, "is_artist", False):
        return None
    return ArtistProfile.objects.filter(user=user).first()


def _venue_profile_of(user) -> VenueProfile | None:
    if user is None or not getattr(user, "is_venue", False):
        return None
    return VenueProfile.objects.filter(user=user).first()


# ===== Search =====

def search_venues(
    caller=None,
    search_date: date | None = None,
    artist_price_min: Decimal | None = None,
    artist_price_max: Decimal | None = None,
    artist_genres: Iterable[str] | None = None,
) -> list[VenueProfile]:
    """
    Venues for an artist's search, best match first.

    An artist calling without explicit price or genres is searched with the
    values from their own profile. Each returned profile carries
    `match_score`.
    """
    own = _artist_profile_of(caller)
    if own is not None:
        if artist_price_min is None:
            artist_price_min = own.price_min
        if not artist_genres:
            artist_genres = own.genres
    genres = normalize_genres(artist_genres)

    qs = VenueProfile.objects.select_related("user")
    if search_date is not None:
        qs = qs.filter(
            user__date_needs__date=search_date,
            user__date_needs__status=DateNeed.Status.OPEN,
        )
    if artist_price_min is not None:
        qs = qs.filter(Q(budget_max__isnull=True) | Q(budget_max__gte=artist_price_min))
    if artist_price_max is not None:
        qs = qs.filter(Q(budget_min__isnull=True) | Q(budget_min__lte=artist_price_max))

    if own is not None:
        probe = own
        if artist_price_min != own.price_min or genres != own.genres:
            probe = _criteria_from_profile(own, price_min=artist_price_min, genres=genres)
    else:
        probe = ArtistCriteria(price_min=artist_price_min, genres=tuple(genres))

    results = []
    for venue in qs.distinct():
        if genres and not genres_overlap(genres, venue.genres_preferred, empty_accepts_all=True):
            continue
        venue.match_score = score_pair(probe, venue).value
        results.append(venue)

    results.sort(key=lambda v: (-v.match_score, v.venue_name.lower()))
    logger.info(f"Venue search returned {len(results)} results (date={search_date})")
    return results


def search_artists(
    caller=None,
    search_date: date | None = None,
    budget_min_search: Decimal | None = None,
    budget_max_search: Decimal | None = None,
    genres_search: Iterable[str] | None = None,
) -> list[ArtistProfile]:
    """
    Artists for a venue's search, best match first.

    `budget_max_search` caps the artist's minimum price and
    `budget_min_search` is a lower bound on it. Each returned profile
    carries `match_score`.
    """
    genres = normalize_genres(genres_search)

    qs = ArtistProfile.objects.select_related("user")
    if search_date is not None:
        qs = qs.filter(
            user__open_dates__date=search_date,
            user__open_dates__status=OpenDate.Status.OPEN,
        )
    if budget_max_search is not None:
        qs = qs.filter(price_min__lte=budget_max_search)
    if budget_min_search is not None:
        qs = qs.filter(price_min__gte=budget_min_search)

    own = _venue_profile_of(caller)
    if own is not None and budget_max_search is None and not genres:
        probe = own
    else:
        probe = VenueCriteria(
            budget_min=budget_min_search if budget_min_search is not None else getattr(own, "budget_min", None),
            budget_max=budget_max_search if budget_max_search is not None else getattr(own, "budget_max", None),
            genres_preferred=tuple(genres or getattr(own, "genres_preferred", [])),
            city=getattr(own, "city", ""),
            state=getattr(own, "state", ""),
            latitude=getattr(own, "latitude", None),
            longitude=getattr(own, "longitude", None),
        )

    results = []
    for artist in qs.distinct():
        if genres and not genres_overlap(genres, artist.genres):
            continue
        artist.match_score = score_pair(artist, probe).value
        results.append(artist)

    results.sort(key=lambda a: (-a.match_score, a.stage_name.lower()))
    logger.info(f"Artist search returned {len(results)} results (date={search_date})")
    return results


def _criteria_from_profile(profile: ArtistProfile, **overrides) -> ArtistCriteria:
    values = {
        "price_min": profile.price_min,
        "genres": tuple(profile.genres or []),
        "home_city": profile.home_city,
        "home_state": profile.home_state,
        "service_radius_km": profile.service_radius_km,
        "latitude": profile.latitude,
        "longitude": profile.longitude,
    }
    if "genres" in overrides:
        overrides["genres"] = tuple(overrides["genres"])
    values.update(overrides)
    return ArtistCriteria(**values)


# ===== Matching =====

@transaction.atomic
def generate_matches() -> dict[str, int]:
    """
    Score every artist with an open date against every venue needing the
    same date, from today on.

    Qualifying pairs are upserted (a dismissed match stays dismissed, its
    score is refreshed). `new` matches that no longer qualify are deleted.
    """
    today = timezone.localdate()
    min_score = getattr(settings, "MARKETPLACE_MATCH_MIN_SCORE", 40)

    artists_by_date: dict[date, list[int]] = defaultdict(list)
    for artist_id, day in OpenDate.objects.filter(
        status=OpenDate.Status.OPEN, date__gte=today
    ).values_list("artist_id", "date"):
        artists_by_date[day].append(artist_id)

    venues_by_date: dict[date, list[int]] = defaultdict(list)
    for venue_id, day in DateNeed.objects.filter(
        status=DateNeed.Status.OPEN, date__gte=today, date__in=list(artists_by_date)
    ).values_list("venue_id", "date"):
        venues_by_date[day].append(venue_id)

    artist_ids = {a for day in venues_by_date for a in artists_by_date[day]}
    venue_ids = {v for ids in venues_by_date.values() for v in ids}
    artist_profiles = {p.user_id: p for p in ArtistProfile.objects.filter(user_id__in=artist_ids)}
    venue_profiles = {p.user_id: p for p in VenueProfile.objects.filter(user_id__in=venue_ids)}

    pair_scores: dict[tuple[int, int], Any] = {}
    qualifying: dict[tuple[int, int, date], int] = {}
    for day, day_venues in venues_by_date.items():
        for artist_id in artists_by_date[day]:
            artist = artist_profiles.get(artist_id)
            if artist is None:
                continue
            for venue_id in day_venues:
                venue = venue_profiles.get(venue_id)
                if venue is None or venue_id == artist_id:
                    continue
                key = (artist_id, venue_id)
                if key not in pair_scores:
                    pair_scores[key] = score_pair(artist, venue)
                score = pair_scores[key]
                if score.compatible and score.value >= min_score:
                    qualifying[(artist_id, venue_id, day)] = score.value

    existing = {
        (m.artist_id, m.venue_id, m.date): m
        for m in Match.objects.filter(Q(date__gte=today) | Q(status=Match.Status.NEW))
    }

    created = updated = 0
    to_create = []
    for key, value in qualifying.items():
        match = existing.get(key)
        if match is None:
            artist_id, venue_id, day = key
            to_create.append(Match(artist_id=artist_id, venue_id=venue_id, date=day, score=value))
        elif match.score != value:
            match.score = value
            match.save(update_fields=["score", "updated_at"])
            updated += 1
    if to_create:
        Match.objects.bulk_create(to_create)
        created = len(to_create)

    stale_ids = [
        m.pk for key, m in existing.items() if m.status == Match.Status.NEW and key not in qualifying
    ]
    removed = 0
    if stale_ids:
        removed, _ = Match.objects.filter(pk__in=stale_ids).delete()

    logger.info(f"Matching finished: {created} created, {updated} updated, {removed} removed")
    return {"created": created, "updated": updated, "removed": removed}


def list_my_matches(user, include_dismissed: bool = False):
    qs = Match.objects.filter(
        Q(artist=user) | Q(venue=user), date__gte=timezone.localdate()
    ).select_related("artist__artist_profile", "venue__venue_profile")
    if not include_dismissed:
        qs = qs.filter(status=Match.Status.NEW)
    return qs.order_by("date", "-score", "id")


def dismiss_match(match_id: int, user) -> Match:
    match = Match.objects.filter(pk=match_id).first()
    if match is None or not match.is_participant(user):
        raise NotFound("Match not found.")
    if match.status != Match.Status.DISMISSED:
        match.status = Match.Status.DISMISSED
        match.save(update_fields=["status", "updated_at"])
        logger.info(f"User {user.pk} dismissed match {match.pk}")
    return match
