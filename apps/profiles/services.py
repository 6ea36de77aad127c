"""Profile services: lookups, upserts and genre normalisation."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from shared.domain.exceptions import NotFound, PermissionViolation

from .models import ArtistProfile, VenueProfile

logger = logging.getLogger(__name__)


def normalize_genres(value: Iterable[str] | str | None) -> list[str]:
    """Trim, lower-case and de-duplicate genres, keeping first-seen order.

    Accepts a list or a comma separated string ("Rock, indie ,rock"); list
    entries may themselves be comma separated (query strings).
    """
    if not value:
        return []
    if isinstance(value, str):
        value = [value]

    seen: list[str] = []
    for raw in value:
        for part in str(raw).split(","):
            genre = part.strip().lower()
            if genre and genre not in seen:
                seen.append(genre)
    return seen


def profile_model_for(user):
    if user.is_artist:
        return ArtistProfile
    if user.is_venue:
        return VenueProfile
    raise PermissionViolation("Only artists and venues have profiles.", code="no_marketplace_role")


def get_my_profile(user) -> ArtistProfile | VenueProfile:
    model = profile_model_for(user)
    try:
        return model.objects.get(user=user)
    except model.DoesNotExist:
        raise NotFound("Profile has not been created yet.", code="profile_missing")


@transaction.atomic
def upsert_my_profile(user, fields: dict[str, Any]) -> tuple[ArtistProfile | VenueProfile, bool]:
    """Create or update the caller's profile. Returns (profile, created)."""
    model = profile_model_for(user)
    fields = dict(fields)
    if "genres" in fields:
        fields["genres"] = normalize_genres(fields["genres"])
    if "genres_preferred" in fields:
        fields["genres_preferred"] = normalize_genres(fields["genres_preferred"])

    profile, created = model.objects.update_or_create(user=user, defaults=fields)
    logger.info(f"{'Created' if created else 'Updated'} {model.__name__} for user {user.pk}")
    return profile, created


def get_artist_profile(artist_id: int) -> ArtistProfile:
    try:
        return ArtistProfile.objects.select_related("user").get(user_id=artist_id)
    except ArtistProfile.DoesNotExist:
        raise NotFound("Artist not found.")


def get_venue_profile(venue_id: int) -> VenueProfile:
    try:
        return VenueProfile.objects.select_related("user").get(user_id=venue_id)
    except VenueProfile.DoesNotExist:
        raise NotFound("Venue not found.")


def artist_gig_history(artist_user):
    """Completed bookings for the artist, newest first."""
    from apps.bookings.models import Booking

    return (
        Booking.objects.filter(artist=artist_user, status=Booking.Status.COMPLETED)
        .select_related("venue__venue_profile")
        .order_by("-date")
    )


def venue_upcoming_needs(venue_user):
    from apps.availability.models import DateNeed

    return DateNeed.objects.filter(
        venue=venue_user,
        status=DateNeed.Status.OPEN,
        date__gte=timezone.localdate(),
    ).order_by("date")
