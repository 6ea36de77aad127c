"""
Match scoring

Pure functions scoring an artist against a venue for a gig date. They read
plain attributes, so they accept profile model instances as well as the
search criteria value objects below.

Score (0-100):
- genre overlap: Jaccard similarity x 50 (a side without genres counts 0.5)
- budget fit: 30 when the venue's budget covers the artist's minimum,
  15 when either amount is unknown, 0 otherwise
- proximity: 20 inside the artist's service radius when both sides have
  coordinates, else same city 20 / same state 10 / otherwise 0

A pair is incompatible when the budget does not cover the artist's minimum
or, with coordinates on both sides, the venue lies outside the radius.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional

from shared.domain.base import ValueObject

GENRE_POINTS = 50
BUDGET_POINTS = 30
PROXIMITY_POINTS = 20
SAME_STATE_POINTS = 10

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class ArtistCriteria(ValueObject):
    """The artist side of a search when no full profile is scored."""
    price_min: Optional[Decimal] = None
    genres: tuple = ()
    home_city: str = ''
    home_state: str = ''
    service_radius_km: int = 50
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class VenueCriteria(ValueObject):
    """The venue side of a search when no full profile is scored."""
    budget_min: Optional[Decimal] = None
    budget_max: Optional[Decimal] = None
    genres_preferred: tuple = ()
    city: str = ''
    state: str = ''
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class MatchScore(ValueObject):
    value: int
    compatible: bool
    breakdown: dict = field(default_factory=dict, compare=False)


def haversine_km(lat1, lon1, lat2, lon2) -> float:
    """Great-circle distance between two points in kilometres."""
    phi1, phi2 = math.radians(float(lat1)), math.radians(float(lat2))
    d_phi = phi2 - phi1
    d_lambda = math.radians(float(lon2) - float(lon1))
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def _genre_set(genres: Iterable[str] | None) -> set[str]:
    return {g.strip().lower() for g in genres or [] if g and g.strip()}


def genre_similarity(artist_genres, venue_genres) -> float:
    a, b = _genre_set(artist_genres), _genre_set(venue_genres)
    if not a or not b:
        return 0.5
    return len(a & b) / len(a | b)


def genres_overlap(wanted, offered, *, empty_accepts_all: bool = False) -> bool:
    wanted_set, offered_set = _genre_set(wanted), _genre_set(offered)
    if not wanted_set:
        return True
    if not offered_set:
        return empty_accepts_all
    return bool(wanted_set & offered_set)


def budget_covers(price_min, budget_max) -> bool:
    """Missing amounts never exclude."""
    if price_min is None or budget_max is None:
        return True
    return Decimal(budget_max) >= Decimal(price_min)


def budget_points(price_min, budget_max) -> int:
    if price_min is None or budget_max is None:
        return BUDGET_POINTS // 2
    return BUDGET_POINTS if budget_covers(price_min, budget_max) else 0


def _same(a: str, b: str) -> bool:
    return bool(a and b and a.strip().lower() == b.strip().lower())


def proximity(artist, venue) -> tuple[int, bool]:
    """Points and whether the venue is reachable for the artist."""
    if artist.has_coordinates and venue.has_coordinates:
        distance = haversine_km(artist.latitude, artist.longitude, venue.latitude, venue.longitude)
        within = distance <= (artist.service_radius_km or 0)
        return (PROXIMITY_POINTS if within else 0), within
    if _same(artist.home_city, venue.city):
        return PROXIMITY_POINTS, True
    if _same(artist.home_state, venue.state):
        return SAME_STATE_POINTS, True
    return 0, True


def score_pair(artist, venue) -> MatchScore:
    genre = round(genre_similarity(artist.genres, venue.genres_preferred) * GENRE_POINTS)
    budget = budget_points(artist.price_min, venue.budget_max)
    near, reachable = proximity(artist, venue)
    compatible = budget_covers(artist.price_min, venue.budget_max) and reachable
    return MatchScore(
        value=min(100, genre + budget + near),
        compatible=compatible,
        breakdown={"genre": genre, "budget": budget, "proximity": near},
    )
