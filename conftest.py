"""
VenueMenu test configuration: factory_boy factories and shared fixtures.

Factories cover every marketplace model. API tests use `APIClient`
fixtures authenticated as an artist or a venue; domain tests call the
services and command handlers directly.
"""

from __future__ import annotations

import uuid
from datetime import timedelta
from decimal import Decimal

import factory
import pytest
from django.utils import timezone
from factory.django import DjangoModelFactory
from rest_framework.test import APIClient


def _future(days: int = 7):
    return timezone.localdate() + timedelta(days=days)


# ============================================================================
# USER FACTORIES
# ============================================================================

class UserFactory(DjangoModelFactory):
    """Factory for users.User (no marketplace role)."""

    class Meta:
        model = 'users.User'
        django_get_or_create = ('email',)
        skip_postgeneration_save = True

    username = factory.LazyAttribute(lambda o: f"user_{uuid.uuid4().hex[:8]}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    password = factory.django.Password('testpass123')
    role = ''
    is_active = True


class ArtistUserFactory(UserFactory):
    role = 'artist'


class VenueUserFactory(UserFactory):
    role = 'venue'


class StaffUserFactory(UserFactory):
    is_staff = True


# ============================================================================
# PROFILE FACTORIES
# ============================================================================

class ArtistProfileFactory(DjangoModelFactory):
    class Meta:
        model = 'profiles.ArtistProfile'

    user = factory.SubFactory(ArtistUserFactory)
    stage_name = factory.Sequence(lambda n: f"The Band {n}")
    home_city = "Austin"
    home_state = "TX"
    service_radius_km = 50
    price_min = Decimal("300.00")
    genres = factory.LazyFunction(lambda: ["rock", "blues"])
    act_type = "full_band"


class VenueProfileFactory(DjangoModelFactory):
    class Meta:
        model = 'profiles.VenueProfile'

    user = factory.SubFactory(VenueUserFactory)
    venue_name = factory.Sequence(lambda n: f"The Stage {n}")
    city = "Austin"
    state = "TX"
    genres_preferred = factory.LazyFunction(lambda: ["rock"])
    budget_min = Decimal("200.00")
    budget_max = Decimal("800.00")
    capacity = 150


# ============================================================================
# AVAILABILITY FACTORIES
# ============================================================================

class OpenDateFactory(DjangoModelFactory):
    class Meta:
        model = 'availability.OpenDate'

    artist = factory.SubFactory(ArtistUserFactory)
    date = factory.Sequence(lambda n: _future(n + 1))
    status = 'open'


class DateNeedFactory(DjangoModelFactory):
    class Meta:
        model = 'availability.DateNeed'

    venue = factory.SubFactory(VenueUserFactory)
    date = factory.Sequence(lambda n: _future(n + 1))
    status = 'open'
    notes = ""


# ============================================================================
# MESSAGING / BOOKING FACTORIES
# ============================================================================

class ConversationFactory(DjangoModelFactory):
    class Meta:
        model = 'messaging.Conversation'

    artist = factory.SubFactory(ArtistUserFactory)
    venue = factory.SubFactory(VenueUserFactory)


class OfferFactory(DjangoModelFactory):
    class Meta:
        model = 'bookings.Offer'

    conversation = factory.SubFactory(ConversationFactory)
    from_user = factory.LazyAttribute(lambda o: o.conversation.venue)
    date = factory.LazyFunction(lambda: _future(14))
    pay_amount = Decimal("500.00")
    set_count = 2
    set_length_min = 45
    status = 'pending'


class InstantGigFactory(DjangoModelFactory):
    class Meta:
        model = 'bookings.InstantGig'

    created_by = factory.SubFactory(VenueUserFactory)
    creator_role = factory.LazyAttribute(lambda o: o.created_by.role)
    date = factory.LazyFunction(lambda: _future(3))
    pay_amount = Decimal("250.00")
    genres = factory.LazyFunction(lambda: ["jazz"])
    city = "Austin"
    status = 'open'


class BookingFactory(DjangoModelFactory):
    class Meta:
        model = 'bookings.Booking'

    artist = factory.SubFactory(ArtistUserFactory)
    venue = factory.SubFactory(VenueUserFactory)
    date = factory.LazyFunction(lambda: _future(10))
    agreed_pay = Decimal("400.00")
    status = 'confirmed'
    source = 'offer'


# ============================================================================
# DISCOVERY / NOTIFICATION FACTORIES
# ============================================================================

class MatchFactory(DjangoModelFactory):
    class Meta:
        model = 'discovery.Match'

    artist = factory.SubFactory(ArtistUserFactory)
    venue = factory.SubFactory(VenueUserFactory)
    date = factory.LazyFunction(lambda: _future(5))
    score = 75
    status = 'new'


class NotificationFactory(DjangoModelFactory):
    class Meta:
        model = 'notifications.Notification'

    user = factory.SubFactory(ArtistUserFactory)
    kind = 'system'
    title = factory.Faker('sentence', nb_words=4)
    message = factory.Faker('sentence')
    payload = factory.LazyFunction(dict)


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def artist(db):
    """Artist user with a profile."""
    return ArtistProfileFactory().user


@pytest.fixture
def venue(db):
    """Venue user with a profile."""
    return VenueProfileFactory().user


@pytest.fixture
def conversation(artist, venue):
    return ConversationFactory(artist=artist, venue=venue)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def artist_client(artist):
    client = APIClient()
    client.force_authenticate(artist)
    return client


@pytest.fixture
def venue_client(venue):
    client = APIClient()
    client.force_authenticate(venue)
    return client
