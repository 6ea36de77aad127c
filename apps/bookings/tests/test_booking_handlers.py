"""Domain tests for the booking command handlers and periodic tasks."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.bookings import tasks
from apps.bookings.application.command_handlers import (
    AcceptOfferCommand,
    BookInstantGigCommand,
    CancelBookingCommand,
    OfferTerms,
    PostInstantGigCommand,
    SendOfferCommand,
)
from apps.bookings.domain.events import BookingConfirmed, OfferAccepted
from apps.bookings.domain.transitions import BOOKING_MACHINE, OFFER_MACHINE
from apps.bookings.models import Booking, InstantGig, Offer
from apps.bookings.services import BookingConflictError
from apps.notifications.models import Notification
from conftest import (
    BookingFactory,
    ConversationFactory,
    InstantGigFactory,
    OfferFactory,
    VenueProfileFactory,
)
from shared.application.message_bus import MessageBus, message_bus
from shared.domain.exceptions import InvalidTransition

pytestmark = pytest.mark.django_db


def _day(days: int):
    return timezone.localdate() + timedelta(days=days)


def test_state_machines_reject_moves_out_of_terminal_states():
    assert OFFER_MACHINE.can_transition("pending", "accepted")
    assert OFFER_MACHINE.is_terminal("declined")
    assert BOOKING_MACHINE.is_terminal("completed")
    with pytest.raises(InvalidTransition):
        BOOKING_MACHINE.check("canceled_by_venue", "confirmed")


def test_all_commands_are_registered_on_the_bus():
    assert message_bus.has_command_handler(AcceptOfferCommand)
    assert message_bus.has_command_handler(BookInstantGigCommand)


def test_accept_offer_expires_competing_offers_and_withdraws_gig_posts(artist, venue, conversation):
    offer = OfferFactory(conversation=conversation, date=_day(7))
    other_venue = VenueProfileFactory().user
    competing = OfferFactory(conversation=ConversationFactory(artist=artist, venue=other_venue), date=_day(7))
    artist_post = InstantGigFactory(created_by=artist, creator_role="artist", date=_day(7))

    booking = message_bus.handle_command(AcceptOfferCommand(offer_id=offer.pk, user_id=artist.pk))

    assert booking.status == Booking.Status.CONFIRMED
    competing.refresh_from_db()
    artist_post.refresh_from_db()
    assert competing.status == Offer.Status.EXPIRED
    assert artist_post.status == InstantGig.Status.WITHDRAWN


def test_accept_offer_rolls_back_when_artist_is_already_booked(artist, venue, conversation):
    BookingFactory(artist=artist, venue=venue, date=_day(7))
    offer = OfferFactory(conversation=conversation, date=_day(7))

    with pytest.raises(BookingConflictError):
        message_bus.handle_command(AcceptOfferCommand(offer_id=offer.pk, user_id=artist.pk))

    offer.refresh_from_db()
    assert offer.status == Offer.Status.PENDING
    assert not conversation.messages.exists()


def test_events_are_published_after_commit(artist, venue, conversation, django_capture_on_commit_callbacks):
    offer = OfferFactory(conversation=conversation, date=_day(5))
    received = []
    bus = message_bus
    bus.register_event_handler(OfferAccepted, received.append)
    bus.register_event_handler(BookingConfirmed, received.append)
    try:
        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            message_bus.handle_command(AcceptOfferCommand(offer_id=offer.pk, user_id=artist.pk))
            assert received == []
        for callback in callbacks:
            callback()
    finally:
        bus.unregister_event_handler(OfferAccepted, received.append)
        bus.unregister_event_handler(BookingConfirmed, received.append)

    assert [type(event) for event in received] == [OfferAccepted, BookingConfirmed]
    assert received[1].artist_id == artist.pk


def test_artist_cannot_post_gig_on_booked_date(artist, venue):
    BookingFactory(artist=artist, venue=venue, date=_day(4))

    with pytest.raises(BookingConflictError):
        message_bus.handle_command(
            PostInstantGigCommand(user_id=artist.pk, date=_day(4), pay_amount=Decimal("100"))
        )


def test_artist_posted_gig_booked_by_venue_creates_conversation(artist, venue):
    gig = InstantGigFactory(created_by=artist, creator_role="artist", date=_day(6))

    booking = message_bus.handle_command(BookInstantGigCommand(gig_id=gig.pk, user_id=venue.pk))

    assert booking.artist == artist
    assert booking.venue == venue
    assert booking.conversation is not None
    assert booking.conversation.messages.filter(is_system=True).count() == 1


def test_past_gig_is_no_longer_available(artist, venue):
    gig = InstantGigFactory(created_by=venue, date=_day(-1))

    with pytest.raises(Exception) as excinfo:
        message_bus.handle_command(BookInstantGigCommand(gig_id=gig.pk, user_id=artist.pk))
    assert str(excinfo.value) == "This gig is no longer available."


def test_cannot_cancel_past_booking(artist, venue):
    booking = BookingFactory(artist=artist, venue=venue, date=_day(-2))

    with pytest.raises(Exception) as excinfo:
        message_bus.handle_command(CancelBookingCommand(booking_id=booking.pk, user_id=venue.pk))
    assert excinfo.value.code == "date_in_past"


def test_send_offer_through_a_fresh_bus(artist, venue, conversation):
    from apps.bookings.application.command_handlers import register_handlers

    bus = MessageBus()
    register_handlers(bus)
    terms = OfferTerms(date=_day(9), pay_amount=Decimal("350"), set_count=3, set_length_min=30)

    offer = bus.handle_command(SendOfferCommand(conversation_id=conversation.pk, user_id=venue.pk, terms=terms))

    assert offer.set_count == 3
    assert offer.recipient_id == artist.pk


# ===== Periodic tasks =====

def test_complete_past_bookings(artist, venue):
    past = BookingFactory(artist=artist, venue=venue, date=_day(-1))
    future = BookingFactory(artist=artist, venue=venue, date=_day(1))

    assert tasks.complete_past_bookings() == {"completed": 1}

    past.refresh_from_db()
    future.refresh_from_db()
    assert past.status == Booking.Status.COMPLETED
    assert past.completed_at is not None
    assert future.status == Booking.Status.CONFIRMED


def test_expire_stale_offers_and_gigs(conversation, venue):
    stale = OfferFactory(conversation=conversation, date=_day(-1))
    fresh = OfferFactory(conversation=conversation, date=_day(2))
    stale_gig = InstantGigFactory(created_by=venue, date=_day(-1))

    assert tasks.expire_stale_offers() == {"expired": 1}
    assert tasks.expire_instant_gigs() == {"expired": 1}

    stale.refresh_from_db()
    fresh.refresh_from_db()
    stale_gig.refresh_from_db()
    assert stale.status == Offer.Status.EXPIRED
    assert fresh.status == Offer.Status.PENDING
    assert stale_gig.status == InstantGig.Status.EXPIRED


def test_gig_reminders_are_sent_once_per_day(artist, venue, mailoutbox):
    BookingFactory(artist=artist, venue=venue, date=_day(1))

    assert tasks.send_upcoming_gig_reminders() == {"sent": 1}
    assert tasks.send_upcoming_gig_reminders() == {"sent": 0}

    assert Notification.objects.filter(kind=Notification.Kind.GIG_REMINDER).count() == 2
    assert len(mailoutbox) == 2
