"""
Booking event handlers

Subscribed to the message bus in `NotificationsConfig.ready()`. They run
after the booking transaction has committed; the bus logs and swallows
their failures so one broken channel never affects the others.
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model  # type: ignore

from apps.bookings.domain.events import (
    ArtistNoShowReported,
    BookingCanceled,
    BookingCompleted,
    BookingConfirmed,
    InstantGigBooked,
    OfferAccepted,
    OfferCountered,
    OfferDeclined,
    OfferSent,
    OfferWithdrawn,
)
from apps.bookings.models import Booking
from shared.application.message_bus import MessageBus

from . import services
from .models import Notification

logger = logging.getLogger(__name__)

User = get_user_model()


def _user(user_id: int):
    return User.objects.filter(pk=user_id).first()


def _name(user_id: int) -> str:
    user = _user(user_id)
    return user.display_name if user else "Someone"


def _booking(booking_id: int) -> Booking | None:
    return (
        Booking.objects.select_related("artist__artist_profile", "venue__venue_profile")
        .filter(pk=booking_id)
        .first()
    )


def _notify(user_id: int, kind: str, title: str, message: str, **payload) -> None:
    user = _user(user_id)
    if user is None:
        logger.warning(f"Skipping {kind} notification: user {user_id} no longer exists")
        return
    services.create_in_app_notification(user, title, message, kind=kind, payload=payload)


# ===== Offers =====

def on_offer_sent(event: OfferSent) -> None:
    day = event.date.isoformat()
    _notify(
        event.to_user_id,
        Notification.Kind.OFFER_RECEIVED,
        "New offer",
        f"{_name(event.from_user_id)} sent you an offer for {day}.",
        offer_id=event.offer_id,
        conversation_id=event.conversation_id,
    )


def on_offer_accepted(event: OfferAccepted) -> None:
    _notify(
        event.sender_id,
        Notification.Kind.OFFER_ACCEPTED,
        "Offer accepted",
        f"{_name(event.accepted_by_id)} accepted your offer for {event.date.isoformat()}.",
        offer_id=event.offer_id,
        booking_id=event.booking_id,
    )


def on_offer_declined(event: OfferDeclined) -> None:
    _notify(
        event.sender_id,
        Notification.Kind.OFFER_DECLINED,
        "Offer declined",
        f"{_name(event.declined_by_id)} declined your offer for {event.date.isoformat()}.",
        offer_id=event.offer_id,
    )


def on_offer_countered(event: OfferCountered) -> None:
    _notify(
        event.sender_id,
        Notification.Kind.OFFER_COUNTERED,
        "Counter-offer received",
        f"{_name(event.countered_by_id)} countered your offer with new terms for {event.date.isoformat()}.",
        offer_id=event.counter_offer_id,
        parent_offer_id=event.offer_id,
    )


def on_offer_withdrawn(event: OfferWithdrawn) -> None:
    _notify(
        event.recipient_id,
        Notification.Kind.OFFER_WITHDRAWN,
        "Offer withdrawn",
        f"{_name(event.withdrawn_by_id)} withdrew the offer for {event.date.isoformat()}.",
        offer_id=event.offer_id,
    )


# ===== Bookings =====

def on_booking_confirmed(event: BookingConfirmed) -> None:
    """Confirmation email to both participants.

    The in-app notice for the other party comes from `OfferAccepted` or
    `InstantGigBooked`; the participant who acted gets none.
    """
    booking = _booking(event.booking_id)
    if booking is None:
        return
    for user in (booking.artist, booking.venue):
        if user.email:
            services.send_booking_confirmed_email(booking, user)


def on_booking_canceled(event: BookingCanceled) -> None:
    """The participant who did not cancel is told in-app and by email."""
    booking = _booking(event.booking_id)
    if booking is None:
        return
    recipient = booking.artist if event.canceled_by_id == booking.venue_id else booking.venue
    canceller = booking.venue if recipient.pk == booking.artist_id else booking.artist
    services.create_in_app_notification(
        recipient,
        "Booking canceled",
        f"{canceller.display_name} canceled the gig on {booking.date.isoformat()}.",
        kind=Notification.Kind.BOOKING_CANCELED,
        payload={"booking_id": booking.pk, "reason": event.reason},
    )
    if recipient.email:
        services.send_booking_canceled_email(booking, recipient)


def on_booking_completed(event: BookingCompleted) -> None:
    recipients = [event.artist_id, event.venue_id]
    if event.completed_by_id is not None:
        recipients.remove(event.completed_by_id)
    for user_id in recipients:
        _notify(
            user_id,
            Notification.Kind.BOOKING_COMPLETED,
            "Gig completed",
            f"The gig on {event.date.isoformat()} is marked as completed.",
            booking_id=event.booking_id,
        )


def on_artist_no_show(event: ArtistNoShowReported) -> None:
    _notify(
        event.artist_id,
        Notification.Kind.ARTIST_NO_SHOW,
        "No-show reported",
        f"{_name(event.venue_id)} reported that you did not show up on {event.date.isoformat()}.",
        booking_id=event.booking_id,
    )


def on_instant_gig_booked(event: InstantGigBooked) -> None:
    _notify(
        event.creator_id,
        Notification.Kind.INSTANT_GIG_BOOKED,
        "Your gig post was booked",
        f"{_name(event.booked_by_id)} booked your gig post for {event.date.isoformat()}.",
        gig_id=event.gig_id,
        booking_id=event.booking_id,
    )


EVENT_HANDLERS = {
    OfferSent: on_offer_sent,
    OfferAccepted: on_offer_accepted,
    OfferDeclined: on_offer_declined,
    OfferCountered: on_offer_countered,
    OfferWithdrawn: on_offer_withdrawn,
    BookingConfirmed: on_booking_confirmed,
    BookingCanceled: on_booking_canceled,
    BookingCompleted: on_booking_completed,
    ArtistNoShowReported: on_artist_no_show,
    InstantGigBooked: on_instant_gig_booked,
}


def register_event_handlers(bus: MessageBus) -> None:
    for event_type, handler in EVENT_HANDLERS.items():
        bus.register_event_handler(event_type, handler)
