"""Domain services for booking workflows.

Row locking, availability side effects and the read-side queries used by
the booking API. State changes go through the command handlers in
`apps.bookings.application.command_handlers`.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from django.db import IntegrityError, transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.availability import services as availability
from shared.domain.exceptions import ConflictError, NotFound

from .models import Booking, InstantGig, Offer

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.messaging.models import Conversation

logger = logging.getLogger(__name__)


class BookingConflictError(ConflictError):
    """Raised when the artist already has an active booking on the date."""

    default_code = "artist_already_booked"


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def lock_offer(offer_id: int) -> Offer:
    qs = _lock_queryset_if_possible(Offer.objects.filter(pk=offer_id))
    offer = qs.first()
    if offer is None:
        raise NotFound("Offer not found.")
    return offer


def lock_instant_gig(gig_id: int) -> InstantGig:
    qs = _lock_queryset_if_possible(InstantGig.objects.filter(pk=gig_id))
    gig = qs.first()
    if gig is None:
        raise NotFound("Gig not found.")
    return gig


def lock_booking(booking_id: int) -> Booking:
    qs = _lock_queryset_if_possible(Booking.objects.filter(pk=booking_id))
    booking = qs.first()
    if booking is None:
        raise NotFound("Booking not found.")
    return booking


def artist_has_active_booking(artist, day: date, *, exclude_booking_id: int | None = None) -> bool:
    qs = Booking.objects.filter(artist=artist, date=day, status__in=Booking.ACTIVE_STATUSES)
    if exclude_booking_id is not None:
        qs = qs.exclude(pk=exclude_booking_id)
    return _lock_queryset_if_possible(qs).exists()


def ensure_artist_is_free(artist, day: date) -> None:
    """Ensure the artist has no confirmed or completed booking on the date."""
    if artist_has_active_booking(artist, day):
        raise BookingConflictError(f"The artist is already booked on {day.isoformat()}.")


def create_booking(**fields) -> Booking:
    """Insert a confirmed booking; the partial unique constraint is the last line of defence."""
    try:
        with transaction.atomic():
            return Booking.objects.create(status=Booking.Status.CONFIRMED, **fields)
    except IntegrityError:
        raise BookingConflictError(f"The artist is already booked on {fields['date'].isoformat()}.")


def reserve_availability_for_booking(booking: Booking, *, keep_gig_id: int | None = None) -> dict[str, int]:
    """Apply a new booking to the calendars.

    The artist's open date becomes booked, the venue's date need is filled,
    the artist's other pending offers for the date expire and the artist's
    open instant gig posts for the date are withdrawn.
    """
    availability.mark_open_date_booked(booking.artist, booking.date)
    availability.fill_date_need(booking.venue, booking.date)

    expired = 0
    stale_offers = _lock_queryset_if_possible(
        Offer.objects.filter(
            conversation__artist=booking.artist,
            date=booking.date,
            status=Offer.Status.PENDING,
        ).exclude(pk=booking.offer_id)
    )
    for offer in stale_offers:
        offer.transition_to(Offer.Status.EXPIRED)
        offer.save(update_fields=["status", "responded_at", "updated_at"])
        expired += 1

    withdrawn = 0
    artist_gigs = InstantGig.objects.filter(
        created_by=booking.artist,
        date=booking.date,
        status=InstantGig.Status.OPEN,
    )
    if keep_gig_id is not None:
        artist_gigs = artist_gigs.exclude(pk=keep_gig_id)
    for gig in _lock_queryset_if_possible(artist_gigs):
        gig.transition_to(InstantGig.Status.WITHDRAWN)
        gig.save(update_fields=["status", "updated_at"])
        withdrawn += 1

    if expired or withdrawn:
        logger.info(
            f"Booking {booking.pk}: expired {expired} pending offers, "
            f"withdrew {withdrawn} gig posts for artist {booking.artist_id} on {booking.date}"
        )
    return {"offers_expired": expired, "gigs_withdrawn": withdrawn}


def release_availability_for_booking(booking: Booking) -> None:
    """Give the date back to both calendars after a cancellation.

    The venue's date need stays filled while another act is still booked
    for that night.
    """
    availability.release_open_date(booking.artist, booking.date)
    still_booked = (
        Booking.objects.filter(venue=booking.venue, date=booking.date, status=Booking.Status.CONFIRMED)
        .exclude(pk=booking.pk)
        .exists()
    )
    if still_booked:
        logger.info(f"Venue {booking.venue_id} keeps {booking.date} filled, another booking is confirmed")
        return
    availability.reopen_date_need(booking.venue, booking.date)


def conversation_for_booking(booking: Booking) -> "Conversation":
    from apps.messaging.services import conversation_between

    return conversation_between(booking.artist, booking.venue)


# ===== Read side =====

def get_instant_gigs(user, city: str | None = None):
    """Open gigs from today on, posted by the opposite role."""
    opposite = "venue" if user.is_artist else "artist"
    qs = (
        InstantGig.objects.filter(
            status=InstantGig.Status.OPEN,
            date__gte=timezone.localdate(),
            creator_role=opposite,
        )
        .select_related("created_by__artist_profile", "created_by__venue_profile")
        .order_by("date", "created_at")
    )
    if city:
        qs = qs.filter(city__icontains=city.strip())
    return qs


def get_user_bookings(user, scope: str | None = None):
    """`upcoming` are confirmed bookings, `past` everything else."""
    qs = Booking.objects.filter(Q(artist=user) | Q(venue=user)).select_related(
        "artist__artist_profile", "venue__venue_profile"
    )
    if scope == "upcoming":
        return qs.filter(status=Booking.Status.CONFIRMED).order_by("date", "id")
    if scope == "past":
        return qs.exclude(status=Booking.Status.CONFIRMED).order_by("-date", "-id")
    return qs.order_by("-date", "-id")


def get_booking_details(booking_id: int, user) -> Booking:
    """Participants only. Anyone else gets the same answer as for a missing booking."""
    booking = (
        Booking.objects.select_related("artist__artist_profile", "venue__venue_profile")
        .filter(pk=booking_id)
        .first()
    )
    if booking is None or not booking.is_participant(user):
        raise NotFound("Booking not found.")
    return booking


def pending_offers_for(user) -> int:
    """Pending offers waiting for the user's answer."""
    return (
        Offer.objects.filter(status=Offer.Status.PENDING)
        .filter(Q(conversation__artist=user) | Q(conversation__venue=user))
        .exclude(from_user=user)
        .count()
    )


def upcoming_bookings_for(user) -> int:
    return (
        Booking.objects.filter(Q(artist=user) | Q(venue=user))
        .filter(status=Booking.Status.CONFIRMED, date__gte=timezone.localdate())
        .count()
    )
