"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.uow import DjangoUnitOfWork

from .domain.events import BookingCompleted
from .models import Booking, InstantGig, Offer
from .services import lock_booking, lock_instant_gig, lock_offer

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (run by Celery Beat, see config/celery.py)
# ============================================================================

@shared_task(name="bookings.complete_past_bookings")
def complete_past_bookings() -> dict[str, int]:
    """
    Move confirmed bookings dated before today to COMPLETED.

    Runs hourly.

    Returns:
        dict: {"completed": number of bookings completed}
    """
    today = timezone.localdate()
    completed_count = 0

    booking_ids = list(
        Booking.objects.filter(status=Booking.Status.CONFIRMED, date__lt=today).values_list("pk", flat=True)
    )

    for booking_id in booking_ids:
        try:
            with DjangoUnitOfWork() as uow:
                booking = lock_booking(booking_id)
                if booking.status != Booking.Status.CONFIRMED:
                    continue
                booking.transition_to(Booking.Status.COMPLETED)
                booking.save(update_fields=["status", "completed_at", "updated_at"])
                booking.add_event(BookingCompleted(
                    aggregate_id=booking.pk,
                    booking_id=booking.pk,
                    artist_id=booking.artist_id,
                    venue_id=booking.venue_id,
                    date=booking.date,
                ))
                uow.collect_events(booking)
            completed_count += 1
            logger.info(f"Booking {booking_id} completed automatically")
        except Exception as e:
            logger.error(f"Error completing booking {booking_id}: {e}", exc_info=True)

    if completed_count > 0:
        logger.info(f"Completed {completed_count} past bookings")

    return {"completed": completed_count}


@shared_task(name="bookings.expire_stale_offers")
def expire_stale_offers() -> dict[str, int]:
    """
    Expire pending offers whose gig date has passed.

    Returns:
        dict: {"expired": number of offers expired}
    """
    today = timezone.localdate()
    expired_count = 0

    offer_ids = list(
        Offer.objects.filter(status=Offer.Status.PENDING, date__lt=today).values_list("pk", flat=True)
    )

    for offer_id in offer_ids:
        try:
            with DjangoUnitOfWork():
                offer = lock_offer(offer_id)
                if offer.status != Offer.Status.PENDING:
                    continue
                offer.transition_to(Offer.Status.EXPIRED)
                offer.save(update_fields=["status", "responded_at", "updated_at"])
            expired_count += 1
        except Exception as e:
            logger.error(f"Error expiring offer {offer_id}: {e}", exc_info=True)

    if expired_count > 0:
        logger.info(f"Expired {expired_count} stale offers")

    return {"expired": expired_count}


@shared_task(name="bookings.expire_instant_gigs")
def expire_instant_gigs() -> dict[str, int]:
    """
    Expire open instant gig posts whose date has passed.

    Returns:
        dict: {"expired": number of gig posts expired}
    """
    today = timezone.localdate()
    expired_count = 0

    gig_ids = list(
        InstantGig.objects.filter(status=InstantGig.Status.OPEN, date__lt=today).values_list("pk", flat=True)
    )

    for gig_id in gig_ids:
        try:
            with DjangoUnitOfWork():
                gig = lock_instant_gig(gig_id)
                if gig.status != InstantGig.Status.OPEN:
                    continue
                gig.transition_to(InstantGig.Status.EXPIRED)
                gig.save(update_fields=["status", "updated_at"])
            expired_count += 1
        except Exception as e:
            logger.error(f"Error expiring instant gig {gig_id}: {e}", exc_info=True)

    if expired_count > 0:
        logger.info(f"Expired {expired_count} instant gig posts")

    return {"expired": expired_count}


@shared_task(name="bookings.send_upcoming_gig_reminders")
def send_upcoming_gig_reminders() -> dict[str, int]:
    """
    Remind both sides of tomorrow's confirmed gigs.

    Runs every 6 hours; a booking already reminded today is skipped by
    `notify_gig_reminder`.

    Returns:
        dict: {"sent": number of bookings reminded}
    """
    tomorrow = timezone.localdate() + timedelta(days=1)
    sent_count = 0

    upcoming_ids = Booking.objects.filter(
        status=Booking.Status.CONFIRMED,
        date=tomorrow,
    ).values_list("pk", flat=True)

    for booking_id in upcoming_ids:
        try:
            if notify_gig_reminder(booking_id):
                sent_count += 1
        except Exception as e:
            logger.error(f"Error sending reminder for booking {booking_id}: {e}", exc_info=True)

    if sent_count > 0:
        logger.info(f"Sent {sent_count} gig reminders")

    return {"sent": sent_count}


# ============================================================================
# NOTIFICATION TASKS
# ============================================================================

@shared_task(name="bookings.notify_gig_reminder")
def notify_gig_reminder(booking_id: int) -> bool:
    """In-app and email reminder for both participants of a booking."""
    from apps.notifications.models import Notification
    from apps.notifications.services import notify_user_all_channels

    try:
        booking = Booking.objects.select_related(
            "artist__artist_profile", "venue__venue_profile"
        ).get(pk=booking_id)
    except Booking.DoesNotExist:
        logger.error(f"Booking {booking_id} not found for reminder notification")
        return False

    already_sent = Notification.objects.filter(
        kind=Notification.Kind.GIG_REMINDER,
        payload__booking_id=booking.pk,
        created_at__date=timezone.localdate(),
    ).exists()
    if already_sent:
        return False

    day = booking.date.isoformat()
    for user, other in ((booking.artist, booking.venue), (booking.venue, booking.artist)):
        notify_user_all_channels(
            user,
            kind=Notification.Kind.GIG_REMINDER,
            title="Gig tomorrow",
            message=f"Reminder: your gig with {other.display_name} is on {day}.",
            payload={"booking_id": booking.pk, "date": day},
        )

    logger.info(f"[NOTIFICATION] Reminder sent for booking {booking.pk}")
    return True
