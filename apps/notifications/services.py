"""Notification services for sending emails and in-app notifications."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.template.loader import render_to_string  # type: ignore
from django.utils.html import strip_tags  # type: ignore

from shared.domain.exceptions import NotFound

from .models import Notification

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.models import Booking
    from apps.users.models import User

logger = logging.getLogger(__name__)


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

def send_email_notification(
    recipient_email: str,
    subject: str,
    template_name: str | None,
    context: dict,
) -> bool:
    """
    Send one email.

    Args:
        recipient_email: Recipient address
        subject: Subject line
        template_name: Django template rendered as the HTML body (optional)
        context: Template context; `message` is the plain-text fallback

    Returns:
        bool: True if the email was handed to the backend
    """
    try:
        if template_name:
            html_message = render_to_string(template_name, context)
            text_message = strip_tags(html_message)
        else:
            text_message = context.get("message", "")
            html_message = None

        send_mail(
            subject=subject,
            message=text_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )

        logger.info(f"Email sent successfully to {recipient_email}: {subject}")
        return True

    except Exception as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False


def _booking_email_context(booking: "Booking", recipient: "User", headline: str) -> dict[str, Any]:
    # Names and reasons are user input; the templates autoescape them
    return {
        "booking": booking,
        "recipient_name": recipient.display_name,
        "headline": headline,
        "artist_name": booking.artist.display_name,
        "venue_name": booking.venue.display_name,
        "currency": settings.MARKETPLACE_CURRENCY,
    }


def send_booking_confirmed_email(booking: "Booking", recipient: "User") -> bool:
    """Confirmation email for one participant of a new booking."""
    other = booking.venue if recipient.pk == booking.artist_id else booking.artist
    headline = f"Your gig with {other.display_name} on {booking.date.isoformat()} is confirmed."
    return send_email_notification(
        recipient_email=recipient.email,
        subject=f"Booking confirmed for {booking.date.isoformat()}",
        template_name="notifications/emails/booking_confirmed.html",
        context=_booking_email_context(booking, recipient, headline),
    )


def send_booking_canceled_email(booking: "Booking", recipient: "User") -> bool:
    """Cancellation email for the participant who did not cancel."""
    headline = (
        f"The gig on {booking.date.isoformat()} was canceled. "
        "The date is open on your calendar again."
    )
    return send_email_notification(
        recipient_email=recipient.email,
        subject=f"Booking canceled for {booking.date.isoformat()}",
        template_name="notifications/emails/booking_canceled.html",
        context=_booking_email_context(booking, recipient, headline),
    )


# ============================================================================
# IN-APP NOTIFICATIONS
# ============================================================================

def create_in_app_notification(
    user: "User",
    title: str,
    message: str,
    *,
    kind: str = Notification.Kind.SYSTEM,
    payload: dict[str, Any] | None = None,
) -> bool:
    """
    Store an in-app notification.

    Returns:
        bool: True if the notification was created
    """
    try:
        Notification.objects.create(
            user=user,
            kind=kind,
            title=title,
            message=message,
            payload=payload or {},
        )

        logger.info(f"In-app notification created for {user.email}: {title}")
        return True

    except Exception as e:
        logger.error(f"Failed to create in-app notification for {user.email}: {e}", exc_info=True)
        return False


def notify_user_all_channels(
    user: "User",
    title: str,
    message: str,
    *,
    kind: str = Notification.Kind.SYSTEM,
    payload: dict[str, Any] | None = None,
) -> dict[str, bool]:
    """
    Notify a user by email and in-app.

    Returns:
        dict: Delivery result per channel
    """
    results = {
        "email": False,
        "in_app": False,
    }

    if user.email:
        results["email"] = send_email_notification(
            recipient_email=user.email,
            subject=title,
            template_name=None,
            context={"message": message},
        )

    results["in_app"] = create_in_app_notification(user, title, message, kind=kind, payload=payload)

    return results


# ============================================================================
# QUERIES AND READ STATE
# ============================================================================

def list_notifications(user: "User", unread_only: bool = False):
    qs = Notification.objects.filter(user=user)
    if unread_only:
        qs = qs.filter(is_read=False)
    return qs


def mark_read(notification_id: int, user: "User") -> Notification:
    try:
        notification = Notification.objects.get(pk=notification_id, user=user)
    except Notification.DoesNotExist:
        raise NotFound("Notification not found.")
    if not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=["is_read"])
    return notification


def mark_all_read(user: "User") -> int:
    updated = Notification.objects.filter(user=user, is_read=False).update(is_read=True)
    if updated:
        logger.info(f"Marked {updated} notifications read for user {user.pk}")
    return updated


def notification_summary(user: "User") -> dict[str, Any]:
    """Counts behind the header's unread indicator."""
    from apps.bookings.services import pending_offers_for, upcoming_bookings_for
    from apps.messaging.services import unread_conversation_count

    unread_notifications = Notification.objects.filter(user=user, is_read=False).count()
    unread_conversations = unread_conversation_count(user)
    return {
        "unread_notifications": unread_notifications,
        "unread_conversations": unread_conversations,
        "has_unread": bool(unread_notifications or unread_conversations),
        "upcoming_bookings": upcoming_bookings_for(user),
        "pending_offers": pending_offers_for(user),
    }
