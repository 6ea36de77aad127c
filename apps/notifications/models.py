"""Notification model.

A notification is created for a user when something happens to one of
their offers, gigs or bookings. Notifications are listed in the client and
can be marked as read one by one or all at once.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Notification(models.Model):
    """A message sent to a user about some event."""

    class Kind(models.TextChoices):
        OFFER_RECEIVED = "offer_received", _("Offer received")
        OFFER_ACCEPTED = "offer_accepted", _("Offer accepted")
        OFFER_DECLINED = "offer_declined", _("Offer declined")
        OFFER_COUNTERED = "offer_countered", _("Offer countered")
        OFFER_WITHDRAWN = "offer_withdrawn", _("Offer withdrawn")
        BOOKING_CANCELED = "booking_canceled", _("Booking canceled")
        BOOKING_COMPLETED = "booking_completed", _("Booking completed")
        ARTIST_NO_SHOW = "artist_no_show", _("Artist no-show")
        INSTANT_GIG_BOOKED = "instant_gig_booked", _("Instant gig booked")
        GIG_REMINDER = "gig_reminder", _("Gig reminder")
        SYSTEM = "system", _("System")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications'
    )
    kind = models.CharField(max_length=30, choices=Kind.choices, default=Kind.SYSTEM)
    title = models.CharField(max_length=255)
    message = models.TextField()
    payload = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notification_user_read_idx'),
        ]

    def __str__(self) -> str:
        return f"Notification to {self.user_id}: {self.title}"
