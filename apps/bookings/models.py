"""Booking domain models for VenueMenu.

Offers are negotiated inside a conversation. An accepted offer or a booked
instant gig produces a Booking. The three models record domain events while
their state changes (see `shared.domain.base.EventRecorder`); the command
handlers collect those events into the unit of work.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.base import EventRecorder

from .domain.transitions import BOOKING_MACHINE, INSTANT_GIG_MACHINE, OFFER_MACHINE


class Offer(EventRecorder, models.Model):
    """Gig terms proposed by one conversation participant to the other."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        ACCEPTED = "accepted", _("Accepted")
        DECLINED = "declined", _("Declined")
        COUNTERED = "countered", _("Countered")
        WITHDRAWN = "withdrawn", _("Withdrawn")
        EXPIRED = "expired", _("Expired")

    conversation = models.ForeignKey(
        "messaging.Conversation",
        on_delete=models.CASCADE,
        related_name="offers",
    )
    from_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_offers",
    )
    date = models.DateField()
    pay_amount = models.DecimalField(max_digits=10, decimal_places=2)
    set_count = models.PositiveSmallIntegerField(default=1)
    set_length_min = models.PositiveSmallIntegerField(
        default=60,
        help_text=_("Length of one set in minutes."),
    )
    other_terms = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    parent = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="counter_offers",
        help_text=_("The offer this one counters."),
    )
    responded_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Offer")
        verbose_name_plural = _("Offers")
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(condition=Q(pay_amount__gt=0), name="offer_pay_positive"),
            models.CheckConstraint(condition=Q(set_count__gte=1), name="offer_set_count_positive"),
            models.CheckConstraint(condition=Q(set_length_min__gte=1), name="offer_set_length_positive"),
            models.UniqueConstraint(
                fields=["conversation", "date"],
                condition=Q(status="pending"),
                name="one_pending_offer_per_conversation_date",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "date"], name="offer_status_date_idx"),
        ]

    def __str__(self) -> str:
        return f"Offer {self.pk} for {self.date} ({self.status})"

    @property
    def recipient_id(self) -> int:
        conversation = self.conversation
        if self.from_user_id == conversation.artist_id:
            return conversation.venue_id
        return conversation.artist_id

    @property
    def recipient(self):
        conversation = self.conversation
        return conversation.venue if self.from_user_id == conversation.artist_id else conversation.artist

    def transition_to(self, target: str) -> None:
        OFFER_MACHINE.check(self.status, target)
        self.status = target
        self.responded_at = timezone.now()


class InstantGig(EventRecorder, models.Model):
    """A first-come gig post: a venue looking for an act or an artist looking for a stage."""

    class Status(models.TextChoices):
        OPEN = "open", _("Open")
        BOOKED = "booked", _("Booked")
        WITHDRAWN = "withdrawn", _("Withdrawn")
        EXPIRED = "expired", _("Expired")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="instant_gigs",
    )
    creator_role = models.CharField(max_length=20, choices=[("artist", _("Artist")), ("venue", _("Venue"))])
    date = models.DateField()
    pay_amount = models.DecimalField(max_digits=10, decimal_places=2)
    genres = models.JSONField(default=list, blank=True)
    city = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.OPEN)
    booked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="booked_instant_gigs",
    )
    booked_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Instant gig")
        verbose_name_plural = _("Instant gigs")
        ordering = ["date", "created_at"]
        constraints = [
            models.CheckConstraint(condition=Q(pay_amount__gt=0), name="instant_gig_pay_positive"),
        ]
        indexes = [
            models.Index(fields=["status", "date"], name="instant_gig_status_date_idx"),
        ]

    def __str__(self) -> str:
        return f"Instant gig {self.pk} on {self.date} ({self.status})"

    def transition_to(self, target: str) -> None:
        INSTANT_GIG_MACHINE.check(self.status, target)
        self.status = target

    def is_available(self) -> bool:
        return self.status == self.Status.OPEN and self.date >= timezone.localdate()


class Booking(EventRecorder, models.Model):
    """A confirmed gig between an artist and a venue."""

    class Status(models.TextChoices):
        CONFIRMED = "confirmed", _("Confirmed")
        COMPLETED = "completed", _("Completed")
        CANCELED_BY_VENUE = "canceled_by_venue", _("Canceled by venue")
        CANCELED_BY_ARTIST = "canceled_by_artist", _("Canceled by artist")
        ARTIST_NO_SHOW = "artist_no_show", _("Artist no-show")

    class Source(models.TextChoices):
        OFFER = "offer", _("Offer")
        INSTANT_GIG = "instant_gig", _("Instant gig")

    ACTIVE_STATUSES = (Status.CONFIRMED, Status.COMPLETED)

    artist = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="artist_bookings",
    )
    venue = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="venue_bookings",
    )
    date = models.DateField()
    agreed_pay = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    set_count = models.PositiveSmallIntegerField(null=True, blank=True)
    set_length_min = models.PositiveSmallIntegerField(null=True, blank=True)
    other_terms = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.CONFIRMED)
    source = models.CharField(max_length=20, choices=Source.choices)
    offer = models.ForeignKey(
        Offer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bookings",
    )
    instant_gig = models.ForeignKey(
        InstantGig,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bookings",
    )
    conversation = models.ForeignKey(
        "messaging.Conversation",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bookings",
    )
    cancellation_reason = models.TextField(blank=True)
    canceled_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["date", "id"]
        constraints = [
            models.CheckConstraint(condition=Q(agreed_pay__gte=0), name="booking_pay_non_negative"),
            models.UniqueConstraint(
                fields=["artist", "date"],
                condition=Q(status__in=["confirmed", "completed"]),
                name="one_active_booking_per_artist_date",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "date"], name="booking_status_date_idx"),
            models.Index(fields=["venue", "date"], name="booking_venue_date_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.pk} on {self.date} ({self.status})"

    def is_participant(self, user) -> bool:
        return user.pk in (self.artist_id, self.venue_id)

    def transition_to(self, target: str) -> None:
        BOOKING_MACHINE.check(self.status, target)
        self.status = target
        now = timezone.now()
        if target == self.Status.COMPLETED:
            self.completed_at = now
        elif target in (self.Status.CANCELED_BY_VENUE, self.Status.CANCELED_BY_ARTIST):
            self.canceled_at = now
