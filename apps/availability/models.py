"""Open dates and date needs."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class OpenDate(models.Model):
    """A date an artist is available to play."""

    class Status(models.TextChoices):
        OPEN = "open", _("Open")
        BOOKED = "booked", _("Booked")

    artist = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="open_dates",
    )
    date = models.DateField()
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.OPEN)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Open date")
        verbose_name_plural = _("Open dates")
        ordering = ["date"]
        constraints = [
            models.UniqueConstraint(fields=["artist", "date"], name="unique_open_date_per_artist"),
        ]
        indexes = [
            models.Index(fields=["date", "status"], name="open_date_date_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.artist_id} {self.date} ({self.status})"

    def mark_booked(self) -> None:
        if self.status != self.Status.BOOKED:
            self.status = self.Status.BOOKED
            self.save(update_fields=["status", "updated_at"])

    def reopen(self) -> None:
        if self.status != self.Status.OPEN:
            self.status = self.Status.OPEN
            self.save(update_fields=["status", "updated_at"])


class DateNeed(models.Model):
    """A date a venue wants to book an act for."""

    class Status(models.TextChoices):
        OPEN = "open", _("Open")
        FILLED = "filled", _("Filled")

    venue = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="date_needs",
    )
    date = models.DateField()
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.OPEN)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Date need")
        verbose_name_plural = _("Date needs")
        ordering = ["date"]
        constraints = [
            models.UniqueConstraint(fields=["venue", "date"], name="unique_date_need_per_venue"),
        ]
        indexes = [
            models.Index(fields=["date", "status"], name="date_need_date_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.venue_id} {self.date} ({self.status})"

    def mark_filled(self) -> None:
        if self.status != self.Status.FILLED:
            self.status = self.Status.FILLED
            self.save(update_fields=["status", "updated_at"])

    def reopen(self) -> None:
        if self.status != self.Status.OPEN:
            self.status = self.Status.OPEN
            self.save(update_fields=["status", "updated_at"])
