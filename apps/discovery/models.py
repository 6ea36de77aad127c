"""Match model produced by the matching job."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Match(models.Model):
    """A scored (artist, venue, date) candidate pair."""

    class Status(models.TextChoices):
        NEW = "new", _("New")
        DISMISSED = "dismissed", _("Dismissed")

    artist = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="artist_matches",
    )
    venue = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="venue_matches",
    )
    date = models.DateField()
    score = models.PositiveSmallIntegerField(validators=[MaxValueValidator(100)])
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.NEW)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Match")
        verbose_name_plural = _("Matches")
        ordering = ["date", "-score", "id"]
        constraints = [
            models.UniqueConstraint(fields=["artist", "venue", "date"], name="unique_match_per_pair_date"),
        ]
        indexes = [
            models.Index(fields=["artist", "status", "date"], name="match_artist_status_idx"),
            models.Index(fields=["venue", "status", "date"], name="match_venue_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Match {self.artist_id}/{self.venue_id} on {self.date} ({self.score})"

    def is_participant(self, user) -> bool:
        return user.pk in (self.artist_id, self.venue_id)
