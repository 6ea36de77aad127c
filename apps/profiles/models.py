"""Artist and venue profile models."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.db.models import F, Q  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


def default_service_radius() -> int:
    return getattr(settings, "MARKETPLACE_DEFAULT_SERVICE_RADIUS_KM", 50)


LATITUDE_VALIDATORS = [MinValueValidator(Decimal("-90")), MaxValueValidator(Decimal("90"))]
LONGITUDE_VALIDATORS = [MinValueValidator(Decimal("-180")), MaxValueValidator(Decimal("180"))]


class ArtistProfile(models.Model):
    """Performer profile: genres, minimum price and how far they travel."""

    class ActType(models.TextChoices):
        ACOUSTIC = "acoustic", _("Acoustic")
        FULL_BAND = "full_band", _("Full band")
        DJ = "dj", _("DJ")
        DUO = "duo", _("Duo")

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="artist_profile",
    )
    stage_name = models.CharField(_("Stage name"), max_length=150)
    home_city = models.CharField(max_length=100, blank=True)
    home_state = models.CharField(max_length=100, blank=True)
    service_radius_km = models.PositiveIntegerField(
        default=default_service_radius,
        validators=[MinValueValidator(1)],
    )
    price_min = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
        help_text=_("Lowest fee the artist accepts for a gig."),
    )
    genres = models.JSONField(default=list, blank=True)
    act_type = models.CharField(max_length=20, choices=ActType.choices, blank=True)
    bio = models.TextField(blank=True)
    profile_photo_url = models.URLField(max_length=500, blank=True)
    social_links = models.JSONField(default=dict, blank=True)
    latitude = models.DecimalField(
        max_digits=9, decimal_places=6, null=True, blank=True, validators=LATITUDE_VALIDATORS
    )
    longitude = models.DecimalField(
        max_digits=9, decimal_places=6, null=True, blank=True, validators=LONGITUDE_VALIDATORS
    )
    no_show_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Artist profile")
        verbose_name_plural = _("Artist profiles")
        ordering = ["stage_name"]
        constraints = [
            models.CheckConstraint(
                condition=Q(price_min__isnull=True) | Q(price_min__gte=0),
                name="artist_price_min_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(service_radius_km__gte=1),
                name="artist_service_radius_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["home_city"], name="artist_home_city_idx"),
        ]

    def __str__(self) -> str:
        return self.stage_name

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def record_no_show(self) -> None:
        self.no_show_count = F("no_show_count") + 1
        self.save(update_fields=["no_show_count"])
        self.refresh_from_db(fields=["no_show_count"])


class VenueProfile(models.Model):
    """Venue profile: location, budget window and what the room provides."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="venue_profile",
    )
    venue_name = models.CharField(_("Venue name"), max_length=200)
    address1 = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    postal = models.CharField(max_length=20, blank=True)
    genres_preferred = models.JSONField(default=list, blank=True)
    budget_min = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    budget_max = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    capacity = models.PositiveIntegerField(null=True, blank=True)
    pa_provided = models.BooleanField(_("PA provided"), default=False)
    backline_provided = models.BooleanField(default=False)
    bio = models.TextField(blank=True)
    main_photo_url = models.URLField(max_length=500, blank=True)
    social_links = models.JSONField(default=dict, blank=True)
    latitude = models.DecimalField(
        max_digits=9, decimal_places=6, null=True, blank=True, validators=LATITUDE_VALIDATORS
    )
    longitude = models.DecimalField(
        max_digits=9, decimal_places=6, null=True, blank=True, validators=LONGITUDE_VALIDATORS
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Venue profile")
        verbose_name_plural = _("Venue profiles")
        ordering = ["venue_name"]
        constraints = [
            models.CheckConstraint(
                condition=Q(budget_min__isnull=True)
                | Q(budget_max__isnull=True)
                | Q(budget_min__lte=F("budget_max")),
                name="venue_budget_min_lte_max",
            ),
        ]
        indexes = [
            models.Index(fields=["city"], name="venue_city_idx"),
        ]

    def __str__(self) -> str:
        return self.venue_name

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None
