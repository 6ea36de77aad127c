from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import apps.profiles.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ArtistProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("stage_name", models.CharField(max_length=150, verbose_name="Stage name")),
                ("home_city", models.CharField(blank=True, max_length=100)),
                ("home_state", models.CharField(blank=True, max_length=100)),
                (
                    "service_radius_km",
                    models.PositiveIntegerField(
                        default=apps.profiles.models.default_service_radius,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "price_min",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Lowest fee the artist accepts for a gig.",
                        max_digits=10,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                ("genres", models.JSONField(blank=True, default=list)),
                (
                    "act_type",
                    models.CharField(
                        blank=True,
                        choices=[("acoustic", "Acoustic"), ("full_band", "Full band"), ("dj", "DJ"), ("duo", "Duo")],
                        max_length=20,
                    ),
                ),
                ("bio", models.TextField(blank=True)),
                ("profile_photo_url", models.URLField(blank=True, max_length=500)),
                ("social_links", models.JSONField(blank=True, default=dict)),
                (
                    "latitude",
                    models.DecimalField(
                        blank=True,
                        decimal_places=6,
                        max_digits=9,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("-90")),
                            django.core.validators.MaxValueValidator(Decimal("90")),
                        ],
                    ),
                ),
                (
                    "longitude",
                    models.DecimalField(
                        blank=True,
                        decimal_places=6,
                        max_digits=9,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("-180")),
                            django.core.validators.MaxValueValidator(Decimal("180")),
                        ],
                    ),
                ),
                ("no_show_count", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="artist_profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Artist profile",
                "verbose_name_plural": "Artist profiles",
                "ordering": ["stage_name"],
                "indexes": [models.Index(fields=["home_city"], name="artist_home_city_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("price_min__isnull", True), ("price_min__gte", 0), _connector="OR"),
                        name="artist_price_min_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("service_radius_km__gte", 1)),
                        name="artist_service_radius_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="VenueProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("venue_name", models.CharField(max_length=200, verbose_name="Venue name")),
                ("address1", models.CharField(blank=True, max_length=255)),
                ("city", models.CharField(blank=True, max_length=100)),
                ("state", models.CharField(blank=True, max_length=100)),
                ("postal", models.CharField(blank=True, max_length=20)),
                ("genres_preferred", models.JSONField(blank=True, default=list)),
                (
                    "budget_min",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=10,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                (
                    "budget_max",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=10,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                ("capacity", models.PositiveIntegerField(blank=True, null=True)),
                ("pa_provided", models.BooleanField(default=False, verbose_name="PA provided")),
                ("backline_provided", models.BooleanField(default=False)),
                ("bio", models.TextField(blank=True)),
                ("main_photo_url", models.URLField(blank=True, max_length=500)),
                ("social_links", models.JSONField(blank=True, default=dict)),
                (
                    "latitude",
                    models.DecimalField(
                        blank=True,
                        decimal_places=6,
                        max_digits=9,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("-90")),
                            django.core.validators.MaxValueValidator(Decimal("90")),
                        ],
                    ),
                ),
                (
                    "longitude",
                    models.DecimalField(
                        blank=True,
                        decimal_places=6,
                        max_digits=9,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("-180")),
                            django.core.validators.MaxValueValidator(Decimal("180")),
                        ],
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="venue_profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Venue profile",
                "verbose_name_plural": "Venue profiles",
                "ordering": ["venue_name"],
                "indexes": [models.Index(fields=["city"], name="venue_city_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("budget_min__isnull", True),
                            ("budget_max__isnull", True),
                            ("budget_min__lte", models.F("budget_max")),
                            _connector="OR",
                        ),
                        name="venue_budget_min_lte_max",
                    ),
                ],
            },
        ),
    ]
