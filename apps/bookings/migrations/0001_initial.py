import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("messaging", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Offer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("pay_amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("set_count", models.PositiveSmallIntegerField(default=1)),
                (
                    "set_length_min",
                    models.PositiveSmallIntegerField(default=60, help_text="Length of one set in minutes."),
                ),
                ("other_terms", models.TextField(blank=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("accepted", "Accepted"),
                            ("declined", "Declined"),
                            ("countered", "Countered"),
                            ("withdrawn", "Withdrawn"),
                            ("expired", "Expired"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("responded_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "conversation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="offers",
                        to="messaging.conversation",
                    ),
                ),
                (
                    "from_user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sent_offers",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        help_text="The offer this one counters.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="counter_offers",
                        to="bookings.offer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Offer",
                "verbose_name_plural": "Offers",
                "ordering": ["created_at", "id"],
                "indexes": [models.Index(fields=["status", "date"], name="offer_status_date_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("pay_amount__gt", 0)), name="offer_pay_positive"),
                    models.CheckConstraint(condition=models.Q(("set_count__gte", 1)), name="offer_set_count_positive"),
                    models.CheckConstraint(
                        condition=models.Q(("set_length_min__gte", 1)), name="offer_set_length_positive"
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("status", "pending")),
                        fields=("conversation", "date"),
                        name="one_pending_offer_per_conversation_date",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="InstantGig",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("creator_role", models.CharField(choices=[("artist", "Artist"), ("venue", "Venue")], max_length=20)),
                ("date", models.DateField()),
                ("pay_amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("genres", models.JSONField(blank=True, default=list)),
                ("city", models.CharField(blank=True, max_length=100)),
                ("notes", models.TextField(blank=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("open", "Open"),
                            ("booked", "Booked"),
                            ("withdrawn", "Withdrawn"),
                            ("expired", "Expired"),
                        ],
                        default="open",
                        max_length=20,
                    ),
                ),
                ("booked_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "booked_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="booked_instant_gigs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="instant_gigs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Instant gig",
                "verbose_name_plural": "Instant gigs",
                "ordering": ["date", "created_at"],
                "indexes": [models.Index(fields=["status", "date"], name="instant_gig_status_date_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("pay_amount__gt", 0)), name="instant_gig_pay_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("agreed_pay", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("set_count", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("set_length_min", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("other_terms", models.TextField(blank=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("confirmed", "Confirmed"),
                            ("completed", "Completed"),
                            ("canceled_by_venue", "Canceled by venue"),
                            ("canceled_by_artist", "Canceled by artist"),
                            ("artist_no_show", "Artist no-show"),
                        ],
                        default="confirmed",
                        max_length=20,
                    ),
                ),
                (
                    "source",
                    models.CharField(choices=[("offer", "Offer"), ("instant_gig", "Instant gig")], max_length=20),
                ),
                ("cancellation_reason", models.TextField(blank=True)),
                ("canceled_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "artist",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="artist_bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "venue",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="venue_bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "conversation",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="bookings",
                        to="messaging.conversation",
                    ),
                ),
                (
                    "instant_gig",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="bookings",
                        to="bookings.instantgig",
                    ),
                ),
                (
                    "offer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="bookings",
                        to="bookings.offer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["date", "id"],
                "indexes": [
                    models.Index(fields=["status", "date"], name="booking_status_date_idx"),
                    models.Index(fields=["venue", "date"], name="booking_venue_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("agreed_pay__gte", 0)), name="booking_pay_non_negative"),
                    models.UniqueConstraint(
                        condition=models.Q(("status__in", ["confirmed", "completed"])),
                        fields=("artist", "date"),
                        name="one_active_booking_per_artist_date",
                    ),
                ],
            },
        ),
    ]
