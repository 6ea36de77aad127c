import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="OpenDate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                (
                    "status",
                    models.CharField(
                        choices=[("open", "Open"), ("booked", "Booked")], default="open", max_length=10
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "artist",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="open_dates",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Open date",
                "verbose_name_plural": "Open dates",
                "ordering": ["date"],
                "indexes": [models.Index(fields=["date", "status"], name="open_date_date_status_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("artist", "date"), name="unique_open_date_per_artist"),
                ],
            },
        ),
        migrations.CreateModel(
            name="DateNeed",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                (
                    "status",
                    models.CharField(
                        choices=[("open", "Open"), ("filled", "Filled")], default="open", max_length=10
                    ),
                ),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "venue",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="date_needs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Date need",
                "verbose_name_plural": "Date needs",
                "ordering": ["date"],
                "indexes": [models.Index(fields=["date", "status"], name="date_need_date_status_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("venue", "date"), name="unique_date_need_per_venue"),
                ],
            },
        ),
    ]
