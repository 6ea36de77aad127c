import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("venuemenu")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Confirmed gigs dated before today become completed - every hour
    "complete-past-bookings": {
        "task": "bookings.complete_past_bookings",
        "schedule": crontab(minute=10),
    },
    # Pending offers for past dates expire - every hour
    "expire-stale-offers": {
        "task": "bookings.expire_stale_offers",
        "schedule": crontab(minute=20),
    },
    # Open instant gigs for past dates expire - every hour
    "expire-instant-gigs": {
        "task": "bookings.expire_instant_gigs",
        "schedule": crontab(minute=30),
    },
    # Reminders for tomorrow's gigs - every 6 hours
    "send-upcoming-gig-reminders": {
        "task": "bookings.send_upcoming_gig_reminders",
        "schedule": crontab(minute=0, hour="*/6"),
    },
    # Nightly matching run
    "generate-matches": {
        "task": "discovery.generate_matches",
        "schedule": crontab(minute=0, hour=3),
    },
}

app.conf.timezone = "America/New_York"
