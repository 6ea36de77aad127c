"""Availability services for artists' open dates and venues' date needs."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from shared.domain.exceptions import ConflictError, DomainError, NotFound, PermissionViolation

from . import scheduling
from .models import DateNeed, OpenDate

logger = logging.getLogger(__name__)


def _require_artist(user) -> None:
    if not user.is_artist:
        raise PermissionViolation("Only artists manage open dates.")


def _require_venue(user) -> None:
    if not user.is_venue:
        raise PermissionViolation("Only venues manage date needs.")


def _ensure_not_past(day: date) -> None:
    if day < timezone.localdate():
        raise DomainError(f"{day.isoformat()} is in the past.", code="date_in_past")


def recurrence_dates(rule: str, count: int, start: date | None = None) -> list[date]:
    """Validate and expand a recurrence rule, starting today by default."""
    max_count = getattr(settings, "MARKETPLACE_RECURRENCE_MAX_COUNT", 52)
    if rule not in scheduling.RECURRENCE_RULES:
        raise DomainError(f"Unknown recurrence rule: {rule}.", code="invalid_recurrence")
    if not 1 <= count <= max_count:
        raise DomainError(
            f"Recurrence count must be between 1 and {max_count}.", code="invalid_recurrence"
        )
    return scheduling.expand_recurrence(rule, count, start or timezone.localdate())


# ===== Open dates (artists) =====

def list_open_dates(artist, start: date | None = None, end: date | None = None):
    qs = OpenDate.objects.filter(artist=artist)
    if start:
        qs = qs.filter(date__gte=start)
    if end:
        qs = qs.filter(date__lte=end)
    return qs.order_by("date")


def add_open_date(artist, day: date) -> OpenDate:
    """Publish a date as open. Adding an already open date is a no-op."""
    _require_artist(artist)
    _ensure_not_past(day)
    open_date, created = OpenDate.objects.get_or_create(artist=artist, date=day)
    if created:
        logger.info(f"Artist {artist.pk} opened {day}")
    return open_date


def remove_open_date(artist, day: date) -> None:
    _require_artist(artist)
    try:
        open_date = OpenDate.objects.get(artist=artist, date=day)
    except OpenDate.DoesNotExist:
        raise NotFound(f"No open date on {day.isoformat()}.")
    if open_date.status == OpenDate.Status.BOOKED:
        raise ConflictError("Booked dates cannot be removed.", code="date_booked")
    open_date.delete()
    logger.info(f"Artist {artist.pk} removed open date {day}")


@transaction.atomic
def sync_open_dates(
    artist,
    dates: Iterable[date],
    recurrence: dict | None = None,
) -> dict[str, list[date]]:
    """Make the artist's future open dates equal the requested set.

    The set is the explicit dates plus the expanded recurrence. Open dates
    missing from the set are removed and new ones are added. Booked dates are
    never touched.
    """
    _require_artist(artist)
    desired = set(dates)
    if recurrence:
        desired.update(
            recurrence_dates(recurrence["rule"], recurrence["count"], recurrence.get("start"))
        )
    for day in sorted(desired):
        _ensure_not_past(day)

    today = timezone.localdate()
    existing = {
        item.date: item
        for item in OpenDate.objects.select_for_update().filter(artist=artist, date__gte=today)
    }

    removed = sorted(
        day
        for day, item in existing.items()
        if item.status == OpenDate.Status.OPEN and day not in desired
    )
    added = sorted(day for day in desired if day not in existing)

    if removed:
        OpenDate.objects.filter(artist=artist, date__in=removed, status=OpenDate.Status.OPEN).delete()
    OpenDate.objects.bulk_create([OpenDate(artist=artist, date=day) for day in added])

    logger.info(f"Artist {artist.pk} synced open dates: +{len(added)} -{len(removed)}")
    return {"added": added, "removed": removed}


def month_calendar(artist, year: int, month: int) -> dict:
    if not 1 <= month <= 12:
        raise DomainError("Month must be between 1 and 12.", code="invalid_month")
    statuses = dict(
        OpenDate.objects.filter(artist=artist, date__year=year, date__month=month).values_list(
            "date", "status"
        )
    )
    return {
        "year": year,
        "month": month,
        "weeks": scheduling.month_grid(year, month, statuses, timezone.localdate()),
    }


def get_artist_availability(artist):
    """Open dates from today on."""
    return OpenDate.objects.filter(
        artist=artist,
        status=OpenDate.Status.OPEN,
        date__gte=timezone.localdate(),
    ).order_by("date")


def mark_open_date_booked(artist, day: date) -> OpenDate:
    """Called by bookings: the date becomes booked, created if it was never opened."""
    open_date, _ = OpenDate.objects.get_or_create(
        artist=artist, date=day, defaults={"status": OpenDate.Status.BOOKED}
    )
    open_date.mark_booked()
    return open_date


def release_open_date(artist, day: date) -> None:
    for open_date in OpenDate.objects.filter(artist=artist, date=day):
        open_date.reopen()


# ===== Date needs (venues) =====

def list_date_needs(venue, include_past: bool = False):
    qs = DateNeed.objects.filter(venue=venue)
    if not include_past:
        qs = qs.filter(date__gte=timezone.localdate())
    return qs.order_by("date")


def add_date_need(venue, day: date, notes: str = "") -> DateNeed:
    _require_venue(venue)
    _ensure_not_past(day)
    need, created = DateNeed.objects.get_or_create(venue=venue, date=day, defaults={"notes": notes})
    if not created:
        raise ConflictError(f"A date need for {day.isoformat()} already exists.", code="duplicate_date_need")
    logger.info(f"Venue {venue.pk} posted date need {day}")
    return need


def remove_date_need(venue, need_id: int) -> None:
    _require_venue(venue)
    try:
        need = DateNeed.objects.get(pk=need_id, venue=venue)
    except DateNeed.DoesNotExist:
        raise NotFound("Date need not found.")
    if need.status == DateNeed.Status.FILLED:
        raise ConflictError("Filled date needs cannot be removed.", code="date_need_filled")
    need.delete()
    logger.info(f"Venue {venue.pk} removed date need {need.date}")


def get_venue_availability(venue):
    """Open date needs from today on."""
    return DateNeed.objects.filter(
        venue=venue,
        status=DateNeed.Status.OPEN,
        date__gte=timezone.localdate(),
    ).order_by("date")


def fill_date_need(venue, day: date) -> None:
    for need in DateNeed.objects.filter(venue=venue, date=day):
        need.mark_filled()


def reopen_date_need(venue, day: date) -> None:
    for need in DateNeed.objects.filter(venue=venue, date=day):
        need.reopen()
