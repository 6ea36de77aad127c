"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, InstantGig, Offer


@admin.register(Offer)
class OfferAdmin(admin.ModelAdmin):
    list_display = ("id", "conversation", "from_user", "date", "pay_amount", "status", "created_at")
    list_filter = ("status", "date")
    search_fields = ("from_user__email", "other_terms")
    raw_id_fields = ("conversation", "parent")


@admin.register(InstantGig)
class InstantGigAdmin(admin.ModelAdmin):
    list_display = ("id", "created_by", "creator_role", "date", "pay_amount", "city", "status")
    list_filter = ("status", "creator_role", "date")
    search_fields = ("city", "notes", "created_by__email")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "artist",
        "venue",
        "date",
        "status",
        "source",
        "agreed_pay",
        "created_at",
    )
    list_filter = ("status", "source", "date")
    search_fields = ("artist__email", "venue__email")
    readonly_fields = ("created_at", "updated_at", "canceled_at", "completed_at")
