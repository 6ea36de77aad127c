"""Admin registrations for profiles."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import ArtistProfile, VenueProfile


@admin.register(ArtistProfile)
class ArtistProfileAdmin(admin.ModelAdmin):
    list_display = ("stage_name", "user", "home_city", "act_type", "price_min", "no_show_count")
    list_filter = ("act_type", "home_state")
    search_fields = ("stage_name", "user__email", "home_city")
    readonly_fields = ("created_at", "updated_at")


@admin.register(VenueProfile)
class VenueProfileAdmin(admin.ModelAdmin):
    list_display = ("venue_name", "user", "city", "state", "budget_min", "budget_max", "capacity")
    list_filter = ("state", "pa_provided", "backline_provided")
    search_fields = ("venue_name", "user__email", "city")
    readonly_fields = ("created_at", "updated_at")
