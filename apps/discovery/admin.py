"""Admin registration for matches."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Match


@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    list_display = ("id", "artist", "venue", "date", "score", "status", "created_at")
    list_filter = ("status", "date")
    search_fields = ("artist__email", "venue__email")
