"""Admin registrations for availability."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import DateNeed, OpenDate


@admin.register(OpenDate)
class OpenDateAdmin(admin.ModelAdmin):
    list_display = ("artist", "date", "status")
    list_filter = ("status",)
    search_fields = ("artist__email",)
    date_hierarchy = "date"


@admin.register(DateNeed)
class DateNeedAdmin(admin.ModelAdmin):
    list_display = ("venue", "date", "status", "notes")
    list_filter = ("status",)
    search_fields = ("venue__email", "notes")
    date_hierarchy = "date"
