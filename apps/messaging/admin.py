"""Admin registrations for messaging."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Conversation, Message


class MessageInline(admin.TabularInline):
    model = Message
    extra = 0
    fields = ("sender", "body", "is_system", "is_read", "created_at")
    readonly_fields = ("created_at",)


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    list_display = ("id", "artist", "venue", "last_message_at", "artist_unread_count", "venue_unread_count")
    search_fields = ("artist__email", "venue__email")
    inlines = [MessageInline]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ("id", "conversation", "sender", "is_system", "is_read", "created_at")
    list_filter = ("is_system", "is_read")
    search_fields = ("body",)
