"""Messaging domain models for VenueMenu.

A conversation always joins exactly one artist and one venue. Both sides
keep their own unread counter so the inbox can be rendered without
counting messages.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.db.models import F  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

MAX_MESSAGE_LENGTH = 5000
PREVIEW_LENGTH = 200


class Conversation(models.Model):
    """A thread between an artist and a venue."""

    artist = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="artist_conversations",
    )
    venue = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="venue_conversations",
    )

    # Last message info for quick access
    last_message_at = models.DateTimeField(null=True, blank=True)
    last_message_preview = models.CharField(max_length=PREVIEW_LENGTH, blank=True)

    artist_unread_count = models.PositiveIntegerField(default=0)
    venue_unread_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Conversation")
        verbose_name_plural = _("Conversations")
        ordering = [F("last_message_at").desc(nulls_last=True), "-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["artist", "venue"], name="unique_conversation_per_pair"),
            models.CheckConstraint(
                condition=~models.Q(artist=models.F("venue")),
                name="conversation_different_users",
            ),
        ]
        indexes = [
            models.Index(fields=["artist", "-last_message_at"], name="conv_artist_last_msg_idx"),
            models.Index(fields=["venue", "-last_message_at"], name="conv_venue_last_msg_idx"),
        ]

    def __str__(self) -> str:
        return f"Conversation between {self.artist_id} and {self.venue_id}"

    def is_participant(self, user) -> bool:
        return user.pk in (self.artist_id, self.venue_id)

    def get_other_user(self, user):
        """Get the other participant in the conversation."""
        if user.pk == self.artist_id:
            return self.venue
        if user.pk == self.venue_id:
            return self.artist
        return None

    def get_unread_count(self, user) -> int:
        if user.pk == self.artist_id:
            return self.artist_unread_count
        if user.pk == self.venue_id:
            return self.venue_unread_count
        return 0

    def mark_as_read(self, user) -> None:
        """Reset the caller's unread counter."""
        if user.pk == self.artist_id:
            self.artist_unread_count = 0
            self.save(update_fields=["artist_unread_count"])
        elif user.pk == self.venue_id:
            self.venue_unread_count = 0
            self.save(update_fields=["venue_unread_count"])

    def register_message(self, message: "Message") -> None:
        """Update preview and bump the recipient's unread counter."""
        counter = "venue_unread_count" if message.sender_id == self.artist_id else "artist_unread_count"
        Conversation.objects.filter(pk=self.pk).update(
            last_message_at=message.created_at,
            last_message_preview=message.body[:PREVIEW_LENGTH],
            updated_at=timezone.now(),
            **{counter: F(counter) + 1},
        )
        self.refresh_from_db(
            fields=["last_message_at", "last_message_preview", "artist_unread_count", "venue_unread_count"]
        )


class Message(models.Model):
    """A single message. System messages are posted by offer and booking operations."""

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="messages",
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
    )
    body = models.TextField(max_length=MAX_MESSAGE_LENGTH)
    is_system = models.BooleanField(default=False)
    system_flags = models.JSONField(default=dict, blank=True)

    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = _("Message")
        verbose_name_plural = _("Messages")
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["conversation", "created_at"], name="message_conv_created_idx"),
            models.Index(fields=["conversation", "is_read"], name="message_conv_read_idx"),
        ]

    def __str__(self) -> str:
        preview = self.body[:50] + "..." if len(self.body) > 50 else self.body
        return f"Message from {self.sender_id} at {self.created_at}: {preview}"

    def save(self, *args, **kwargs):
        """Update conversation metadata when saving a new message."""
        is_new = self.pk is None
        super().save(*args, **kwargs)
        if is_new:
            self.conversation.register_message(self)
