"""Messaging services: conversations, messages and the merged feed."""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import F, Q  # type: ignore
from django.utils import timezone  # type: ignore

from shared.domain.exceptions import DomainError, NotFound, PermissionViolation

from .models import MAX_MESSAGE_LENGTH, Conversation, Message

logger = logging.getLogger(__name__)

User = get_user_model()


def get_or_create_conversation(caller, artist_user_id: int, venue_user_id: int) -> tuple[Conversation, bool]:
    """Find or open the thread between an artist and a venue.

    The caller must be one of the two users.
    """
    if caller.pk not in (artist_user_id, venue_user_id):
        raise PermissionViolation("You can only open conversations you take part in.")

    users = {user.pk: user for user in User.objects.filter(pk__in=[artist_user_id, venue_user_id])}
    artist = users.get(artist_user_id)
    venue = users.get(venue_user_id)
    if artist is None or venue is None:
        raise NotFound("User not found.")
    if not artist.is_artist or not venue.is_venue:
        raise DomainError(
            "A conversation joins one artist and one venue.", code="invalid_conversation_pair"
        )

    conversation, created = Conversation.objects.get_or_create(artist=artist, venue=venue)
    if created:
        logger.info(f"Opened conversation {conversation.pk} between artist {artist.pk} and venue {venue.pk}")
    return conversation, created


def conversation_between(artist, venue) -> Conversation:
    """Internal variant used by booking flows that already hold both users."""
    conversation, _ = Conversation.objects.get_or_create(artist=artist, venue=venue)
    return conversation


def get_conversation(conversation_id: int, user) -> Conversation:
    try:
        conversation = Conversation.objects.select_related("artist", "venue").get(pk=conversation_id)
    except Conversation.DoesNotExist:
        raise NotFound("Conversation not found.")
    if not conversation.is_participant(user):
        raise PermissionViolation("You are not a participant of this conversation.")
    return conversation


def send_message(conversation: Conversation, sender, body: str) -> Message:
    if not conversation.is_participant(sender):
        raise PermissionViolation("You are not a participant of this conversation.")
    body = (body or "").strip()
    if not body:
        raise DomainError("Message cannot be empty.", code="empty_message")
    if len(body) > MAX_MESSAGE_LENGTH:
        raise DomainError(
            f"Message is longer than {MAX_MESSAGE_LENGTH} characters.", code="message_too_long"
        )
    message = Message.objects.create(conversation=conversation, sender=sender, body=body)
    logger.info(f"User {sender.pk} sent message {message.pk} in conversation {conversation.pk}")
    return message


def post_system_message(
    conversation: Conversation,
    actor,
    body: str,
    flags: dict[str, Any] | None = None,
) -> Message:
    """A message generated by an offer or booking operation on behalf of `actor`."""
    return Message.objects.create(
        conversation=conversation,
        sender=actor,
        body=body,
        is_system=True,
        system_flags=flags or {},
    )


@transaction.atomic
def mark_conversation_read(conversation: Conversation, user) -> int:
    updated = (
        Message.objects.filter(conversation=conversation, is_read=False)
        .exclude(sender=user)
        .update(is_read=True, read_at=timezone.now())
    )
    conversation.mark_as_read(user)
    return updated


def conversation_feed(conversation: Conversation, user) -> list[dict[str, Any]]:
    """Messages and offers in creation order. Reading marks the thread read."""
    from apps.bookings.models import Offer

    if not conversation.is_participant(user):
        raise PermissionViolation("You are not a participant of this conversation.")

    items: list[dict[str, Any]] = [
        {"kind": "message", "created_at": message.created_at, "item": message}
        for message in conversation.messages.select_related("sender")
    ]
    items.extend(
        {"kind": "offer", "created_at": offer.created_at, "item": offer}
        for offer in Offer.objects.filter(conversation=conversation).select_related("from_user")
    )
    items.sort(key=lambda entry: (entry["created_at"], 0 if entry["kind"] == "offer" else 1))

    mark_conversation_read(conversation, user)
    return items


def get_user_conversations(user) -> list[dict[str, Any]]:
    """Inbox summaries, most recent first. Threads without messages go last."""
    conversations = (
        Conversation.objects.filter(Q(artist=user) | Q(venue=user))
        .select_related("artist__artist_profile", "venue__venue_profile")
        .order_by(F("last_message_at").desc(nulls_last=True), "-created_at")
    )
    summaries = []
    for conversation in conversations:
        other = conversation.get_other_user(user)
        unread = conversation.get_unread_count(user)
        summaries.append(
            {
                "conversation_id": conversation.pk,
                "other_user_id": other.pk,
                "other_user_name": other.display_name,
                "last_message_body": conversation.last_message_preview,
                "last_message_at": conversation.last_message_at,
                "has_unread": unread > 0,
                "unread_count": unread,
            }
        )
    return summaries


def unread_conversation_count(user) -> int:
    return (
        Conversation.objects.filter(artist=user, artist_unread_count__gt=0).count()
        + Conversation.objects.filter(venue=user, venue_unread_count__gt=0).count()
    )


@transaction.atomic
def delete_conversation(conversation: Conversation, user) -> None:
    """Remove the thread with its messages and offers. Bookings keep existing."""
    if not conversation.is_participant(user):
        raise PermissionViolation("You are not a participant of this conversation.")
    conversation_id = conversation.pk
    conversation.delete()
    logger.info(f"User {user.pk} deleted conversation {conversation_id}")
