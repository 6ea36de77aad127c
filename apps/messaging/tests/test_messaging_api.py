"""API tests for conversations, messages and the merged feed."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.messaging.models import MAX_MESSAGE_LENGTH, Conversation, Message
from apps.messaging.services import send_message, unread_conversation_count
from conftest import (
    ArtistProfileFactory,
    ArtistUserFactory,
    BookingFactory,
    ConversationFactory,
    OfferFactory,
    StaffUserFactory,
    VenueProfileFactory,
    VenueUserFactory,
)


class ConversationAPITests(APITestCase):
    def setUp(self) -> None:
        self.artist = ArtistProfileFactory(stage_name="Low Tide").user
        self.venue = VenueProfileFactory(venue_name="The Parish").user
        self.client.force_authenticate(self.artist)

    def test_open_is_get_or_create(self) -> None:
        payload = {"artist_id": self.artist.pk, "venue_id": self.venue.pk}
        first = self.client.post(reverse("conversation-list"), payload, format="json")
        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)
        self.assertTrue(first.data["created"])

        self.client.force_authenticate(self.venue)
        second = self.client.post(reverse("conversation-list"), payload, format="json")
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(second.data["conversation_id"], first.data["conversation_id"])
        self.assertEqual(Conversation.objects.count(), 1)

    def test_cannot_open_for_other_users(self) -> None:
        other_venue = VenueUserFactory()
        other_artist = ArtistUserFactory()
        payload = {"artist_id": other_artist.pk, "venue_id": other_venue.pk}
        response = self.client.post(reverse("conversation-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_pair_must_be_artist_and_venue(self) -> None:
        other_artist = ArtistUserFactory()
        payload = {"artist_id": self.artist.pk, "venue_id": other_artist.pk}
        response = self.client.post(reverse("conversation-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "invalid_conversation_pair")

    def test_send_message_updates_inbox_of_recipient(self) -> None:
        conversation = ConversationFactory(artist=self.artist, venue=self.venue)
        url = reverse("conversation-messages", kwargs={"pk": conversation.pk})
        response = self.client.post(url, {"body": "  Hey, free on Friday?  "}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["body"], "Hey, free on Friday?")

        self.client.force_authenticate(self.venue)
        inbox = self.client.get(reverse("conversation-list"))
        self.assertEqual(inbox.status_code, status.HTTP_200_OK)
        self.assertEqual(len(inbox.data), 1)
        summary = inbox.data[0]
        self.assertEqual(summary["other_user_name"], "Low Tide")
        self.assertEqual(summary["last_message_body"], "Hey, free on Friday?")
        self.assertTrue(summary["has_unread"])
        self.assertEqual(summary["unread_count"], 1)

    def test_inbox_lists_threads_without_messages_last(self) -> None:
        active = ConversationFactory(artist=self.artist, venue=self.venue)
        send_message(active, self.venue, "Are you around in May?")
        empty = ConversationFactory(artist=self.artist, venue=VenueUserFactory())

        response = self.client.get(reverse("conversation-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["conversation_id"] for item in response.data], [active.pk, empty.pk])
        self.assertIsNone(response.data[1]["last_message_at"])

    def test_blank_and_oversized_messages_are_rejected(self) -> None:
        conversation = ConversationFactory(artist=self.artist, venue=self.venue)
        url = reverse("conversation-messages", kwargs={"pk": conversation.pk})

        response = self.client.post(url, {"body": "   "}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "empty_message")

        response = self.client.post(url, {"body": "x" * (MAX_MESSAGE_LENGTH + 1)}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "message_too_long")
        self.assertFalse(Message.objects.exists())

    def test_outsider_cannot_read_or_post(self) -> None:
        conversation = ConversationFactory()
        response = self.client.get(reverse("conversation-detail", kwargs={"pk": conversation.pk}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        url = reverse("conversation-messages", kwargs={"pk": conversation.pk})
        response = self.client.post(url, {"body": "hi"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_conversation_returns_404(self) -> None:
        response = self.client.get(reverse("conversation-detail", kwargs={"pk": 424242}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_feed_merges_messages_and_offers_and_marks_read(self) -> None:
        conversation = ConversationFactory(artist=self.artist, venue=self.venue)
        send_message(conversation, self.venue, "We have a slot.")
        offer = OfferFactory(conversation=conversation, from_user=self.venue)
        send_message(conversation, self.venue, "Sent you an offer.")
        self.assertEqual(unread_conversation_count(self.artist), 1)

        response = self.client.get(reverse("conversation-detail", kwargs={"pk": conversation.pk}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["other_user_name"], "The Parish")
        kinds = [item["kind"] for item in response.data["feed"]]
        self.assertEqual(kinds, ["message", "offer", "message"])
        self.assertEqual(response.data["feed"][1]["data"]["id"], offer.pk)

        conversation.refresh_from_db()
        self.assertEqual(conversation.artist_unread_count, 0)
        self.assertEqual(unread_conversation_count(self.artist), 0)
        self.assertFalse(Message.objects.filter(conversation=conversation, is_read=False).exists())

    def test_delete_removes_thread_but_keeps_bookings(self) -> None:
        conversation = ConversationFactory(artist=self.artist, venue=self.venue)
        send_message(conversation, self.artist, "hello")
        OfferFactory(conversation=conversation)
        booking = BookingFactory(artist=self.artist, venue=self.venue)

        response = self.client.delete(reverse("conversation-detail", kwargs={"pk": conversation.pk}))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Conversation.objects.filter(pk=conversation.pk).exists())
        self.assertFalse(Message.objects.exists())
        self.assertTrue(Booking.objects.filter(pk=booking.pk).exists())

    def test_users_without_role_are_rejected(self) -> None:
        self.client.force_authenticate(StaffUserFactory())
        response = self.client.get(reverse("conversation-list"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
