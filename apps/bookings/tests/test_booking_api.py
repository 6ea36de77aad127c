"""Integration tests for offer, instant gig and booking API endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.availability.models import DateNeed, OpenDate
from apps.bookings.models import Booking, InstantGig, Offer
from apps.messaging.models import Conversation, Message
from apps.profiles.models import ArtistProfile, VenueProfile
from apps.users.models import User


class BookingAPITestBase(APITestCase):
    def setUp(self) -> None:
        self.artist = User.objects.create_user(
            email="artist@example.com",
            password="ArtistPass123",
            role=User.Role.ARTIST,
        )
        self.venue = User.objects.create_user(
            email="venue@example.com",
            password="VenuePass123",
            role=User.Role.VENUE,
        )
        ArtistProfile.objects.create(user=self.artist, stage_name="The Wanderers", price_min=Decimal("300"))
        VenueProfile.objects.create(user=self.venue, venue_name="Blue Room", city="Austin")
        self.conversation = Conversation.objects.create(artist=self.artist, venue=self.venue)
        self.gig_date = timezone.localdate() + timedelta(days=10)

    def _send_offer(self, **overrides):
        payload = {
            "conversation_id": self.conversation.pk,
            "date": str(self.gig_date),
            "pay_amount": "450.00",
            "set_count": 2,
            "set_length_min": 45,
            "other_terms": "Two sets, dinner included",
        }
        payload.update(overrides)
        self.client.force_authenticate(self.venue)
        return self.client.post(reverse("offer-list"), payload, format="json")


class OfferAPITests(BookingAPITestBase):
    def test_venue_can_send_offer(self) -> None:
        response = self._send_offer()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        offer = Offer.objects.get()
        self.assertEqual(offer.status, Offer.Status.PENDING)
        self.assertEqual(offer.from_user, self.venue)
        self.assertTrue(
            Message.objects.filter(
                conversation=self.conversation,
                is_system=True,
                body=f"New offer for {self.gig_date.isoformat()} sent.",
            ).exists()
        )

    def test_artist_cannot_send_fresh_offer(self) -> None:
        self.client.force_authenticate(self.artist)
        response = self.client.post(
            reverse("offer-list"),
            {"conversation_id": self.conversation.pk, "date": str(self.gig_date), "pay_amount": "100"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_second_pending_offer_for_same_date_conflicts(self) -> None:
        self.assertEqual(self._send_offer().status_code, status.HTTP_201_CREATED)
        response = self._send_offer(pay_amount="500.00")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "duplicate_pending_offer")

    def test_offer_in_the_past_is_rejected(self) -> None:
        response = self._send_offer(date=str(timezone.localdate() - timedelta(days=1)))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "date_in_past")

    def test_artist_accepts_offer_and_booking_is_created(self) -> None:
        offer_id = self._send_offer().data["id"]
        DateNeed.objects.create(venue=self.venue, date=self.gig_date)

        self.client.force_authenticate(self.artist)
        response = self.client.post(reverse("offer-accept", args=[offer_id]))

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        booking = Booking.objects.get()
        self.assertEqual(booking.status, Booking.Status.CONFIRMED)
        self.assertEqual(booking.agreed_pay, Decimal("450.00"))
        self.assertEqual(booking.set_count, 2)
        self.assertEqual(Offer.objects.get(pk=offer_id).status, Offer.Status.ACCEPTED)
        self.assertEqual(
            OpenDate.objects.get(artist=self.artist, date=self.gig_date).status,
            OpenDate.Status.BOOKED,
        )
        self.assertEqual(
            DateNeed.objects.get(venue=self.venue, date=self.gig_date).status,
            DateNeed.Status.FILLED,
        )
        accepted_message = Message.objects.filter(system_flags__offer_accepted=True).get()
        self.assertEqual(accepted_message.system_flags["booking_id"], booking.pk)

    def test_sender_cannot_accept_own_offer(self) -> None:
        offer_id = self._send_offer().data["id"]
        response = self.client.post(reverse("offer-accept", args=[offer_id]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Booking.objects.exists())

    def test_accepting_twice_is_an_invalid_transition(self) -> None:
        offer_id = self._send_offer().data["id"]
        self.client.force_authenticate(self.artist)
        self.client.post(reverse("offer-accept", args=[offer_id]))

        response = self.client.post(reverse("offer-accept", args=[offer_id]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(Booking.objects.count(), 1)

    def test_artist_counters_offer(self) -> None:
        offer_id = self._send_offer().data["id"]
        self.client.force_authenticate(self.artist)
        response = self.client.post(
            reverse("offer-counter", args=[offer_id]),
            {"date": str(self.gig_date), "pay_amount": "600.00", "set_count": 2, "set_length_min": 45},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Offer.objects.get(pk=offer_id).status, Offer.Status.COUNTERED)
        counter = Offer.objects.get(pk=response.data["id"])
        self.assertEqual(counter.parent_id, offer_id)
        self.assertEqual(counter.from_user, self.artist)
        self.assertEqual(counter.status, Offer.Status.PENDING)

    def test_sender_cannot_counter_own_offer(self) -> None:
        offer_id = self._send_offer().data["id"]
        response = self.client.post(
            reverse("offer-counter", args=[offer_id]),
            {"date": str(self.gig_date), "pay_amount": "300.00"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(Offer.objects.get(pk=offer_id).status, Offer.Status.PENDING)
        self.assertEqual(Offer.objects.count(), 1)

    def test_concurrent_pending_offer_insert_is_a_conflict(self) -> None:
        self.assertEqual(self._send_offer().status_code, status.HTTP_201_CREATED)
        # Let the second request past the read check, as a racing request would be
        with mock.patch("apps.bookings.application.command_handlers._ensure_no_pending_offer"):
            response = self._send_offer(pay_amount="500.00")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "duplicate_pending_offer")
        self.assertEqual(Offer.objects.count(), 1)

    def test_decline_and_withdraw(self) -> None:
        first_id = self._send_offer().data["id"]
        self.client.force_authenticate(self.artist)
        response = self.client.post(reverse("offer-decline", args=[first_id]))
        self.assertEqual(response.data["status"], Offer.Status.DECLINED)

        second_id = self._send_offer().data["id"]
        response = self.client.post(reverse("offer-withdraw", args=[second_id]))
        self.assertEqual(response.data["status"], Offer.Status.WITHDRAWN)

    def test_feed_includes_offers(self) -> None:
        self._send_offer()
        self.client.force_authenticate(self.artist)
        response = self.client.get(reverse("conversation-detail", args=[self.conversation.pk]))
        kinds = [item["kind"] for item in response.data["feed"]]
        self.assertEqual(kinds, ["offer", "message"])


class InstantGigAPITests(BookingAPITestBase):
    def _post_gig(self, user, **overrides):
        payload = {"date": str(self.gig_date), "pay_amount": "300.00", "genres": "Jazz, funk", "city": "Austin"}
        payload.update(overrides)
        self.client.force_authenticate(user)
        return self.client.post(reverse("instant-gig-list"), payload, format="json")

    def test_list_shows_opposite_role_posts_only(self) -> None:
        self._post_gig(self.venue)
        other_artist = User.objects.create_user(email="other@example.com", password="x" * 10, role=User.Role.ARTIST)
        self._post_gig(other_artist)

        self.client.force_authenticate(self.artist)
        response = self.client.get(reverse("instant-gig-list"), {"city": "aus"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        gig = response.data["results"][0]
        self.assertEqual(gig["creator_role"], "venue")
        self.assertEqual(gig["creator_name"], "Blue Room")
        self.assertEqual(gig["genres"], ["jazz", "funk"])

    def test_artist_books_venue_gig(self) -> None:
        gig_id = self._post_gig(self.venue).data["id"]

        self.client.force_authenticate(self.artist)
        response = self.client.post(reverse("instant-gig-book", args=[gig_id]))

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        gig = InstantGig.objects.get(pk=gig_id)
        self.assertEqual(gig.status, InstantGig.Status.BOOKED)
        self.assertEqual(gig.booked_by, self.artist)
        booking = Booking.objects.get()
        self.assertEqual(booking.source, Booking.Source.INSTANT_GIG)
        self.assertEqual(booking.artist, self.artist)
        self.assertEqual(booking.venue, self.venue)
        self.assertEqual(booking.conversation, self.conversation)

    def test_booking_a_booked_gig_is_unavailable(self) -> None:
        gig_id = self._post_gig(self.venue).data["id"]
        self.client.force_authenticate(self.artist)
        self.client.post(reverse("instant-gig-book", args=[gig_id]))

        response = self.client.post(reverse("instant-gig-book", args=[gig_id]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["detail"], "This gig is no longer available.")

    def test_same_role_cannot_book_gig(self) -> None:
        other_venue = User.objects.create_user(email="v2@example.com", password="x" * 10, role=User.Role.VENUE)
        gig_id = self._post_gig(self.venue).data["id"]

        self.client.force_authenticate(other_venue)
        response = self.client.post(reverse("instant-gig-book", args=[gig_id]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["detail"], "You cannot book your own gig post.")

    def test_double_booked_artist_is_rejected(self) -> None:
        Booking.objects.create(
            artist=self.artist,
            venue=self.venue,
            date=self.gig_date,
            agreed_pay=Decimal("100"),
            source=Booking.Source.OFFER,
        )
        gig_id = self._post_gig(self.venue).data["id"]

        self.client.force_authenticate(self.artist)
        response = self.client.post(reverse("instant-gig-book", args=[gig_id]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "artist_already_booked")
        self.assertEqual(InstantGig.objects.get(pk=gig_id).status, InstantGig.Status.OPEN)

    def test_creator_withdraws_gig(self) -> None:
        gig_id = self._post_gig(self.venue).data["id"]
        response = self.client.post(reverse("instant-gig-withdraw", args=[gig_id]))
        self.assertEqual(response.data["status"], InstantGig.Status.WITHDRAWN)

    def test_only_creator_can_withdraw_gig(self) -> None:
        gig_id = self._post_gig(self.venue).data["id"]

        self.client.force_authenticate(self.artist)
        response = self.client.post(reverse("instant-gig-withdraw", args=[gig_id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(InstantGig.objects.get(pk=gig_id).status, InstantGig.Status.OPEN)


class BookingLifecycleAPITests(BookingAPITestBase):
    def _booking(self, days: int = 10) -> Booking:
        day = timezone.localdate() + timedelta(days=days)
        OpenDate.objects.create(artist=self.artist, date=day, status=OpenDate.Status.BOOKED)
        DateNeed.objects.create(venue=self.venue, date=day, status=DateNeed.Status.FILLED)
        return Booking.objects.create(
            artist=self.artist,
            venue=self.venue,
            date=day,
            agreed_pay=Decimal("400"),
            source=Booking.Source.OFFER,
            conversation=self.conversation,
        )

    def test_scoped_booking_lists(self) -> None:
        upcoming = self._booking()
        past = self._booking(days=-3)
        past.status = Booking.Status.COMPLETED
        past.save()

        self.client.force_authenticate(self.artist)
        response = self.client.get(reverse("booking-list"), {"scope": "upcoming"})
        self.assertEqual([item["id"] for item in response.data["results"]], [upcoming.pk])

        response = self.client.get(reverse("booking-list"), {"scope": "past"})
        self.assertEqual([item["id"] for item in response.data["results"]], [past.pk])

    def test_outsider_gets_404_for_booking_details(self) -> None:
        booking = self._booking()
        outsider = User.objects.create_user(email="out@example.com", password="x" * 10, role=User.Role.ARTIST)
        self.client.force_authenticate(outsider)
        response = self.client.get(reverse("booking-detail", args=[booking.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_venue_cancels_and_availability_is_released(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.venue)
        response = self.client.post(reverse("booking-cancel", args=[booking.pk]), {"reason": "Flooded"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.CANCELED_BY_VENUE)
        self.assertEqual(booking.cancellation_reason, "Flooded")
        self.assertEqual(OpenDate.objects.get(artist=self.artist, date=booking.date).status, OpenDate.Status.OPEN)
        self.assertEqual(DateNeed.objects.get(venue=self.venue, date=booking.date).status, DateNeed.Status.OPEN)

    def test_artist_cancel_sets_artist_status(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.artist)
        response = self.client.post(reverse("booking-cancel", args=[booking.pk]))
        self.assertEqual(response.data["status"], Booking.Status.CANCELED_BY_ARTIST)

    def test_no_show_before_the_date_is_rejected(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.venue)
        response = self.client.post(reverse("booking-no-show", args=[booking.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "date_in_future")

    def test_venue_reports_no_show(self) -> None:
        booking = self._booking(days=0)
        self.client.force_authenticate(self.venue)
        response = self.client.post(reverse("booking-no-show", args=[booking.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Booking.Status.ARTIST_NO_SHOW)
        self.assertEqual(ArtistProfile.objects.get(user=self.artist).no_show_count, 1)

    def test_artist_cannot_report_no_show(self) -> None:
        booking = self._booking(days=0)
        self.client.force_authenticate(self.artist)
        response = self.client.post(reverse("booking-no-show", args=[booking.pk]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_complete_on_gig_day(self) -> None:
        booking = self._booking(days=0)
        self.client.force_authenticate(self.artist)
        response = self.client.post(reverse("booking-complete", args=[booking.pk]))
        self.assertEqual(response.data["status"], Booking.Status.COMPLETED)

    def test_complete_before_the_date_is_rejected(self) -> None:
        booking = self._booking(days=2)
        self.client.force_authenticate(self.venue)
        response = self.client.post(reverse("booking-complete", args=[booking.pk]))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "date_in_future")
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.CONFIRMED)

    def test_cancel_keeps_date_need_filled_while_another_act_is_booked(self) -> None:
        booking = self._booking()
        second_artist = User.objects.create_user(email="second@example.com", password="x" * 10, role=User.Role.ARTIST)
        Booking.objects.create(
            artist=second_artist,
            venue=self.venue,
            date=booking.date,
            agreed_pay=Decimal("250"),
            source=Booking.Source.OFFER,
        )

        self.client.force_authenticate(self.venue)
        response = self.client.post(reverse("booking-cancel", args=[booking.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(OpenDate.objects.get(artist=self.artist, date=booking.date).status, OpenDate.Status.OPEN)
        self.assertEqual(DateNeed.objects.get(venue=self.venue, date=booking.date).status, DateNeed.Status.FILLED)
