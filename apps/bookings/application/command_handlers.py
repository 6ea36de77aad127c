"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- SendOfferCommand: A venue proposes gig terms in a conversation
- AcceptOfferCommand: The recipient accepts (creates the booking)
- DeclineOfferCommand / WithdrawOfferCommand: Close a pending offer
- CounterOfferCommand: The recipient answers with new terms
- PostInstantGigCommand / BookInstantGigCommand / WithdrawInstantGigCommand
- CancelBookingCommand / ReportNoShowCommand / CompleteBookingCommand
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
import logging

from django.contrib.auth import get_user_model  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings import services
from apps.bookings.domain.events import (
    ArtistNoShowReported,
    BookingCanceled,
    BookingCompleted,
    BookingConfirmed,
    InstantGigBooked,
    OfferAccepted,
    OfferCountered,
    OfferDeclined,
    OfferSent,
    OfferWithdrawn,
)
from apps.bookings.models import Booking, InstantGig, Offer
from apps.messaging import services as messaging
from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import ConflictError, DomainError, NotFound, PermissionViolation

logger = logging.getLogger(__name__)

User = get_user_model()


# ===== Commands =====

@dataclass
class OfferTerms:
    """Terms shared by offers and counter-offers"""
    date: date
    pay_amount: Decimal
    set_count: int = 1
    set_length_min: int = 60
    other_terms: str = ''


@dataclass
class SendOfferCommand:
    """Command to send a new offer in a conversation (venue only)"""
    conversation_id: int
    user_id: int
    terms: OfferTerms


@dataclass
class AcceptOfferCommand:
    offer_id: int
    user_id: int


@dataclass
class DeclineOfferCommand:
    offer_id: int
    user_id: int


@dataclass
class CounterOfferCommand:
    """Command to replace a pending offer with new terms"""
    offer_id: int
    user_id: int
    terms: OfferTerms


@dataclass
class WithdrawOfferCommand:
    offer_id: int
    user_id: int


@dataclass
class PostInstantGigCommand:
    user_id: int
    date: date
    pay_amount: Decimal
    genres: list = field(default_factory=list)
    city: str = ''
    notes: str = ''


@dataclass
class BookInstantGigCommand:
    gig_id: int
    user_id: int


@dataclass
class WithdrawInstantGigCommand:
    gig_id: int
    user_id: int


@dataclass
class CancelBookingCommand:
    booking_id: int
    user_id: int
    reason: str = ''


@dataclass
class ReportNoShowCommand:
    booking_id: int
    user_id: int


@dataclass
class CompleteBookingCommand:
    booking_id: int
    user_id: int


# ===== Helpers =====

def _load_user(user_id: int):
    try:
        return User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise NotFound(f"User {user_id} not found.")


def _validate_terms(terms: OfferTerms) -> None:
    if terms.date < timezone.localdate():
        raise DomainError("The gig date cannot be in the past.", code="date_in_past")
    if terms.pay_amount is None or terms.pay_amount <= 0:
        raise DomainError("Pay must be greater than zero.", code="invalid_pay")
    if terms.set_count < 1:
        raise DomainError("At least one set is required.", code="invalid_set_count")
    if terms.set_length_min < 1:
        raise DomainError("Set length must be at least one minute.", code="invalid_set_length")


def _ensure_no_pending_offer(conversation_id: int, day: date) -> None:
    if Offer.objects.filter(
        conversation_id=conversation_id, date=day, status=Offer.Status.PENDING
    ).exists():
        raise ConflictError(
            f"There is already a pending offer for {day.isoformat()} in this conversation.",
            code="duplicate_pending_offer",
        )


def _create_pending_offer(**fields) -> Offer:
    """Insert a pending offer; a concurrent one for the same date trips the partial unique constraint."""
    try:
        with transaction.atomic():
            return Offer.objects.create(**fields)
    except IntegrityError:
        raise ConflictError(
            f"There is already a pending offer for {fields['date'].isoformat()} in this conversation.",
            code="duplicate_pending_offer",
        )


def _ensure_recipient(offer: Offer, user) -> None:
    if not offer.conversation.is_participant(user) or offer.from_user_id == user.pk:
        raise PermissionViolation("Only the recipient can respond to this offer.")


# ===== Offer Handlers =====

class SendOfferHandler:
    """
    Handler for SendOffer command

    Only the conversation's venue sends fresh offers; artists answer with
    counter-offers.
    """

    def handle(self, command: SendOfferCommand) -> Offer:
        logger.info(
            f"User {command.user_id} sending offer in conversation "
            f"{command.conversation_id} for {command.terms.date}"
        )
        user = _load_user(command.user_id)

        with DjangoUnitOfWork() as uow:
            conversation = messaging.get_conversation(command.conversation_id, user)
            if conversation.venue_id != user.pk:
                raise PermissionViolation("Only the venue in this conversation can send offers.")
            _validate_terms(command.terms)
            _ensure_no_pending_offer(conversation.pk, command.terms.date)

            offer = _create_pending_offer(
                conversation=conversation,
                from_user=user,
                date=command.terms.date,
                pay_amount=command.terms.pay_amount,
                set_count=command.terms.set_count,
                set_length_min=command.terms.set_length_min,
                other_terms=command.terms.other_terms,
            )
            messaging.post_system_message(
                conversation,
                user,
                f"New offer for {offer.date.isoformat()} sent.",
                {"offer_sent": True, "offer_id": offer.pk},
            )
            offer.add_event(OfferSent(
                aggregate_id=offer.pk,
                offer_id=offer.pk,
                conversation_id=conversation.pk,
                from_user_id=user.pk,
                to_user_id=conversation.artist_id,
                date=offer.date,
            ))
            uow.collect_events(offer)

        logger.info(f"Offer {offer.pk} sent")
        return offer


class AcceptOfferHandler:
    """
    Handler for AcceptOffer command

    One transaction: offer -> ACCEPTED, booking insert, calendar updates,
    competing offers expired, artist's gig posts withdrawn, system message.
    """

    def handle(self, command: AcceptOfferCommand) -> Booking:
        logger.info(f"User {command.user_id} accepting offer {command.offer_id}")
        user = _load_user(command.user_id)

        with DjangoUnitOfWork() as uow:
            offer = services.lock_offer(command.offer_id)
            conversation = offer.conversation
            _ensure_recipient(offer, user)

            offer.transition_to(Offer.Status.ACCEPTED)
            if offer.date < timezone.localdate():
                raise DomainError("This offer's date has passed.", code="date_in_past")

            artist = conversation.artist
            venue = conversation.venue
            services.ensure_artist_is_free(artist, offer.date)
            offer.save(update_fields=["status", "responded_at", "updated_at"])

            booking = services.create_booking(
                artist=artist,
                venue=venue,
                date=offer.date,
                agreed_pay=offer.pay_amount,
                set_count=offer.set_count,
                set_length_min=offer.set_length_min,
                other_terms=offer.other_terms,
                source=Booking.Source.OFFER,
                offer=offer,
                conversation=conversation,
            )
            services.reserve_availability_for_booking(booking)

            messaging.post_system_message(
                conversation,
                user,
                f"Offer for {offer.date.isoformat()} accepted. Booking confirmed.",
                {"offer_accepted": True, "booking_id": booking.pk},
            )

            offer.add_event(OfferAccepted(
                aggregate_id=offer.pk,
                offer_id=offer.pk,
                booking_id=booking.pk,
                accepted_by_id=user.pk,
                sender_id=offer.from_user_id,
                date=offer.date,
            ))
            booking.add_event(BookingConfirmed(
                aggregate_id=booking.pk,
                booking_id=booking.pk,
                artist_id=artist.pk,
                venue_id=venue.pk,
                date=booking.date,
                source=booking.source,
            ))
            uow.collect_events(offer)
            uow.collect_events(booking)

        logger.info(f"Offer {offer.pk} accepted, booking {booking.pk} confirmed")
        return booking


class DeclineOfferHandler:
    """Handler for DeclineOffer command"""

    def handle(self, command: DeclineOfferCommand) -> Offer:
        logger.info(f"User {command.user_id} declining offer {command.offer_id}")
        user = _load_user(command.user_id)

        with DjangoUnitOfWork() as uow:
            offer = services.lock_offer(command.offer_id)
            _ensure_recipient(offer, user)
            offer.transition_to(Offer.Status.DECLINED)
            offer.save(update_fields=["status", "responded_at", "updated_at"])

            messaging.post_system_message(
                offer.conversation,
                user,
                f"Offer for {offer.date.isoformat()} declined.",
                {"offer_declined": True, "offer_id": offer.pk},
            )
            offer.add_event(OfferDeclined(
                aggregate_id=offer.pk,
                offer_id=offer.pk,
                declined_by_id=user.pk,
                sender_id=offer.from_user_id,
                date=offer.date,
            ))
            uow.collect_events(offer)

        return offer


class CounterOfferHandler:
    """
    Handler for CounterOffer command

    The original offer becomes COUNTERED and a new pending offer from the
    recipient points back to it through `parent`.
    """

    def handle(self, command: CounterOfferCommand) -> Offer:
        logger.info(f"User {command.user_id} countering offer {command.offer_id}")
        user = _load_user(command.user_id)

        with DjangoUnitOfWork() as uow:
            offer = services.lock_offer(command.offer_id)
            _ensure_recipient(offer, user)
            offer.transition_to(Offer.Status.COUNTERED)
            _validate_terms(command.terms)
            offer.save(update_fields=["status", "responded_at", "updated_at"])

            # The countered offer is no longer pending, so the date is free again
            _ensure_no_pending_offer(offer.conversation_id, command.terms.date)
            counter = _create_pending_offer(
                conversation=offer.conversation,
                from_user=user,
                date=command.terms.date,
                pay_amount=command.terms.pay_amount,
                set_count=command.terms.set_count,
                set_length_min=command.terms.set_length_min,
                other_terms=command.terms.other_terms,
                parent=offer,
            )
            messaging.post_system_message(
                offer.conversation,
                user,
                f"Counter-offer for {counter.date.isoformat()} sent.",
                {"offer_countered": True, "offer_id": counter.pk, "parent_offer_id": offer.pk},
            )
            offer.add_event(OfferCountered(
                aggregate_id=offer.pk,
                offer_id=offer.pk,
                counter_offer_id=counter.pk,
                countered_by_id=user.pk,
                sender_id=offer.from_user_id,
                date=counter.date,
            ))
            uow.collect_events(offer)

        logger.info(f"Offer {offer.pk} countered by offer {counter.pk}")
        return counter


class WithdrawOfferHandler:
    """Handler for WithdrawOffer command (sender only)"""

    def handle(self, command: WithdrawOfferCommand) -> Offer:
        logger.info(f"User {command.user_id} withdrawing offer {command.offer_id}")
        user = _load_user(command.user_id)

        with DjangoUnitOfWork() as uow:
            offer = services.lock_offer(command.offer_id)
            if offer.from_user_id != user.pk:
                raise PermissionViolation("Only the sender can withdraw this offer.")
            offer.transition_to(Offer.Status.WITHDRAWN)
            offer.save(update_fields=["status", "responded_at", "updated_at"])

            messaging.post_system_message(
                offer.conversation,
                user,
                f"Offer for {offer.date.isoformat()} withdrawn.",
                {"offer_withdrawn": True, "offer_id": offer.pk},
            )
            offer.add_event(OfferWithdrawn(
                aggregate_id=offer.pk,
                offer_id=offer.pk,
                withdrawn_by_id=user.pk,
                recipient_id=offer.recipient_id,
                date=offer.date,
            ))
            uow.collect_events(offer)

        return offer


# ===== Instant Gig Handlers =====

class PostInstantGigHandler:
    """Handler for PostInstantGig command"""

    def handle(self, command: PostInstantGigCommand) -> InstantGig:
        from apps.profiles.services import normalize_genres

        user = _load_user(command.user_id)
        if not user.role:
            raise PermissionViolation("Only artists and venues can post gigs.")
        if command.date < timezone.localdate():
            raise DomainError("The gig date cannot be in the past.", code="date_in_past")
        if command.pay_amount is None or command.pay_amount <= 0:
            raise DomainError("Pay must be greater than zero.", code="invalid_pay")
        if user.is_artist and services.artist_has_active_booking(user, command.date):
            raise services.BookingConflictError(
                f"You are already booked on {command.date.isoformat()}."
            )

        gig = InstantGig.objects.create(
            created_by=user,
            creator_role=user.role,
            date=command.date,
            pay_amount=command.pay_amount,
            genres=normalize_genres(command.genres),
            city=command.city.strip(),
            notes=command.notes,
        )
        logger.info(f"User {user.pk} ({user.role}) posted instant gig {gig.pk} for {gig.date}")
        return gig


class BookInstantGigHandler:
    """
    Handler for BookInstantGig command

    The gig row is locked so two bookers cannot both win it.
    """

    def handle(self, command: BookInstantGigCommand) -> Booking:
        logger.info(f"User {command.user_id} booking instant gig {command.gig_id}")
        booker = _load_user(command.user_id)

        with DjangoUnitOfWork() as uow:
            gig = services.lock_instant_gig(command.gig_id)
            if not gig.is_available():
                raise ConflictError("This gig is no longer available.", code="gig_unavailable")
            if booker.role == gig.creator_role or booker.pk == gig.created_by_id:
                raise PermissionViolation("You cannot book your own gig post.", code="own_gig")
            if not booker.role:
                raise PermissionViolation("Only artists and venues can book gigs.")

            creator = gig.created_by
            artist, venue = (booker, creator) if gig.creator_role == "venue" else (creator, booker)
            services.ensure_artist_is_free(artist, gig.date)

            gig.transition_to(InstantGig.Status.BOOKED)
            gig.booked_by = booker
            gig.booked_at = timezone.now()
            gig.save(update_fields=["status", "booked_by", "booked_at", "updated_at"])

            conversation = messaging.conversation_between(artist, venue)
            booking = services.create_booking(
                artist=artist,
                venue=venue,
                date=gig.date,
                agreed_pay=gig.pay_amount,
                other_terms=gig.notes,
                source=Booking.Source.INSTANT_GIG,
                instant_gig=gig,
                conversation=conversation,
            )
            services.reserve_availability_for_booking(booking, keep_gig_id=gig.pk)

            messaging.post_system_message(
                conversation,
                booker,
                f"Instant gig for {gig.date.isoformat()} booked. Booking confirmed.",
                {"instant_gig_booked": True, "booking_id": booking.pk, "gig_id": gig.pk},
            )

            gig.add_event(InstantGigBooked(
                aggregate_id=gig.pk,
                gig_id=gig.pk,
                booking_id=booking.pk,
                creator_id=creator.pk,
                booked_by_id=booker.pk,
                date=gig.date,
            ))
            booking.add_event(BookingConfirmed(
                aggregate_id=booking.pk,
                booking_id=booking.pk,
                artist_id=artist.pk,
                venue_id=venue.pk,
                date=booking.date,
                source=booking.source,
            ))
            uow.collect_events(gig)
            uow.collect_events(booking)

        logger.info(f"Instant gig {gig.pk} booked by {booker.pk}, booking {booking.pk}")
        return booking


class WithdrawInstantGigHandler:
    """Handler for WithdrawInstantGig command (creator only)"""

    def handle(self, command: WithdrawInstantGigCommand) -> InstantGig:
        with DjangoUnitOfWork():
            gig = services.lock_instant_gig(command.gig_id)
            if gig.created_by_id != command.user_id:
                raise PermissionViolation("Only the creator can withdraw this gig post.")
            gig.transition_to(InstantGig.Status.WITHDRAWN)
            gig.save(update_fields=["status", "updated_at"])

        logger.info(f"Instant gig {gig.pk} withdrawn by {command.user_id}")
        return gig


# ===== Booking Handlers =====

class CancelBookingHandler:
    """
    Handler for CancelBooking command

    The resulting status depends on who cancels. Both calendars get the
    date back.
    """

    def handle(self, command: CancelBookingCommand) -> Booking:
        logger.info(f"User {command.user_id} canceling booking {command.booking_id}")
        user = _load_user(command.user_id)

        with DjangoUnitOfWork() as uow:
            booking = services.lock_booking(command.booking_id)
            if not booking.is_participant(user):
                raise NotFound("Booking not found.")

            target = (
                Booking.Status.CANCELED_BY_VENUE
                if user.pk == booking.venue_id
                else Booking.Status.CANCELED_BY_ARTIST
            )
            booking.transition_to(target)
            if booking.date < timezone.localdate():
                raise DomainError("Past bookings cannot be canceled.", code="date_in_past")

            booking.cancellation_reason = command.reason
            booking.save(update_fields=["status", "cancellation_reason", "canceled_at", "updated_at"])
            services.release_availability_for_booking(booking)

            conversation = booking.conversation or services.conversation_for_booking(booking)
            messaging.post_system_message(
                conversation,
                user,
                f"Booking for {booking.date.isoformat()} canceled.",
                {"booking_canceled": True, "booking_id": booking.pk},
            )

            booking.add_event(BookingCanceled(
                aggregate_id=booking.pk,
                booking_id=booking.pk,
                canceled_by_id=user.pk,
                artist_id=booking.artist_id,
                venue_id=booking.venue_id,
                date=booking.date,
                status=booking.status,
                reason=command.reason,
            ))
            uow.collect_events(booking)

        logger.info(f"Booking {booking.pk} {booking.status}")
        return booking


class ReportNoShowHandler:
    """Handler for ReportNoShow command (the booking's venue, on or after the date)"""

    def handle(self, command: ReportNoShowCommand) -> Booking:
        logger.info(f"User {command.user_id} reporting no-show for booking {command.booking_id}")
        user = _load_user(command.user_id)

        with DjangoUnitOfWork() as uow:
            booking = services.lock_booking(command.booking_id)
            if not booking.is_participant(user):
                raise NotFound("Booking not found.")
            if booking.venue_id != user.pk:
                raise PermissionViolation("Only the venue can report a no-show.")
            booking.transition_to(Booking.Status.ARTIST_NO_SHOW)
            if booking.date > timezone.localdate():
                raise DomainError("A no-show can only be reported on or after the gig date.", code="date_in_future")
            booking.save(update_fields=["status", "updated_at"])

            from apps.profiles.models import ArtistProfile

            profile = ArtistProfile.objects.filter(user_id=booking.artist_id).first()
            if profile is not None:
                profile.record_no_show()

            booking.add_event(ArtistNoShowReported(
                aggregate_id=booking.pk,
                booking_id=booking.pk,
                artist_id=booking.artist_id,
                venue_id=booking.venue_id,
                date=booking.date,
            ))
            uow.collect_events(booking)

        logger.warning(f"Artist {booking.artist_id} reported as no-show for booking {booking.pk}")
        return booking


class CompleteBookingHandler:
    """Handler for CompleteBooking command (either participant, on or after the date)"""

    def handle(self, command: CompleteBookingCommand) -> Booking:
        user = _load_user(command.user_id)

        with DjangoUnitOfWork() as uow:
            booking = services.lock_booking(command.booking_id)
            if not booking.is_participant(user):
                raise NotFound("Booking not found.")
            booking.transition_to(Booking.Status.COMPLETED)
            if booking.date > timezone.localdate():
                raise DomainError("A booking can only be completed on or after the gig date.", code="date_in_future")
            booking.save(update_fields=["status", "completed_at", "updated_at"])

            booking.add_event(BookingCompleted(
                aggregate_id=booking.pk,
                booking_id=booking.pk,
                artist_id=booking.artist_id,
                venue_id=booking.venue_id,
                date=booking.date,
                completed_by_id=user.pk,
            ))
            uow.collect_events(booking)

        logger.info(f"Booking {booking.pk} marked complete by {user.pk}")
        return booking


HANDLERS = {
    SendOfferCommand: SendOfferHandler,
    AcceptOfferCommand: AcceptOfferHandler,
    DeclineOfferCommand: DeclineOfferHandler,
    CounterOfferCommand: CounterOfferHandler,
    WithdrawOfferCommand: WithdrawOfferHandler,
    PostInstantGigCommand: PostInstantGigHandler,
    BookInstantGigCommand: BookInstantGigHandler,
    WithdrawInstantGigCommand: WithdrawInstantGigHandler,
    CancelBookingCommand: CancelBookingHandler,
    ReportNoShowCommand: ReportNoShowHandler,
    CompleteBookingCommand: CompleteBookingHandler,
}


def register_handlers(bus: MessageBus) -> None:
    """Wire every booking command to its handler (called from AppConfig.ready)."""
    for command_type, handler_class in HANDLERS.items():
        if not bus.has_command_handler(command_type):
            bus.register_command_handler(command_type, handler_class().handle)
