"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits; the
notifications app turns them into in-app notifications and emails.
"""

from dataclasses import dataclass
from datetime import date

from shared.domain.base import DomainEvent


# ===== Offer Events =====

@dataclass(kw_only=True)
class OfferSent(DomainEvent):
    """
    Event: A venue sent an offer (or a counter-offer was created)

    Triggers:
    - Notify the recipient
    """
    offer_id: int
    conversation_id: int
    from_user_id: int
    to_user_id: int
    date: date


@dataclass(kw_only=True)
class OfferAccepted(DomainEvent):
    """
    Event: The recipient accepted an offer (PENDING -> ACCEPTED)

    Triggers:
    - Notify the sender
    """
    offer_id: int
    booking_id: int
    accepted_by_id: int
    sender_id: int
    date: date


@dataclass(kw_only=True)
class OfferDeclined(DomainEvent):
    """Event: The recipient declined an offer (PENDING -> DECLINED)"""
    offer_id: int
    declined_by_id: int
    sender_id: int
    date: date


@dataclass(kw_only=True)
class OfferCountered(DomainEvent):
    """Event: The recipient replaced an offer with a counter-offer"""
    offer_id: int
    counter_offer_id: int
    countered_by_id: int
    sender_id: int
    date: date


@dataclass(kw_only=True)
class OfferWithdrawn(DomainEvent):
    """Event: The sender withdrew a pending offer"""
    offer_id: int
    withdrawn_by_id: int
    recipient_id: int
    date: date


# ===== Booking Events =====

@dataclass(kw_only=True)
class BookingConfirmed(DomainEvent):
    """
    Event: A booking was created in CONFIRMED state

    Triggers:
    - Confirmation email to both parties
    """
    booking_id: int
    artist_id: int
    venue_id: int
    date: date
    source: str


@dataclass(kw_only=True)
class BookingCanceled(DomainEvent):
    """
    Event: A participant canceled a confirmed booking

    Triggers:
    - In-app notification and email to the other party
    """
    booking_id: int
    canceled_by_id: int
    artist_id: int
    venue_id: int
    date: date
    status: str
    reason: str = ''


@dataclass(kw_only=True)
class BookingCompleted(DomainEvent):
    """Event: The gig took place (CONFIRMED -> COMPLETED)"""
    booking_id: int
    artist_id: int
    venue_id: int
    date: date
    completed_by_id: int | None = None


@dataclass(kw_only=True)
class ArtistNoShowReported(DomainEvent):
    """Event: The venue reported that the artist did not show up"""
    booking_id: int
    artist_id: int
    venue_id: int
    date: date


# ===== Instant Gig Events =====

@dataclass(kw_only=True)
class InstantGigBooked(DomainEvent):
    """
    Event: Someone booked an instant gig post

    Triggers:
    - Notify the creator of the post
    """
    gig_id: int
    booking_id: int
    creator_id: int
    booked_by_id: int
    date: date
