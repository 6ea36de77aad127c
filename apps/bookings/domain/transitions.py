"""
Booking Domain State Machines

Allowed transitions for the three stateful records of the booking flow:

Offer:
- PENDING -> ACCEPTED (recipient accepted, booking created)
- PENDING -> DECLINED (recipient declined)
- PENDING -> COUNTERED (recipient replied with a new offer)
- PENDING -> WITHDRAWN (sender took it back)
- PENDING -> EXPIRED (date passed or the artist got booked elsewhere)

Instant gig:
- OPEN -> BOOKED | WITHDRAWN | EXPIRED

Booking:
- CONFIRMED -> COMPLETED | CANCELED_BY_VENUE | CANCELED_BY_ARTIST | ARTIST_NO_SHOW

Every state not listed as a source is terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from shared.domain.exceptions import InvalidTransition


@dataclass(frozen=True)
class StateMachine:
    name: str
    transitions: Mapping[str, frozenset] = field(default_factory=dict)

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.transitions.get(current, frozenset())

    def check(self, current: str, target: str) -> None:
        """Raise InvalidTransition unless current -> target is allowed."""
        if not self.can_transition(current, target):
            raise InvalidTransition(
                f"Cannot move {self.name} from {current} to {target}.",
                code=f"invalid_{self.name.replace(' ', '_')}_transition",
            )

    def is_terminal(self, state: str) -> bool:
        return not self.transitions.get(state)


OFFER_MACHINE = StateMachine(
    "offer",
    {
        "pending": frozenset({"accepted", "declined", "countered", "withdrawn", "expired"}),
    },
)

INSTANT_GIG_MACHINE = StateMachine(
    "instant gig",
    {
        "open": frozenset({"booked", "withdrawn", "expired"}),
    },
)

BOOKING_MACHINE = StateMachine(
    "booking",
    {
        "confirmed": frozenset(
            {"completed", "canceled_by_venue", "canceled_by_artist", "artist_no_show"}
        ),
    },
)
