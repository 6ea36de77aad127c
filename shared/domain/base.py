"""
Domain building blocks shared by the apps

- ValueObject: immutable, compared by value (search criteria, match scores)
- EventRecorder: mixin letting a Django model record domain events
- DomainEvent: something that happened to an offer, gig or booking
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from django.utils import timezone  # type: ignore


@dataclass(frozen=True)
class ValueObject(ABC):
    """Base for frozen dataclasses without identity."""


class EventRecorder:
    """
    Mixin for aggregate models

    State-changing code calls `add_event`; `DjangoUnitOfWork.collect_events`
    drains the list and publishes it after commit. Events live on the Python
    instance only, a fresh instance loaded from the database has none.
    """

    def _pending_events(self) -> List['DomainEvent']:
        if not hasattr(self, '_recorded_events'):
            self._recorded_events: List[DomainEvent] = []
        return self._recorded_events

    def add_event(self, event: 'DomainEvent'):
        self._pending_events().append(event)

    def clear_events(self):
        self._pending_events().clear()

    @property
    def events(self) -> List['DomainEvent']:
        return list(self._pending_events())


@dataclass(kw_only=True)
class DomainEvent:
    """
    Base for domain events

    `aggregate_id` is the primary key of the offer, gig or booking the
    event is about.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=timezone.now)
    aggregate_id: Optional[int] = None
