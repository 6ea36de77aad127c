"""
Unit of Work

One database transaction around a booking operation. Aggregates (offers,
gigs, bookings) record domain events while they change state; the unit of
work gathers them and hands them to the message bus only once the
transaction has committed. A rollback drops them.
"""

from typing import List
import logging

from django.db import transaction  # type: ignore

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork:
    """
    Usage:
        with DjangoUnitOfWork() as uow:
            offer = lock_offer(offer_id)
            offer.transition_to(Offer.Status.ACCEPTED)
            offer.save(update_fields=["status"])
            uow.collect_events(offer, booking)
        # subscribers run here, after COMMIT

    Nested inside an outer `atomic` block the events wait for the outermost
    commit, as `transaction.on_commit` does.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self._atomic = transaction.atomic()

    def __enter__(self):
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self._schedule_publish()
        elif self._events:
            logger.warning(f"Rolled back, dropping {len(self._events)} events ({exc_type.__name__})")
            self._events = []
        return self._atomic.__exit__(exc_type, exc_val, exc_tb)

    def collect_events(self, *aggregates):
        """Move recorded events from the aggregates into this unit of work."""
        for aggregate in aggregates:
            recorded = getattr(aggregate, 'events', None)
            if not recorded:
                continue
            self._events.extend(recorded)
            aggregate.clear_events()
            logger.debug(f"Collected {len(recorded)} events from {type(aggregate).__name__} {aggregate.pk}")

    def _schedule_publish(self):
        if not self._events:
            return
        events, self._events = self._events, []
        transaction.on_commit(lambda: _publish(events))


def _publish(events: List[DomainEvent]):
    from shared.application.message_bus import message_bus

    logger.info(f"Publishing {len(events)} domain events after commit")
    try:
        message_bus.publish_events(events)
    except Exception as e:
        # The data is committed; a delivery failure must not surface to the caller
        logger.error(f"Error publishing events: {e}", exc_info=True)
