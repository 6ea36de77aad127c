"""
Message Bus

Routes marketplace commands (send offer, book gig, cancel booking, ...) to
the one handler registered for them, and domain events to any number of
subscribers. Apps register their handlers in `AppConfig.ready()`, so the
bookings app never imports notifications directly.
"""

from typing import Any, Callable, Dict, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """
    Commands: exactly one handler each, the handler's result is returned.
    Events: zero or more subscribers, failures are logged and skipped.
    """

    def __init__(self):
        self._command_handlers: Dict[Type, Callable[[Any], Any]] = {}
        self._event_handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    # ----- commands -----

    def register_command_handler(self, command_type: Type, handler: Callable[[Any], Any]):
        if command_type in self._command_handlers:
            raise ValueError(f"{command_type.__name__} already has a handler")
        self._command_handlers[command_type] = handler
        logger.debug(f"Registered command handler for {command_type.__name__}")

    def has_command_handler(self, command_type: Type) -> bool:
        return command_type in self._command_handlers

    def handle_command(self, command: Any) -> Any:
        """
        Run the command's handler and return its result.

        Domain errors raised by the handler propagate to the caller (the API
        layer turns them into responses).
        """
        name = type(command).__name__
        handler = self._command_handlers.get(type(command))
        if handler is None:
            raise ValueError(f"No handler registered for command {name}")

        logger.info(f"Handling command: {name}")
        try:
            return handler(command)
        except Exception as e:
            logger.warning(f"Command {name} rejected: {e}")
            raise

    # ----- events -----

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        """Subscribe a handler. Subscribing the same handler twice is a no-op."""
        handlers = self._event_handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug(f"Subscribed {getattr(handler, '__name__', handler)} to {event_type.__name__}")

    def unregister_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        handlers = self._event_handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish_events(self, events: List[DomainEvent]):
        """Deliver each event to its subscribers, in subscription order."""
        for event in events:
            event_name = type(event).__name__
            handlers = list(self._event_handlers.get(type(event), []))
            if not handlers:
                logger.debug(f"Nobody subscribed to {event_name}")
                continue

            logger.info(f"Publishing {event_name} for aggregate {event.aggregate_id} ({event.event_id})")
            for handler in handlers:
                handler_name = getattr(handler, '__name__', repr(handler))
                try:
                    handler(event)
                except Exception as e:
                    logger.error(f"Subscriber {handler_name} failed on {event_name}: {e}", exc_info=True)


# Process-wide bus used by views, tasks and app configs
message_bus = MessageBus()
