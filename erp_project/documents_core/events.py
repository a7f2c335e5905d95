"""
Document lifecycle events.

Services only depend on the `EventPublisher` protocol: one
`publish(event_name, payload)` call per lifecycle change, issued after
the write has committed. The default publisher fans events out through
the `document_event` Django signal; subscribers live in `signals.py`.
"""
import logging
from typing import Protocol

from django.dispatch import Signal

logger = logging.getLogger(__name__)

CREATED = "created"
EDITED = "edited"
DELETED = "deleted"
DELIVERED = "delivered"
OPENED = "opened"


def event_name(resource, action):
    # e.g. "sale_estimate.created"
    return f"{resource}.{action}"


# Receivers get: sender (resource name), event_name and the payload keys
# tenant_id, id, document and (on edit) old_document.
document_event = Signal()


class EventPublisher(Protocol):
    def publish(self, event_name: str, payload: dict) -> None:
        ...


class SignalEventPublisher:
    """Deliver events to every `document_event` receiver."""

    def __init__(self, signal=document_event):
        self.signal = signal

    def publish(self, event_name, payload):
        resource = event_name.split(".", 1)[0]
        responses = self.signal.send_robust(
            sender=resource, event_name=event_name, **payload
        )
        # A failing subscriber never reaches the caller
        for receiver, response in responses:
            if isinstance(response, Exception):
                logger.error(
                    "[events] subscriber failed.",
                    exc_info=response,
                    extra={"event_name": event_name, "receiver": repr(receiver)},
                )


class RecordingEventPublisher:
    """Keeps published events in memory, handy for tests and scripts."""

    def __init__(self):
        self.events = []

    def publish(self, event_name, payload):
        self.events.append((event_name, payload))

    def names(self):
        return [name for name, _ in self.events]
