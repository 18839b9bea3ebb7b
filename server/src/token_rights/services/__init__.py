"""Services for Token Rights."""

from token_rights.services.event_log import EventLog, Subscriber

__all__ = [
    "EventLog",
    "Subscriber",
]
