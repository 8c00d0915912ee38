"""
Session contract consumed by the event loop and the client.

Any transport (the Bloomberg adapter, test fakes) only has to satisfy these
protocols.
"""

from enum import Enum
from typing import Any, Iterator, Protocol

from intraday_tick.models import TickRequest


class EventKind(Enum):
    PARTIAL_RESPONSE = "partial_response"
    RESPONSE = "response"
    SESSION_STATUS = "session_status"
    OTHER = "other"


class MessageType(str, Enum):
    """Stable identifiers for session-status messages."""

    SESSION_STARTED = "SessionStarted"
    SESSION_TERMINATED = "SessionTerminated"
    SESSION_STARTUP_FAILURE = "SessionStartupFailure"
    SESSION_CONNECTION_DOWN = "SessionConnectionDown"


class Message(Protocol):
    @property
    def message_type(self) -> str:
        """Name of the message, e.g. 'IntradayTickResponse' or 'SessionTerminated'."""
        ...

    def has_element(self, name: str) -> bool:
        """Returns True when the message carries a top-level element called ``name``."""
        ...

    def get_element(self, name: str) -> Any:
        """Returns the element value as plain Python data (mapping, sequence or scalar)."""
        ...


class Event(Protocol):
    @property
    def kind(self) -> EventKind:
        ...

    def __iter__(self) -> Iterator[Message]:
        """Iterates over the messages delivered with this event."""
        ...


class TickSession(Protocol):
    def start(self) -> bool:
        """Starts the session; returns False when it could not be started."""
        ...

    def open_service(self, service: str) -> bool:
        """Opens a service; returns False when it could not be opened."""
        ...

    def send_request(self, request: TickRequest) -> None:
        """Sends the intraday tick request built from ``request``."""
        ...

    def next_event(self) -> Event:
        """Blocks until the next event arrives."""
        ...

    def stop(self) -> None:
        ...
