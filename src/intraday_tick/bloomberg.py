"""
Bloomberg API session implementing the tick transport contract.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

import blpapi

from intraday_tick.exceptions import LibraryFaultError
from intraday_tick.models import TickRequest
from intraday_tick.transport import EventKind

logger = logging.getLogger(__name__)

TICK_DATA = blpapi.Name("tickData")

_EVENT_KINDS = {
    blpapi.Event.PARTIAL_RESPONSE: EventKind.PARTIAL_RESPONSE,
    blpapi.Event.RESPONSE: EventKind.RESPONSE,
    blpapi.Event.SESSION_STATUS: EventKind.SESSION_STATUS,
}


@contextmanager
def _library_call(action: str):
    try:
        yield
    except blpapi.Exception as e:
        raise LibraryFaultError(f"{action}: {e}") from e


def _element_to_py(element: "blpapi.Element") -> Any:
    if element.isArray():
        if element.isComplexType():
            return [_element_to_py(element.getValueAsElement(i)) for i in range(element.numValues())]
        return [element.getValue(i) for i in range(element.numValues())]
    if element.isComplexType():
        return {str(sub.name()): _element_to_py(sub) for sub in element.elements() if not sub.isNull()}
    return element.getValue()


class BloombergMessage:
    """Wraps a blpapi.Message, exposing elements as plain Python data."""

    def __init__(self, message: "blpapi.Message"):
        self._message = message

    @property
    def message_type(self) -> str:
        return str(self._message.messageType())

    def has_element(self, name: str) -> bool:
        return self._message.hasElement(blpapi.Name(name))

    def get_element(self, name: str) -> Any:
        with _library_call(f"reading element {name}"):
            element = self._message.getElement(blpapi.Name(name))
            # tick data arrives as tickData.tickData[]
            if element.name() == TICK_DATA and element.hasElement(TICK_DATA):
                element = element.getElement(TICK_DATA)
            return _element_to_py(element)


class BloombergEvent:
    def __init__(self, event: "blpapi.Event"):
        self._event = event

    @property
    def kind(self) -> EventKind:
        return _EVENT_KINDS.get(self._event.eventType(), EventKind.OTHER)

    def __iter__(self) -> Iterator[BloombergMessage]:
        for message in self._event:
            yield BloombergMessage(message)


class BloombergSession:
    """Session against a Bloomberg API endpoint (Desktop API or Server API)."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 8194,
        service: str = "//blp/refdata",
        request_type: str = "IntradayTickRequest",
    ):
        options = blpapi.SessionOptions()
        options.setServerHost(host)
        options.setServerPort(port)
        self.service = service
        self.request_type = request_type
        self._session = blpapi.Session(options)

    def start(self) -> bool:
        with _library_call("starting session"):
            return bool(self._session.start())

    def open_service(self, service: str) -> bool:
        with _library_call(f"opening {service}"):
            return bool(self._session.openService(service))

    def send_request(self, request: TickRequest) -> None:
        with _library_call("sending request"):
            service = self._session.getService(self.service)
            bbg_request = service.createRequest(self.request_type)

            # Only one security per request
            bbg_request.set("security", request.security)

            event_types = bbg_request.getElement("eventTypes")
            for event_type in request.event_types:
                event_types.appendValue(event_type)

            # All times are in GMT
            bbg_request.set("startDateTime", request.start_datetime)
            bbg_request.set("endDateTime", request.end_datetime)

            logger.debug(f"Bloomberg request: {bbg_request}")
            self._session.sendRequest(bbg_request)

    def next_event(self) -> BloombergEvent:
        with _library_call("waiting for event"):
            return BloombergEvent(self._session.nextEvent())

    def stop(self) -> None:
        with _library_call("stopping session"):
            self._session.stop()

