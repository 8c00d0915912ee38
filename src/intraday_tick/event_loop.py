"""
Event loop driving one request/response exchange.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from intraday_tick.classifier import ResponseClassifier
from intraday_tick.models import ErrorNotification
from intraday_tick.sink import CsvSink
from intraday_tick.transport import Event, EventKind, MessageType, TickSession

logger = logging.getLogger(__name__)


class LoopState(Enum):
    RUNNING = "running"
    DONE = "done"


@dataclass
class LoopStats:
    events: int = 0
    ticks_written: int = 0
    errors_reported: int = 0
    records_skipped: int = 0


class EventLoop:
    """
    Two-state machine consuming session events until the exchange is over.

    Partial responses keep the loop running, a final response or a session
    termination ends it. Error messages inside a response are reported but
    never end the loop on their own.
    """

    def __init__(self, sink: CsvSink, classifier: Optional[ResponseClassifier] = None):
        self.sink = sink
        self.classifier = classifier or ResponseClassifier()
        self.state = LoopState.RUNNING
        self.stats = LoopStats()

    def run(self, session: TickSession) -> LoopStats:
        """
        Block on the session until the loop reaches DONE.

        The sink is prepared on entry and closed on exit, also when an
        exception escapes from the session.

        Args:
            session: Started session with the request already sent

        Returns:
            LoopStats for the exchange
        """
        with self.sink:
            while self.state is LoopState.RUNNING:
                event = session.next_event()
                self.state = self.handle_event(event)

        self.stats.ticks_written = self.sink.ticks_written
        self.stats.records_skipped = self.classifier.records_skipped
        logger.info(
            f"Exchange complete: {self.stats.ticks_written} ticks written, "
            f"{self.stats.errors_reported} errors, {self.stats.records_skipped} records skipped"
        )
        return self.stats

    def handle_event(self, event: Event) -> LoopState:
        """Process one event and return the next state."""
        self.stats.events += 1

        if event.kind is EventKind.PARTIAL_RESPONSE:
            logger.info("Processing Partial Response")
            self._process_response(event)
            return LoopState.RUNNING

        if event.kind is EventKind.RESPONSE:
            logger.info("Processing Response")
            self._process_response(event)
            return LoopState.DONE

        if event.kind is EventKind.SESSION_STATUS:
            for message in event:
                if message.message_type == MessageType.SESSION_TERMINATED:
                    logger.warning("Session terminated before the response completed")
                    return LoopState.DONE
                logger.debug(f"Session status: {message.message_type}")

        return LoopState.RUNNING

    def _process_response(self, event: Event) -> None:
        for message in event:
            result = self.classifier.classify(message)
            if isinstance(result, ErrorNotification):
                self.stats.errors_reported += 1
                logger.error(f"REQUEST FAILED: {result}")
                continue

            for tick in result.ticks:
                self.sink.write(tick)
