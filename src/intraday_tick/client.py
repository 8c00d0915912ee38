"""
Intraday tick client: connection bootstrap, request dispatch and run outcome.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from intraday_tick.classifier import ResponseClassifier
from intraday_tick.config import TickClientConfig
from intraday_tick.dates import compute_default_range
from intraday_tick.event_loop import EventLoop
from intraday_tick.exceptions import (
    LibraryFaultError,
    ServiceOpenError,
    SessionStartError,
)
from intraday_tick.models import TickRequest
from intraday_tick.sink import CsvSink
from intraday_tick.transport import TickSession

logger = logging.getLogger(__name__)

SessionFactory = Callable[[TickClientConfig], TickSession]


class RunStatus(Enum):
    OK = "ok"
    CONNECTION_ERROR = "connection_error"
    LIBRARY_FAULT = "library_fault"


@dataclass
class RunResult:
    """Outcome of one request/response exchange."""

    status: RunStatus
    ticks_written: int = 0
    files: List[Path] = field(default_factory=list)
    errors_reported: int = 0
    records_skipped: int = 0
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is RunStatus.OK


def utc_now() -> datetime:
    """Current GMT wall-clock time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def default_session_factory(config: TickClientConfig) -> TickSession:
    """Create a Bloomberg session for the configured host and port."""
    from intraday_tick.bloomberg import BloombergSession

    return BloombergSession(
        host=config.host, port=config.port, service=config.service, request_type=config.request_type
    )


class IntradayTickClient:
    """Client issuing a single intraday tick request and writing the ticks to CSV."""

    def __init__(
        self,
        config: Optional[TickClientConfig] = None,
        session_factory: Optional[SessionFactory] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the client.

        Args:
            config: Configuration instance, uses default if None
            session_factory: Builds the transport session, Bloomberg if None
            clock: Returns the current GMT time, used for the default range
        """
        self.config = config or TickClientConfig()
        self.session_factory = session_factory or default_session_factory
        self.clock = clock

    def resolve_request(self, request: TickRequest) -> TickRequest:
        """
        Fill in the default window when the request carries no date range.

        Raises:
            NoTradingDayFoundError: If no weekday is found within the lookback
        """
        if request.has_range:
            return request

        start, end = compute_default_range(
            self.clock(),
            lookback_days=self.config.lookback_days,
            window_start=self.config.window_start,
            window_end=self.config.window_end,
        )
        logger.info(f"No date range given, using default window {start.isoformat()} - {end.isoformat()}")
        return request.model_copy(update={"start_datetime": start, "end_datetime": end})

    def run(self, request: TickRequest) -> RunResult:
        """
        Connect, send the request and consume events until the exchange ends.

        Transport failures never propagate; they are reported and returned as
        the run status.

        Args:
            request: Tick request; the default window is applied if it has no range

        Returns:
            RunResult describing the outcome
        """
        request = self.resolve_request(request)
        sink = CsvSink(request.file_stem, output_dir=self.config.output_dir, write_header=self.config.write_header)
        loop = EventLoop(sink, ResponseClassifier())

        logger.info(f"Connecting to {self.config.host}:{self.config.port}")
        session = None
        started = False
        try:
            session = self.session_factory(self.config)
            if not session.start():
                raise SessionStartError("Failed to start session.")
            started = True

            if not session.open_service(self.config.service):
                raise ServiceOpenError(f"Failed to open {self.config.service}")

            logger.info(
                f"Sending Request: security={request.security} events={','.join(request.event_types)} "
                f"start={request.start_datetime.isoformat()} end={request.end_datetime.isoformat()}"
            )
            session.send_request(request)

            loop.run(session)
            return self._result(RunStatus.OK, sink, loop)

        except (SessionStartError, ServiceOpenError) as e:
            logger.error(str(e))
            return self._result(RunStatus.CONNECTION_ERROR, sink, loop, detail=str(e))
        except LibraryFaultError as e:
            logger.error(f"Library exception: {e}")
            return self._result(RunStatus.LIBRARY_FAULT, sink, loop, detail=str(e))
        except Exception as e:
            logger.error(f"Unexpected failure during tick request for {request.security}: {e}")
            logger.debug("Tick request error details", exc_info=True)
            return self._result(RunStatus.LIBRARY_FAULT, sink, loop, detail=str(e))
        finally:
            if started:
                self._stop(session)

    def _stop(self, session: TickSession) -> None:
        try:
            session.stop()
        except Exception as e:
            logger.warning(f"Error while stopping session: {e}")

    def _result(
        self,
        status: RunStatus,
        sink: CsvSink,
        loop: EventLoop,
        detail: Optional[str] = None,
    ) -> RunResult:
        return RunResult(
            status=status,
            ticks_written=sink.ticks_written,
            files=list(sink.files),
            errors_reported=loop.stats.errors_reported,
            records_skipped=loop.classifier.records_skipped,
            detail=detail,
        )
