"""
End-to-end runs of IntradayTickClient against scripted sessions.
"""

from datetime import datetime

import pytest

from intraday_tick.client import IntradayTickClient, RunStatus
from intraday_tick.exceptions import LibraryFaultError, NoTradingDayFoundError
from intraday_tick.models import TickRequest
from tests.utils.factories import TickRecordFactory
from tests.utils.fixtures import csv_files, read_lines
from tests.utils.mocks import (
    FakeSession,
    error_message,
    final_response,
    partial_response,
    session_status,
    tick_message,
)

pytestmark = pytest.mark.integration


def make_client(config, session, clock=None):
    kwargs = {"clock": clock} if clock else {}
    return IntradayTickClient(config, session_factory=lambda _config: session, **kwargs)


class TestScenarios:
    """Request/response exchanges from connect to DONE."""

    def test_two_days_two_files(self, config, ibm_request, tmp_path):
        session = FakeSession(
            [
                partial_response(
                    tick_message(
                        [
                            TickRecordFactory.create_record(time="2008-08-11T15:30:01", value=175.25, size=100),
                            TickRecordFactory.create_record(time="2008-08-11T15:30:02", value=175.5, size=200),
                        ]
                    )
                ),
                final_response(
                    tick_message(
                        [TickRecordFactory.create_record(time="2008-08-12T09:30:00", type="BID", value=176, size=300)]
                    )
                ),
            ]
        )

        result = make_client(config, session).run(ibm_request)

        assert result.status is RunStatus.OK
        assert result.ticks_written == 3
        assert csv_files(tmp_path) == ["IBM-US-Equity_2008-08-11.csv", "IBM-US-Equity_2008-08-12.csv"]
        assert read_lines(tmp_path / "IBM-US-Equity_2008-08-11.csv") == [
            "2008-08-11T15:30:01,TRADE,175.250,100",
            "2008-08-11T15:30:02,TRADE,175.500,200",
        ]
        assert read_lines(tmp_path / "IBM-US-Equity_2008-08-12.csv") == ["2008-08-12T09:30:00,BID,176.000,300"]
        assert session.events_delivered == 2
        assert session.stopped

    def test_error_response_writes_nothing(self, config, ibm_request, tmp_path, caplog):
        session = FakeSession([final_response(error_message("CATEGORY_ERROR", "bad request"))])

        with caplog.at_level("ERROR"):
            result = make_client(config, session).run(ibm_request)

        assert result.status is RunStatus.OK
        assert result.errors_reported == 1
        assert result.ticks_written == 0
        assert csv_files(tmp_path) == []
        assert "REQUEST FAILED: CATEGORY_ERROR (bad request)" in caplog.text

    def test_session_terminated_before_response(self, config, ibm_request, tmp_path):
        session = FakeSession([session_status("SessionTerminated")])

        result = make_client(config, session).run(ibm_request)

        assert result.status is RunStatus.OK
        assert result.ticks_written == 0
        assert result.files == []
        assert csv_files(tmp_path) == []
        assert session.stopped


    def test_bad_timestamp_does_not_stop_download(self, config, ibm_request, tmp_path):
        session = FakeSession(
            [
                partial_response(
                    tick_message(
                        [
                            TickRecordFactory.create_record(time="2008/08/11 15:30:01"),
                            TickRecordFactory.create_record(time="2008-08-11T15:30:02"),
                        ]
                    )
                ),
                final_response(tick_message([TickRecordFactory.create_record(time="2008-08-11T15:30:03")])),
            ]
        )

        result = make_client(config, session).run(ibm_request)

        assert result.status is RunStatus.OK
        assert result.ticks_written == 2
        assert result.records_skipped == 1
        assert csv_files(tmp_path) == ["IBM-US-Equity_2008-08-11.csv"]


class TestConnectionHandling:
    def test_session_start_failure(self, config, ibm_request):
        session = FakeSession(start_ok=False)

        result = make_client(config, session).run(ibm_request)

        assert result.status is RunStatus.CONNECTION_ERROR
        assert "Failed to start session" in result.detail
        assert session.requests == []
        assert not session.stopped

    def test_service_open_failure(self, config, ibm_request):
        session = FakeSession(open_ok=False)

        result = make_client(config, session).run(ibm_request)

        assert result.status is RunStatus.CONNECTION_ERROR
        assert session.opened_services == ["//blp/refdata"]
        assert session.requests == []
        assert session.stopped

    def test_library_fault_mid_stream(self, config, ibm_request, tmp_path):
        session = FakeSession(
            [partial_response(tick_message([TickRecordFactory.create_record()]))],
            raise_on_next=LibraryFaultError("connection lost"),
        )

        result = make_client(config, session).run(ibm_request)

        assert result.status is RunStatus.LIBRARY_FAULT
        assert result.ticks_written == 1
        assert len(read_lines(tmp_path / "IBM-US-Equity_2008-08-11.csv")) == 1
        assert session.stopped

    def test_unexpected_exception_reported_as_fault(self, config, ibm_request):
        session = FakeSession(raise_on_next=RuntimeError("boom"))

        result = make_client(config, session).run(ibm_request)

        assert result.status is RunStatus.LIBRARY_FAULT
        assert result.detail == "boom"

    def test_session_factory_failure(self, config, ibm_request):
        def factory(_config):
            raise LibraryFaultError("no native library")

        result = IntradayTickClient(config, session_factory=factory).run(ibm_request)
        assert result.status is RunStatus.LIBRARY_FAULT


class TestDefaultRange:
    def test_request_without_range_uses_previous_friday(self, config):
        session = FakeSession([final_response()])
        clock = lambda: datetime(2008, 8, 9, 12, 0)  # Saturday

        make_client(config, session, clock=clock).run(TickRequest(security="IBM US Equity"))

        [sent] = session.requests
        assert sent.start_datetime == datetime(2008, 8, 8, 15, 30)
        assert sent.end_datetime == datetime(2008, 8, 8, 15, 35)
        assert sent.event_types == ["TRADE", "BID", "ASK"]

    def test_explicit_range_untouched(self, config, ibm_request):
        client = make_client(config, FakeSession(), clock=lambda: datetime(2030, 1, 1))
        assert client.resolve_request(ibm_request) is ibm_request

    def test_no_weekday_in_lookback(self, config):
        config = config.model_copy(update={"lookback_days": 1})
        client = make_client(config, FakeSession(), clock=lambda: datetime(2008, 8, 10))
        with pytest.raises(NoTradingDayFoundError):
            client.run(TickRequest(security="IBM US Equity"))
