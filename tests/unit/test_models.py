"""
Unit tests for request and tick models.
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from intraday_tick.models import DEFAULT_EVENT_TYPES, ErrorNotification, Tick, TickRequest


@pytest.mark.unit
class TestTickRequest:
    """Test TickRequest validation."""

    def test_explicit_range_parsed_from_strings(self):
        request = TickRequest(
            security="IBM US Equity", start_datetime="2008-08-11T15:30:00", end_datetime="2008-08-11T15:35:00"
        )
        assert request.start_datetime == datetime(2008, 8, 11, 15, 30)
        assert request.end_datetime == datetime(2008, 8, 11, 15, 35)
        assert request.has_range

    def test_default_event_types(self):
        request = TickRequest(security="IBM US Equity")
        assert request.event_types == DEFAULT_EVENT_TYPES
        assert not request.has_range

    def test_empty_event_types_fall_back_to_defaults(self):
        request = TickRequest(security="IBM US Equity", event_types=["", "  "])
        assert request.event_types == ["TRADE", "BID", "ASK"]

    def test_custom_event_types_kept_in_order(self):
        request = TickRequest(security="IBM US Equity", event_types=["ASK", "TRADE"])
        assert request.event_types == ["ASK", "TRADE"]

    @pytest.mark.parametrize(
        "start,end",
        [("2008-08-11T15:30:00", None), (None, "2008-08-11T15:35:00")],
    )
    def test_only_one_bound_rejected(self, start, end):
        """Start and end must be given together."""
        with pytest.raises(ValidationError, match="together"):
            TickRequest(security="IBM US Equity", start_datetime=start, end_datetime=end)

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError, match="must be after"):
            TickRequest(
                security="IBM US Equity",
                start_datetime="2008-08-11T15:35:00",
                end_datetime="2008-08-11T15:30:00",
            )

    def test_blank_security_rejected(self):
        with pytest.raises(ValidationError):
            TickRequest(security="   ")

    def test_file_stem_replaces_spaces(self):
        assert TickRequest(security="IBM US Equity").file_stem == "IBM-US-Equity"

    def test_request_is_frozen(self):
        request = TickRequest(security="IBM US Equity")
        with pytest.raises(ValidationError):
            request.security = "MSFT US Equity"


@pytest.mark.unit
class TestTick:
    def test_date_is_day_portion(self):
        tick = Tick(timestamp="2008-08-12T09:00:00.123", event_type="BID", value=1.0, size=1)
        assert tick.date == "2008-08-12"

    def test_error_notification_str(self):
        assert str(ErrorNotification("CATEGORY_ERROR", "bad request")) == "CATEGORY_ERROR (bad request)"
