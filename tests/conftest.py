"""
Shared pytest fixtures and configuration for all tests.
"""

from datetime import datetime

import pytest

from intraday_tick.config import TickClientConfig
from intraday_tick.models import TickRequest


@pytest.fixture
def config(tmp_path):
    """Client configuration writing into a temporary directory."""
    return TickClientConfig(_env_file=None, output_dir=tmp_path)


@pytest.fixture
def ibm_request():
    """Request from the scraper's usage example."""
    return TickRequest(
        security="IBM US Equity",
        start_datetime=datetime(2008, 8, 11, 15, 30, 0),
        end_datetime=datetime(2008, 8, 11, 15, 35, 0),
    )
