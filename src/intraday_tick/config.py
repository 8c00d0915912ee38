"""
Intraday tick client configuration.
"""

from datetime import time
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings

from intraday_tick.models import DEFAULT_EVENT_TYPES


class TickClientConfig(BaseSettings):
    """Configuration for the intraday tick client."""

    host: str = Field(default="localhost", description="Server host of the tick data service")
    port: int = Field(default=8194, ge=1, le=65535, description="Server TCP port")
    service: str = Field(default="//blp/refdata", description="Service providing intraday tick requests")
    request_type: str = Field(default="IntradayTickRequest", description="Request operation name")
    output_dir: Path = Field(default=Path("."), description="Directory receiving the per-day CSV files")
    default_security: str = Field(default="IBM US Equity", description="Security used when none is given")
    default_event_types: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EVENT_TYPES), description="Event types requested when none are given"
    )
    lookback_days: int = Field(default=14, ge=1, description="Maximum days walked back for the default range")
    window_start: time = Field(default=time(15, 30, 0), description="Start of the default window (GMT)")
    window_end: time = Field(default=time(15, 35, 0), description="End of the default window (GMT)")
    write_header: bool = Field(default=False, description="Write TIME,TYPE,VALUE,SIZE to newly created files")
    log_level: str = Field(default="INFO", description="Logging level name")

    model_config = {
        "env_prefix": "INTRADAY_TICK_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
