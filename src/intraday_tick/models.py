"""
Data models for intraday tick requests and responses.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_EVENT_TYPES = ["TRADE", "BID", "ASK"]


class Tick(BaseModel):
    """A single timestamped trade or quote observation."""

    model_config = ConfigDict(frozen=True)

    timestamp: str = Field(..., description="Tick time in GMT, ISO-8601 like")
    event_type: str = Field(..., description="Tick category, e.g. TRADE, BID or ASK")
    value: float = Field(..., description="Price")
    size: int = Field(..., description="Quantity")

    @property
    def date(self) -> str:
        """Calendar day of the tick as YYYY-MM-DD."""
        return self.timestamp[:10]


class TickRequest(BaseModel):
    """Request parameters for an intraday tick download."""

    model_config = ConfigDict(frozen=True)

    # Only one security per request
    security: str = Field(..., description="Security identifier, e.g. 'IBM US Equity'")
    event_types: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EVENT_TYPES), description="Event types to request"
    )
    start_datetime: Optional[datetime] = Field(None, description="Range start in GMT")
    end_datetime: Optional[datetime] = Field(None, description="Range end in GMT")

    @field_validator("security")
    @classmethod
    def validate_security(cls, v: str) -> str:
        """Reject blank security identifiers."""
        v = v.strip()
        if not v:
            raise ValueError("security must not be empty")
        return v

    @field_validator("event_types")
    @classmethod
    def validate_event_types(cls, v: List[str]) -> List[str]:
        """Fall back to TRADE/BID/ASK when no event type is given."""
        cleaned = [event.strip() for event in v if event and event.strip()]
        return cleaned or list(DEFAULT_EVENT_TYPES)

    @model_validator(mode="after")
    def validate_date_range(self) -> "TickRequest":
        """Require start and end together, in order."""
        if (self.start_datetime is None) != (self.end_datetime is None):
            raise ValueError("start_datetime and end_datetime must be given together or not at all")

        if self.start_datetime is None:
            return self

        try:
            in_order = self.end_datetime > self.start_datetime
        except TypeError:
            raise ValueError("start_datetime and end_datetime must both carry a timezone or both be naive")
        if not in_order:
            raise ValueError(
                f"end_datetime {self.end_datetime.isoformat()} must be after "
                f"start_datetime {self.start_datetime.isoformat()}"
            )
        return self

    @property
    def has_range(self) -> bool:
        return self.start_datetime is not None

    @property
    def file_stem(self) -> str:
        """Security with spaces replaced by dashes, used in output file names."""
        return self.security.replace(" ", "-")


@dataclass(frozen=True)
class ErrorNotification:
    """Error element reported by the service on a response message."""

    category: str
    message: str

    def __str__(self) -> str:
        return f"{self.category} ({self.message})"


@dataclass
class DataPayload:
    """Tick data carried by a response message.

    ``ticks`` is a one-shot iterator; records are decoded as it is consumed.
    """

    ticks: Iterator[Tick]
