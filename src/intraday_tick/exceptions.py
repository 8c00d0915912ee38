"""Custom exceptions for the intraday_tick package."""


class IntradayTickError(Exception):
    """Base class for all intraday_tick errors."""

    pass


class ConfigurationError(IntradayTickError, ValueError):
    """Raised when request parameters are inconsistent or incomplete."""

    pass


class NoTradingDayFoundError(IntradayTickError):
    """Raised when no weekday is found within the lookback window."""

    pass


class MalformedRecordError(IntradayTickError):
    """Raised when a tick record is missing a field or carries the wrong type."""

    pass


class TransportError(IntradayTickError):
    """Base class for failures coming from the session layer."""

    pass


class SessionStartError(TransportError):
    """Raised when the session cannot be started."""

    pass


class ServiceOpenError(TransportError):
    """Raised when the reference data service cannot be opened."""

    pass


class LibraryFaultError(TransportError):
    """Raised when the underlying market data library throws."""

    pass
