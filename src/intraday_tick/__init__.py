"""
Intraday tick data retrieval: one request, a stream of response events, per-day CSV output.
"""

from intraday_tick.client import IntradayTickClient, RunResult, RunStatus
from intraday_tick.config import TickClientConfig
from intraday_tick.models import Tick, TickRequest

__version__ = "0.1.0"

__all__ = [
    "IntradayTickClient",
    "RunResult",
    "RunStatus",
    "TickClientConfig",
    "Tick",
    "TickRequest",
]
