"""
Classification of response messages into errors and tick payloads.
"""

import logging
import math
from datetime import date, datetime
from typing import Any, Iterable, Iterator, Mapping, Union

from intraday_tick.exceptions import MalformedRecordError
from intraday_tick.models import DataPayload, ErrorNotification, Tick
from intraday_tick.transport import Message

logger = logging.getLogger(__name__)

TICK_DATA = "tickData"
TIME = "time"
TYPE = "type"
VALUE = "value"
TICK_SIZE = "size"
RESPONSE_ERROR = "responseError"
CATEGORY = "category"
MESSAGE = "message"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def decode_tick(record: Mapping[str, Any]) -> Tick:
    """
    Decode one tick record.

    Args:
        record: Mapping with time, type, value and size fields

    Returns:
        Parsed Tick

    Raises:
        MalformedRecordError: If a field is missing or has the wrong type
    """
    if not isinstance(record, Mapping):
        raise MalformedRecordError(f"Tick record must be a mapping, got {type(record).__name__}")

    missing = [name for name in (TIME, TYPE, VALUE, TICK_SIZE) if name not in record]
    if missing:
        raise MalformedRecordError(f"Tick record missing fields: {', '.join(missing)}")

    timestamp = record[TIME]
    if isinstance(timestamp, datetime):
        timestamp = timestamp.isoformat()
    if not isinstance(timestamp, str) or len(timestamp) < 10:
        raise MalformedRecordError(f"Invalid tick time: {record[TIME]!r}")
    try:
        date.fromisoformat(timestamp[:10])
    except ValueError:
        raise MalformedRecordError(f"Invalid tick date: {timestamp!r}")

    event_type = record[TYPE]
    if not isinstance(event_type, str):
        raise MalformedRecordError(f"Invalid tick type: {event_type!r}")

    value = record[VALUE]
    if not _is_number(value):
        raise MalformedRecordError(f"Invalid tick value: {value!r}")

    size = record[TICK_SIZE]
    if not isinstance(size, int) or isinstance(size, bool):
        raise MalformedRecordError(f"Invalid tick size: {size!r}")

    return Tick(timestamp=timestamp, event_type=event_type, value=float(value), size=size)


class ResponseClassifier:
    """Splits response messages into error notifications and tick payloads."""

    def __init__(self):
        self.records_skipped = 0

    def classify(self, message: Message) -> Union[ErrorNotification, DataPayload]:
        """
        Classify a response message.

        An error element short-circuits classification; no tick data is read
        from such a message.

        Args:
            message: Message delivered with a partial or final response

        Returns:
            ErrorNotification or DataPayload with a lazy tick iterator
        """
        if message.has_element(RESPONSE_ERROR):
            error = message.get_element(RESPONSE_ERROR)
            if not isinstance(error, Mapping):
                error = {MESSAGE: str(error)}
            return ErrorNotification(
                category=str(error.get(CATEGORY, "UNKNOWN")),
                message=str(error.get(MESSAGE, "")),
            )

        records = message.get_element(TICK_DATA) if message.has_element(TICK_DATA) else []
        return DataPayload(ticks=self._iter_ticks(records or []))

    def _iter_ticks(self, records: Iterable[Mapping[str, Any]]) -> Iterator[Tick]:
        for index, record in enumerate(records):
            try:
                yield decode_tick(record)
            except MalformedRecordError as e:
                self.records_skipped += 1
                logger.warning(f"Skipping malformed tick record #{index}: {e}")
