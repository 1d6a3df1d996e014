from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from logtail.models.log_record import LogLevel, LogLocation, LogRecord


def test_aware_timestamp_stored_as_local_time():
    aware = datetime(2025, 7, 22, 10, 0, tzinfo=timezone.utc)
    record = LogRecord(number=1, level=LogLevel.INFO, timestamp=aware, logger="app")
    assert record.timestamp.tzinfo is None
    assert record.timestamp == aware.astimezone().replace(tzinfo=None)

    naive = LogRecord(number=2, level=LogLevel.INFO, timestamp=datetime(2025, 7, 20), logger="app")
    # записи разных ресиверов сортируются вместе без TypeError
    ordered = sorted([record, naive], key=lambda r: r.timestamp)
    assert ordered == [naive, record]


def test_number_starts_at_one():
    with pytest.raises(ValidationError):
        LogRecord(number=0, level=LogLevel.INFO, timestamp=datetime(2025, 1, 1), logger="app")


def test_record_is_frozen():
    record = LogRecord(number=1, level=LogLevel.INFO, timestamp=datetime(2025, 1, 1), logger="app")
    with pytest.raises(ValidationError):
        record.message = "changed"


def test_location_text():
    assert str(LogLocation(class_name="A", method="b")) == "A.b"
    assert str(LogLocation(file="a.cs", line="3")) == "a.cs:3"
