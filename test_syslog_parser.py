import os
from datetime import datetime, timedelta, timezone

import pytest

from logtail.models.errors import MalformedRecordError
from logtail.models.log_record import LogLevel
from logtail.parsers.syslog_parser import SyslogParser, _parse_timestamp

SAMPLE = os.path.join(os.path.dirname(__file__), "test_data", "syslog_sample.log")


def _sample_lines():
    with open(SAMPLE, "r", encoding="utf-8") as f:
        return [line for line in f.read().splitlines() if line]


def test_bsd_line_with_pri():
    record = SyslogParser().parse(_sample_lines()[0], 1)
    assert record.level == LogLevel.FATAL
    assert record.logger == "su"
    assert record.thread == "230"
    assert record.message == "'su root' failed for lonvick on /dev/pts/8"
    assert record.custom_data == {"Hostname": "mymachine", "Facility": "auth"}
    assert (record.timestamp.month, record.timestamp.day, record.timestamp.hour) == (10, 11, 22)
    now = datetime.now()
    assert record.timestamp.year in (now.year, now.year - 1)
    assert record.timestamp <= now + timedelta(days=1)


def test_tag_without_pid():
    record = SyslogParser().parse(_sample_lines()[1], 2)
    assert record.level == LogLevel.INFO
    assert record.logger == "nginx"
    assert record.thread == ""
    assert record.custom_data["Facility"] == "user"


def test_line_without_pri_defaults_to_info():
    record = SyslogParser().parse(_sample_lines()[2], 3)
    assert record.level == LogLevel.INFO
    assert "Facility" not in record.custom_data
    assert record.custom_data["Hostname"] == "web-01"


def test_iso_timestamp_converted_to_local_time():
    record = SyslogParser().parse(_sample_lines()[3], 4)
    expected = datetime(2025, 7, 22, 13, 17, 16, 212000, tzinfo=timezone(timedelta(hours=3)))
    assert record.timestamp == expected.astimezone().replace(tzinfo=None)
    assert record.timestamp.tzinfo is None
    assert record.custom_data["Facility"] == "local4"
    assert record.logger == "postgres"


def test_bsd_year_rolls_back_after_new_year():
    now = datetime(2026, 1, 1, 0, 5)
    assert _parse_timestamp("Dec 31 23:59:00", now) == datetime(2025, 12, 31, 23, 59)
    assert _parse_timestamp("Jan  1 00:04:00", now) == datetime(2026, 1, 1, 0, 4)


def test_bsd_small_clock_skew_keeps_current_year():
    now = datetime(2026, 6, 10, 12, 0)
    assert _parse_timestamp("Jun 10 18:00:00", now) == datetime(2026, 6, 10, 18, 0)


def test_bsd_february_29_uses_last_leap_year():
    assert _parse_timestamp("Feb 29 08:00:00", datetime(2026, 3, 1)) == datetime(2024, 2, 29, 8, 0)
    assert _parse_timestamp("Feb 29 08:00:00", datetime(2028, 3, 1)) == datetime(2028, 2, 29, 8, 0)


@pytest.mark.parametrize("raw", [
    "not a syslog line",
    "<200>Oct 11 22:14:15 host app: priority out of range",
    "<13>Foo 11 22:14:15 host app: unknown month",
    "<13>Feb 30 22:14:15 host app: no such day",
])
def test_malformed_lines(raw):
    with pytest.raises(MalformedRecordError):
        SyslogParser().parse(raw, 1)


def test_first_line_signature():
    parser = SyslogParser()
    assert parser.matches_first_line(_sample_lines()[0])
    assert not parser.matches_first_line('<log4j:event logger="A" timestamp="1" level="INFO">')
