import os
from datetime import datetime

import pytest

from logtail.models.errors import MalformedRecordError
from logtail.models.log_record import LogLevel
from logtail.parsers.regex_line_parser import RegexLineParser

SAMPLE = os.path.join(os.path.dirname(__file__), "test_data", "custom_sample.log")


def _sample_lines():
    with open(SAMPLE, "r", encoding="utf-8") as f:
        return f.read().splitlines()


def test_default_pattern_bracketed_level():
    record = RegexLineParser().parse(_sample_lines()[0], 1)
    assert record.level == LogLevel.ERROR
    assert record.timestamp == datetime(2025, 7, 22, 13, 17, 16, 212000)
    assert record.thread == "main"
    assert record.logger == "f.configuration"
    assert record.message == "Не удалось загрузить конфигурацию"


def test_default_pattern_dash_separator():
    record = RegexLineParser().parse(_sample_lines()[1], 2)
    assert record.level == LogLevel.INFO
    assert record.logger == "o.a.h.c.Server"
    assert record.message == "Сервер запущен на порту 8080"


def test_line_not_matching_is_malformed():
    with pytest.raises(MalformedRecordError):
        RegexLineParser().parse(_sample_lines()[2], 3)


def test_custom_pattern_with_class_group():
    parser = RegexLineParser(r"^(?P<level>\w+)\|(?P<class>[\w.]+)\|(?P<message>.*)$")
    record = parser.parse("warn|Billing.Invoice|late payment", 7)
    assert record.level == LogLevel.WARNING
    assert record.logger == "Billing.Invoice"
    assert record.message == "late payment"


def test_unknown_level_is_malformed():
    parser = RegexLineParser(r"^(?P<level>\w+) (?P<message>.*)$")
    with pytest.raises(MalformedRecordError):
        parser.parse("LOUD something happened", 1)


def test_invalid_patterns_rejected():
    with pytest.raises(ValueError):
        RegexLineParser(r"(?P<message>.*")
    with pytest.raises(ValueError):
        RegexLineParser(r"^(?P<text>.*)$")
