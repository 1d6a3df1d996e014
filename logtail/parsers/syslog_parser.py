"""
Парсер строк syslog (RFC 3164).

Формат строки:

    [<PRI>]TIMESTAMP HOSTNAME TAG[PID]: MESSAGE

Временная метка — либо классическая BSD (``Jan  5 12:00:01``, год не
указывается: берётся ближайший год, при котором метка не оказывается
в будущем более чем на сутки), либо ISO 8601, которую пишет rsyslog в
режиме высокой точности (``2024-01-15T12:00:00.123456+00:00``). Из PRI
вычисляются facility и severity; если PRI отсутствует (так выглядят
файлы в /var/log), уровень считается INFO.
"""

import re
from datetime import datetime, timedelta

from logtail.models.errors import MalformedRecordError
from logtail.models.log_record import LogLevel, LogRecord
from logtail.parsers.base import MessageParser

SYSLOG_PATTERN = re.compile(
    r'^(?:<(?P<pri>\d{1,3})>)?'
    r'(?P<timestamp>[A-Z][a-z]{2}\s+\d{1,2}\s\d{2}:\d{2}:\d{2}'
    r'|\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:?\d{2})?)\s+'
    r'(?P<host>\S+)\s+'
    r'(?P<tag>[^\s:\[]+)(?:\[(?P<pid>[^\]]*)\])?:\s?'
    r'(?P<message>.*)$'
)

# Насколько метка без года может опережать текущее время
MAX_CLOCK_SKEW = timedelta(days=1)

# Severity 0..7 из RFC 5424
SEVERITY_LEVELS = {
    0: LogLevel.FATAL,    # emergency
    1: LogLevel.FATAL,    # alert
    2: LogLevel.FATAL,    # critical
    3: LogLevel.ERROR,
    4: LogLevel.WARNING,
    5: LogLevel.INFO,     # notice
    6: LogLevel.INFO,
    7: LogLevel.DEBUG,
}

FACILITY_NAMES = (
    "kern", "user", "mail", "daemon", "auth", "syslog", "lpr", "news",
    "uucp", "cron", "authpriv", "ftp", "ntp", "security", "console", "solaris-cron",
    "local0", "local1", "local2", "local3", "local4", "local5", "local6", "local7",
)


def _parse_timestamp(text: str, now: datetime) -> datetime:
    if text[0].isdigit():
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    # BSD-метка не содержит года, двойной пробел перед однозначным днём
    normalized = " ".join(text.split())
    # Ближайший подходящий год; 29 февраля есть не в каждом году
    for year in range(now.year, now.year - 8, -1):
        try:
            timestamp = datetime.strptime(f"{year} {normalized}", "%Y %b %d %H:%M:%S")
        except ValueError:
            continue
        if timestamp - now <= MAX_CLOCK_SKEW:
            return timestamp
    raise ValueError(f"Некорректная BSD-метка времени: {text!r}")


class SyslogParser(MessageParser):
    """Разбирает одну строку syslog в `LogRecord`."""

    def matches_first_line(self, line: str) -> bool:
        return bool(line) and SYSLOG_PATTERN.match(line.strip()) is not None

    def parse(self, raw_record: str, number: int) -> LogRecord:
        line = raw_record.strip()
        match = SYSLOG_PATTERN.match(line)
        if not match:
            raise MalformedRecordError(f"Запись #{number}: строка не соответствует формату syslog")

        custom_data = {"Hostname": match.group("host")}
        level = LogLevel.INFO
        if match.group("pri") is not None:
            pri = int(match.group("pri"))
            if pri > 191:
                raise MalformedRecordError(f"Запись #{number}: недопустимое значение PRI {pri}")
            facility, severity = divmod(pri, 8)
            level = SEVERITY_LEVELS[severity]
            custom_data["Facility"] = FACILITY_NAMES[facility]

        try:
            timestamp = _parse_timestamp(match.group("timestamp"), datetime.now())
        except ValueError as e:
            raise MalformedRecordError(
                f"Запись #{number}: некорректная временная метка {match.group('timestamp')!r}"
            ) from e

        return LogRecord(
            number=number,
            level=level,
            timestamp=timestamp,
            logger=match.group("tag"),
            thread=match.group("pid") or "",
            message=match.group("message"),
            custom_data=custom_data,
        )
