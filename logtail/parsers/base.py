from abc import ABC, abstractmethod
from typing import Optional

from logtail.models.log_record import LogLevel, LogRecord


# Имена уровней, которые встречаются в log4net/NLog, syslog и текстовых логах
LEVEL_ALIASES = {
    "TRACE": LogLevel.TRACE,
    "VERBOSE": LogLevel.TRACE,
    "FINEST": LogLevel.TRACE,
    "DEBUG": LogLevel.DEBUG,
    "FINE": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "NOTICE": LogLevel.INFO,
    "WARN": LogLevel.WARNING,
    "WARNING": LogLevel.WARNING,
    "ERR": LogLevel.ERROR,
    "ERROR": LogLevel.ERROR,
    "SEVERE": LogLevel.ERROR,
    "FATAL": LogLevel.FATAL,
    "CRITICAL": LogLevel.FATAL,
    "EMERGENCY": LogLevel.FATAL,
}


def level_from_name(name: str) -> Optional[LogLevel]:
    """Возвращает уровень по имени (без учёта регистра) или None."""
    return LEVEL_ALIASES.get((name or "").strip().upper())


class MessageParser(ABC):
    """
    Преобразует одну выделенную фреймером запись в `LogRecord`.

    Парсер выбирается один раз при создании ресивера. Если запись не
    соответствует формату, `parse` возбуждает `MalformedRecordError`;
    ресивер пропускает такую запись, но её номер уже израсходован.
    """

    @abstractmethod
    def parse(self, raw_record: str, number: int) -> LogRecord:
        """Разбирает запись; `number` — уже выделенный порядковый номер."""

    @abstractmethod
    def matches_first_line(self, line: str) -> bool:
        """Быстрая проверка сигнатуры формата по первой строке файла."""
