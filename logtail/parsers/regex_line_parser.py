"""
    Парсер текстовых логов с настраиваемым регулярным выражением.

    Используется пользовательским ресивером: каждая строка файла
    сопоставляется с шаблоном, а именованные группы шаблона становятся
    полями `LogRecord`. Поддерживаемые группы: ``timestamp``, ``level``,
    ``thread``, ``logger`` (или ``class``) и ``message``; обязательна
    только ``message``.
    """

import re
from datetime import datetime

from logtail.models.errors import MalformedRecordError
from logtail.models.log_record import LogLevel, LogRecord
from logtail.parsers.base import MessageParser, level_from_name

# Шаблон по умолчанию (временная метка, уровень, поток, класс и сообщение).
#
# Уровень логирования может быть указан как [ERROR] либо без квадратных скобок. В качестве
# разделителя между именем класса и сообщением допускаются двоеточие и дефис, а пробелы
# вокруг разделителя игнорируются. Это позволяет корректно распарсить строки вида
#     2025-07-22 13:17:16,212 ERROR [main] f.configuration - сообщение
#     2025-07-22 13:17:16,212 [ERROR] [main] f.configuration: сообщение
DEFAULT_LINE_PATTERN = (
    r'^(?P<timestamp>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2},\d{3})\s+'
    r'(?:\[)?(?P<level>[A-Z]+)(?:\])?\s+'
    r'\[(?P<thread>[^\]]+)\]\s+'
    r'(?P<logger>[^:\-]+?)\s*[:\-]\s*(?P<message>.+)$'
)

DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S,%f"


class RegexLineParser(MessageParser):
    """
    Разбирает строку лога по регулярному выражению.

    :param pattern: регулярное выражение с именованными группами;
    :param timestamp_format: формат `strptime` для группы ``timestamp``.
    :raises ValueError: если шаблон некорректен или не содержит группы ``message``.
    """

    def __init__(self, pattern: str = DEFAULT_LINE_PATTERN,
                 timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT) -> None:
        try:
            self.pattern = re.compile(pattern)
        except re.error as e:
            raise ValueError(f"Некорректное регулярное выражение: {e}") from e
        if "message" not in self.pattern.groupindex:
            raise ValueError("Шаблон должен содержать именованную группу 'message'")
        self.timestamp_format = timestamp_format

    def matches_first_line(self, line: str) -> bool:
        return bool(line) and self.pattern.match(line.strip()) is not None

    def parse(self, raw_record: str, number: int) -> LogRecord:
        # Удаляем пробелы в начале и в конце строки
        line = raw_record.strip()
        match = self.pattern.match(line)
        if not match:
            raise MalformedRecordError(f"Запись #{number}: строка не соответствует шаблону")
        groups = match.groupdict()

        level = LogLevel.INFO
        if groups.get("level"):
            level = level_from_name(groups["level"])
            if level is None:
                raise MalformedRecordError(f"Запись #{number}: неизвестный уровень {groups['level']!r}")

        # Без группы timestamp время записи неизвестно, используем время чтения
        timestamp = datetime.now()
        if groups.get("timestamp"):
            try:
                timestamp = datetime.strptime(groups["timestamp"], self.timestamp_format)
            except ValueError as e:
                raise MalformedRecordError(
                    f"Запись #{number}: некорректная временная метка {groups['timestamp']!r}"
                ) from e

        return LogRecord(
            number=number,
            level=level,
            timestamp=timestamp,
            logger=(groups.get("logger") or groups.get("class") or "").strip(),
            thread=(groups.get("thread") or "").strip(),
            message=groups["message"].strip(),
        )
