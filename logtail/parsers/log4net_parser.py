"""
Парсер XML-событий log4net / NLog (схема log4j).

Каждая запись — это один элемент ``<log4j:event>``, например:

    <log4j:event logger="App.Program" timestamp="1420070400000" level="INFO" thread="1">
      <log4j:message>Started</log4j:message>
      <log4j:locationInfo class="App.Program" method="Main" file="Program.cs" line="12"/>
      <log4j:properties><log4j:data name="log4net:HostName" value="pc"/></log4j:properties>
    </log4j:event>

Фрагмент не объявляет пространства имён, поэтому перед разбором он
оборачивается в корневой элемент с объявлениями ``log4j`` и ``nlog``.
Элементы сравниваются по локальному имени, так что записи NLog с
собственными объявлениями пространств имён тоже разбираются.
"""

import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Dict

from logtail.models.errors import MalformedRecordError
from logtail.models.log_record import LogLocation, LogRecord
from logtail.parsers.base import MessageParser, level_from_name

LOG4J_EVENT_START = "<log4j:event"
LOG4J_EVENT_END = "</log4j:event>"

_WRAPPER_START = (
    '<logtail xmlns:log4j="http://jakarta.apache.org/log4j/" '
    'xmlns:nlog="http://nlog-project.org" '
    'xmlns:log4net="http://logging.apache.org/log4net/">'
)
_WRAPPER_END = "</logtail>"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


class Log4NetXmlParser(MessageParser):
    """Разбирает одно событие log4j-XML в `LogRecord`."""

    # Атрибуты, без которых событие считается повреждённым
    REQUIRED_ATTRIBUTES = ("logger", "timestamp", "level")

    def matches_first_line(self, line: str) -> bool:
        return bool(line) and LOG4J_EVENT_START in line

    def parse(self, raw_record: str, number: int) -> LogRecord:
        start = raw_record.find(LOG4J_EVENT_START)
        if start < 0:
            raise MalformedRecordError(f"Запись #{number}: не найден элемент {LOG4J_EVENT_START}")

        try:
            root = ET.fromstring(_WRAPPER_START + raw_record[start:] + _WRAPPER_END)
        except ET.ParseError as e:
            raise MalformedRecordError(f"Запись #{number}: некорректный XML ({e})") from e

        event = next((child for child in root if _local_name(child.tag) == "event"), None)
        if event is None:
            raise MalformedRecordError(f"Запись #{number}: элемент event отсутствует")

        missing = [name for name in self.REQUIRED_ATTRIBUTES if not event.get(name)]
        if missing:
            raise MalformedRecordError(
                f"Запись #{number}: отсутствуют атрибуты {', '.join(missing)}"
            )

        level = level_from_name(event.get("level"))
        if level is None:
            raise MalformedRecordError(f"Запись #{number}: неизвестный уровень {event.get('level')!r}")

        try:
            millis = int(event.get("timestamp"))
            timestamp = datetime.fromtimestamp(millis / 1000.0)
        except (ValueError, OverflowError, OSError) as e:
            raise MalformedRecordError(
                f"Запись #{number}: некорректная временная метка {event.get('timestamp')!r}"
            ) from e

        message = ""
        exception = None
        location = None
        custom_data: Dict[str, str] = {}

        for child in event:
            name = _local_name(child.tag)
            if name == "message":
                message = child.text or ""
            elif name == "throwable":
                exception = (child.text or "").strip() or None
            elif name == "locationInfo" and location is None:
                location = LogLocation(
                    class_name=child.get("class", ""),
                    method=child.get("method", ""),
                    file=child.get("file", ""),
                    line=child.get("line", ""),
                )
            elif name == "properties":
                for data in child:
                    if _local_name(data.tag) == "data" and data.get("name"):
                        custom_data[data.get("name")] = data.get("value", "")
            elif name == "NDC" and child.text:
                custom_data["NDC"] = child.text

        return LogRecord(
            number=number,
            level=level,
            timestamp=timestamp,
            logger=event.get("logger"),
            thread=event.get("thread", ""),
            message=message,
            location=location,
            custom_data=custom_data,
            exception=exception,
        )
