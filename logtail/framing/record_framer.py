"""
Разбиение потока текста на полные записи.

Данные из файла приходят кусками произвольной длины: запись может
оборваться посреди строки или даже посреди закрывающего тега. Фреймер
накапливает незавершённый хвост (`pending`) между вызовами и отдаёт
только полностью полученные записи.

Поддерживаются две стратегии:

* `TagRecordFramer` — запись заканчивается фиксированным маркером
  (например, ``</log4j:event>``). Переводы строк удаляются, так что
  XML-событие, записанное на нескольких строках, склеивается в одну строку.
* `LineRecordFramer` — каждая завершённая строка является записью
  (syslog и другие построчные форматы).
"""

from abc import ABC, abstractmethod
from typing import List


class RecordFramer(ABC):
    """Базовый класс фреймеров: хранит незавершённый хвост между вызовами."""

    def __init__(self) -> None:
        self._pending = ""

    @property
    def pending(self) -> str:
        """Текст, который ещё не сложился в полную запись."""
        return self._pending

    def reset(self) -> None:
        """Отбрасывает хвост; вызывается только при сбросе курсора."""
        self._pending = ""

    @abstractmethod
    def feed(self, text: str) -> List[str]:
        """
        Добавляет новый текст и возвращает полные записи в порядке появления.

        :param text: очередная порция декодированного текста.
        :return: список записей (возможно, пустой).
        """


class TagRecordFramer(RecordFramer):
    """
    Фреймер для форматов, где запись завершается маркером.

    Поиск маркера ординальный (посимвольное сравнение без учёта локали).
    После найденного маркера поиск продолжается с символа, следующего за
    ним, поэтому несколько событий в одной физической строке разбираются
    по отдельности.
    """

    def __init__(self, end_marker: str) -> None:
        super().__init__()
        if not end_marker:
            raise ValueError("Маркер конца записи не может быть пустым")
        self.end_marker = end_marker

    def feed(self, text: str) -> List[str]:
        # Строки склеиваются без символов перевода строки
        self._pending += text.replace("\r", "").replace("\n", "")

        records: List[str] = []
        while True:
            marker_pos = self._pending.find(self.end_marker)
            if marker_pos < 0:
                break
            record_end = marker_pos + len(self.end_marker)
            records.append(self._pending[:record_end])
            self._pending = self._pending[record_end:]
        return records


class LineRecordFramer(RecordFramer):
    """Фреймер для построчных форматов: одна строка — одна запись."""

    def feed(self, text: str) -> List[str]:
        data = self._pending + text
        lines = data.split("\n")
        # Последний элемент без перевода строки ждёт продолжения
        self._pending = lines.pop()

        records: List[str] = []
        for line in lines:
            line = line.rstrip("\r")
            if line.strip():
                records.append(line)
        return records
