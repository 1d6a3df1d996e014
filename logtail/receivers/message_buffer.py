import threading
from typing import Callable, List, Optional, Protocol

from logtail.models.log_record import LogRecord


class LogSink(Protocol):
    """Получатель пакетов сообщений от ресивера."""

    def handle_messages(self, records: List[LogRecord]) -> None:
        ...


class MessageBuffer:
    """
    Потокобезопасный накопитель сообщений.

    Ресивер вызывает `handle_messages` из потока наблюдателя, поэтому
    метод только сохраняет пакет и, при необходимости, передаёт его в
    колбэк `on_messages`. Остальные потоки читают накопленное
    свойством `messages` или ждут сообщений методом `wait_for()`.
    """

    def __init__(self, on_messages: Optional[Callable[[List[LogRecord]], None]] = None) -> None:
        self._messages: List[LogRecord] = []
        self._batches = 0
        self._on_messages = on_messages
        self._condition = threading.Condition()

    def handle_messages(self, records: List[LogRecord]) -> None:
        with self._condition:
            self._messages.extend(records)
            self._batches += 1
            self._condition.notify_all()
        if self._on_messages is not None:
            self._on_messages(list(records))

    @property
    def messages(self) -> List[LogRecord]:
        with self._condition:
            return list(self._messages)

    @property
    def batch_count(self) -> int:
        with self._condition:
            return self._batches

    def wait_for(self, count: int, timeout: float = 5.0) -> bool:
        """Ждёт, пока в буфере окажется не меньше `count` сообщений."""
        with self._condition:
            return self._condition.wait_for(lambda: len(self._messages) >= count, timeout)
