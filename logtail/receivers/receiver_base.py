"""
Общий жизненный цикл ресиверов.

Каждый ресивер проходит состояния

    UNINITIALIZED → ACTIVE ⇄ INACTIVE → SHUTTING_DOWN → CLOSED

владеет одной подпиской на изменения файловой системы и передаёт
разобранные сообщения получателю (`LogSink`). Обработка событий одного
ресивера сериализуется блокировкой: курсор и фреймер не рассчитаны на
одновременное изменение из нескольких потоков.
"""

import logging
import os
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Iterable, List, Optional

from logtail.export.csv_exporter import CsvExporter
from logtail.layout.layout_store import JsonLayoutStore, LayoutStore
from logtail.models.errors import MalformedRecordError
from logtail.models.log_record import LogRecord
from logtail.parsers.base import MessageParser
from logtail.receivers.message_buffer import LogSink
from logtail.receivers.watch_subscription import WatchSubscription
from logtail.settings import get_layout_file

logger = logging.getLogger(__name__)


class ReceiverState(Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    INACTIVE = "inactive"
    SHUTTING_DOWN = "shutting_down"
    CLOSED = "closed"


class ReceiverBase(ABC):
    """
    Базовый класс ресиверов.

    Наследники реализуют открытие и закрытие источника (`_open_source`,
    `_close_source`), обработку событий файловой системы и проверку
    `can_handle_source`. Базовый класс отвечает за состояние, подписку,
    нумерацию сообщений и доставку пакетов получателю.
    """

    name = "Receiver"
    layout_key = "receiver"

    # Столбцы, которые отображает интерфейс (номер → заголовок)
    COLUMNS: Dict[int, str] = {
        0: "Number",
        1: "Level",
        2: "Timestamp",
        3: "Logger",
        4: "Thread",
        5: "Message",
    }

    def __init__(self, parser: MessageParser, layout_store: Optional[LayoutStore] = None) -> None:
        self._parser = parser
        self._layout_store = layout_store
        self._state = ReceiverState.UNINITIALIZED
        self._active = True
        self._sink: Optional[LogSink] = None
        self._subscription: Optional[WatchSubscription] = None
        self._lock = threading.RLock()
        self._log_number = 0

    # ------------------------------------------------------------------
    # Описание ресивера

    @property
    def description(self) -> str:
        return self.name

    @property
    def tooltip(self) -> str:
        return ""

    @property
    def export_file_name(self) -> str:
        return self.description

    @property
    def columns(self) -> Dict[int, str]:
        return dict(self.COLUMNS)

    @property
    def state(self) -> ReceiverState:
        return self._state

    def csv_header(self) -> str:
        return CsvExporter.csv_header()

    def __str__(self) -> str:
        return self.name

    # ------------------------------------------------------------------
    # Жизненный цикл

    @property
    def is_active(self) -> bool:
        return self._active

    @is_active.setter
    def is_active(self, value: bool) -> None:
        """Включает или выключает доставку событий; файл и смещения не трогаются."""
        self._active = bool(value)
        if self._state in (ReceiverState.ACTIVE, ReceiverState.INACTIVE):
            self._state = ReceiverState.ACTIVE if self._active else ReceiverState.INACTIVE
        if self._subscription is not None:
            self._subscription.enabled = self._active

    def initialize(self, sink: Optional[LogSink]) -> None:
        """
        Открывает источник, подписывается на изменения и выполняет первый проход чтения.

        :param sink: получатель пакетов сообщений.
        :raises SourceUnavailableError: если файл или каталог недоступен.
        """
        if self._state in (ReceiverState.ACTIVE, ReceiverState.INACTIVE):
            self.shutdown()

        with self._lock:
            self._sink = sink
            self._log_number = 0
            try:
                self._open_source()
            except Exception:
                # Ждать поток наблюдателя под блокировкой нельзя
                self._release_subscription(wait=False)
                self._close_source()
                self._state = ReceiverState.CLOSED
                raise
            self._state = ReceiverState.ACTIVE if self._active else ReceiverState.INACTIVE
        logger.info("%s: инициализирован", self.description)

    def shutdown(self) -> None:
        """Останавливает наблюдение и освобождает файл. Повторный вызов безопасен."""
        with self._lock:
            if self._state in (ReceiverState.UNINITIALIZED, ReceiverState.CLOSED) \
                    and self._subscription is None:
                return
            self._state = ReceiverState.SHUTTING_DOWN

        # Сначала отключаем обработчики и дожидаемся текущего события, потом закрываем файл
        self._release_subscription(wait=True)
        with self._lock:
            self._release_subscription(wait=False)
            self._close_source()
            self._state = ReceiverState.CLOSED
        logger.info("%s: остановлен", self.description)

    def reset(self) -> None:
        """Перезапуск с той же конфигурацией: `shutdown` и `initialize`."""
        sink = self._sink
        self.shutdown()
        self.initialize(sink)

    def clear(self) -> None:
        """Сбрасывает только счётчик сообщений; уже прочитанное не перечитывается."""
        with self._lock:
            self._log_number = 0

    # ------------------------------------------------------------------
    # Подписка

    def _subscribe(self, directory: str) -> None:
        subscription = WatchSubscription(
            directory,
            on_modified=self.handle_file_changed,
            on_created=self.handle_file_created,
            on_error=self._on_watch_error,
        )
        subscription.enabled = self._active
        subscription.start()
        self._subscription = subscription

    def _release_subscription(self, wait: bool) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.close(wait=wait)

    def _on_watch_error(self, error: Exception) -> None:
        """Сбой наблюдения: подписка пересоздаётся, затем выполняется проход чтения."""
        with self._lock:
            if self._state not in (ReceiverState.ACTIVE, ReceiverState.INACTIVE):
                return
            logger.warning("%s: сбой наблюдения (%s), подписка пересоздаётся", self.description, error)
            self._release_subscription(wait=False)
            try:
                self._recover_watch()
            except OSError as e:
                logger.exception("%s: не удалось восстановить наблюдение: %s", self.description, e)

    def handle_file_changed(self, path: str) -> None:
        """Событие изменения файла; по умолчанию игнорируется."""

    def handle_file_created(self, path: str) -> None:
        """Событие создания файла; по умолчанию игнорируется."""

    # ------------------------------------------------------------------
    # Разбор и доставка

    def _next_number(self) -> int:
        self._log_number += 1
        return self._log_number

    def _parse_records(self, raw_records: Iterable[str]) -> List[LogRecord]:
        messages: List[LogRecord] = []
        for raw in raw_records:
            # Номер выделяется до разбора: пропущенная запись оставляет пробел в нумерации
            number = self._next_number()
            try:
                messages.append(self._parser.parse(raw, number))
            except MalformedRecordError as e:
                logger.warning("%s: запись пропущена: %s", self.description, e)
        return messages

    def _deliver(self, messages: List[LogRecord]) -> None:
        if messages and self._sink is not None:
            self._sink.handle_messages(messages)

    # ------------------------------------------------------------------
    # Раскладка окна

    def _get_layout_store(self) -> LayoutStore:
        if self._layout_store is None:
            self._layout_store = JsonLayoutStore(get_layout_file())
        return self._layout_store

    def save_layout(self, layout: Optional[str]) -> None:
        self._get_layout_store().save(self.layout_key, layout or "")

    def load_layout(self) -> Optional[str]:
        return self._get_layout_store().load(self.layout_key)

    # ------------------------------------------------------------------
    # Реализуется наследниками

    @abstractmethod
    def _open_source(self) -> None:
        """Открывает файл(ы), создаёт подписку и выполняет первый проход чтения."""

    @abstractmethod
    def _close_source(self) -> None:
        """Закрывает открытые дескрипторы. Вызывается под блокировкой."""

    @abstractmethod
    def _recover_watch(self) -> None:
        """Пересоздаёт подписку после сбоя и перечитывает новые данные."""

    @abstractmethod
    def can_handle_source(self) -> bool:
        """Проверяет источник, не изменяя смещений и состояния."""

    @abstractmethod
    def validate_settings(self) -> None:
        """Проверяет конфигурацию; при ошибке возбуждает `SourceUnavailableError`."""


def read_first_line(path: str, encoding: str) -> str:
    """Читает первую строку файла для определения формата."""
    if not os.path.isfile(path):
        return ""
    try:
        with open(path, "r", encoding=encoding, errors="replace") as f:
            return f.readline().strip()
    except OSError as e:
        logger.warning("Не удалось прочитать %s: %s", path, e)
        return ""
