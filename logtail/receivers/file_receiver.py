"""
Ресивер, наблюдающий за одним файлом.

При инициализации файл открывается на чтение (писатель продолжает
работать с ним параллельно), смещение устанавливается в начало или в
конец файла, создаётся подписка на каталог файла и сразу выполняется
проход чтения, чтобы не потерять записи, добавленные между открытием
файла и созданием подписки. Каждое событие изменения файла запускает
новый проход: курсор → фреймер → парсер → пакет получателю.
"""

import logging
import os
from typing import Callable, Optional

from logtail.framing.record_framer import RecordFramer
from logtail.layout.layout_store import LayoutStore
from logtail.models.receiver_settings import FileReceiverSettings
from logtail.parsers.base import MessageParser
from logtail.receivers.log_file_reader import LogFileReader
from logtail.receivers.receiver_base import ReceiverBase, read_first_line
from logtail.settings import get_encoding

logger = logging.getLogger(__name__)


class FileReceiver(ReceiverBase):
    """
    Хвостовое чтение одного файла.

    :param settings: путь к файлу и режим чтения с начала;
    :param parser: парсер формата записей;
    :param framer_factory: создаёт фреймер для каждого открытия файла;
    :param layout_store: хранилище раскладок окна.
    """

    name = "File Receiver"
    layout_key = "file_receiver"

    def __init__(
        self,
        settings: FileReceiverSettings,
        parser: MessageParser,
        framer_factory: Callable[[], RecordFramer],
        layout_store: Optional[LayoutStore] = None,
    ) -> None:
        super().__init__(parser, layout_store)
        self.settings = settings
        self._framer_factory = framer_factory
        self._reader: Optional[LogFileReader] = None

    @property
    def file_path(self) -> str:
        return os.path.abspath(self.settings.path)

    @property
    def description(self) -> str:
        file_name = os.path.basename(self.settings.path) if self.settings.path else "-"
        return f"{self.name} ({file_name})"

    @property
    def tooltip(self) -> str:
        return self.settings.path

    def validate_settings(self) -> None:
        self.settings.validate_source()

    def can_handle_source(self) -> bool:
        if not self.settings.path or not os.path.isfile(self.settings.path):
            return False
        return self._parser.matches_first_line(read_first_line(self.settings.path, get_encoding()))

    def _open_source(self) -> None:
        self.settings.validate_source()
        reader = LogFileReader(self.file_path, self._framer_factory())
        reader.open(from_beginning=self.settings.start_from_beginning)
        self._reader = reader
        self._subscribe(os.path.dirname(self.file_path))
        self._read_new_messages()

    def _close_source(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None

    def _recover_watch(self) -> None:
        self._subscribe(os.path.dirname(self.file_path))
        self._read_new_messages()

    def handle_file_created(self, path: str) -> None:
        # Файл создан заново или подменён через переименование
        self.handle_file_changed(path)

    def handle_file_changed(self, path: str) -> None:
        if not self.is_active or os.path.abspath(path) != self.file_path:
            return
        self._read_new_messages()

    def _read_new_messages(self) -> None:
        with self._lock:
            if self._reader is None:
                return
            raw_records = self._reader.read_records()
            self._deliver(self._parse_records(raw_records))
