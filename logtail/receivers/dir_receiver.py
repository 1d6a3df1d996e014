"""
Ресивер, наблюдающий за каталогом с ротируемыми лог-файлами.

Файлы каталога, полный путь которых соответствует шаблону, сортируются
«естественным» образом (числа внутри имени сравниваются как числа):
``app.log``, ``app.log.1``, ``app.log.2``, …, ``app.log.10``. Первый файл
списка — текущий, в него пишет приложение; остальные — архив ротации.

При чтении с начала архивные файлы читаются один раз, от самого старого
к самому новому, после чего текущий файл читается и отслеживается по тем
же правилам, что и в `FileReceiver`.

При обычной ротации текущий файл переименовывается в архивный, а по его
пути создаётся новый; читатель замечает подмену и продолжает с начала
нового файла. Если же появляется файл, который при сортировке встаёт
перед текущим (новое имя «головы»), он автоматически не подхватывается:
ресивер пишет предупреждение, и для продолжения нужен `reset()`.
"""

import logging
import os
import re
from typing import Callable, List, Optional

from logtail.framing.record_framer import RecordFramer
from logtail.layout.layout_store import LayoutStore
from logtail.models.errors import SourceUnavailableError
from logtail.models.receiver_settings import DirReceiverSettings
from logtail.parsers.base import MessageParser
from logtail.receivers.log_file_reader import LogFileReader
from logtail.receivers.receiver_base import ReceiverBase, ReceiverState, read_first_line
from logtail.settings import get_encoding

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"(\d+)")


def natural_sort_key(value: str) -> List[object]:
    """Ключ сортировки: числовые фрагменты сравниваются как числа, регистр игнорируется."""
    return [int(part) if part.isdigit() else part.lower() for part in _DIGITS.split(value)]


def natural_sorted(values: List[str]) -> List[str]:
    return sorted(values, key=natural_sort_key)


class DirReceiver(ReceiverBase):
    """
    Хвостовое чтение текущего файла каталога с воспроизведением архива.

    :param settings: каталог, шаблон имени файла и режим чтения с начала;
    :param parser: парсер формата записей;
    :param framer_factory: создаёт фреймер для каждого читаемого файла;
    :param layout_store: хранилище раскладок окна.
    """

    name = "Dir Receiver"
    layout_key = "dir_receiver"

    def __init__(
        self,
        settings: DirReceiverSettings,
        parser: MessageParser,
        framer_factory: Callable[[], RecordFramer],
        layout_store: Optional[LayoutStore] = None,
    ) -> None:
        super().__init__(parser, layout_store)
        self.settings = settings
        self._framer_factory = framer_factory
        self._pattern = re.compile(settings.filename_pattern)
        self._reader: Optional[LogFileReader] = None
        self._current_file: Optional[str] = None

    @property
    def directory(self) -> str:
        return os.path.abspath(self.settings.directory)

    @property
    def current_file(self) -> Optional[str]:
        return self._current_file

    @property
    def description(self) -> str:
        dir_name = os.path.basename(os.path.normpath(self.settings.directory)) if self.settings.directory else "-"
        return f"{self.name} ({dir_name})"

    @property
    def tooltip(self) -> str:
        return self.settings.directory

    def validate_settings(self) -> None:
        self.settings.validate_source()

    def _matches(self, path: str) -> bool:
        return self._pattern.search(path) is not None

    def collect_files(self) -> List[str]:
        """Возвращает подходящие под шаблон файлы каталога в естественном порядке."""
        try:
            names = os.listdir(self.directory)
        except OSError as e:
            raise SourceUnavailableError(f"Не удалось прочитать каталог {self.directory}: {e}") from e
        files = []
        for name in names:
            full_path = os.path.join(self.directory, name)
            if os.path.isfile(full_path) and self._matches(full_path):
                files.append(full_path)
        return natural_sorted(files)

    def can_handle_source(self) -> bool:
        if not self.settings.directory or not os.path.isdir(self.settings.directory):
            return False
        try:
            files = self.collect_files()
        except SourceUnavailableError:
            return False
        if not files:
            return True
        first_line = read_first_line(files[0], get_encoding())
        # Пустой текущий файл ещё не позволяет определить формат
        return not first_line or self._parser.matches_first_line(first_line)

    # ------------------------------------------------------------------

    def _open_source(self) -> None:
        self.settings.validate_source()
        files = self.collect_files()
        self._current_file = None
        self._reader = None

        if self.settings.start_from_beginning:
            # От самого старого архивного файла к самому новому
            for backlog_file in reversed(files[1:]):
                self._replay_backlog(backlog_file)

        self._subscribe(self.directory)

        if files:
            # Текущий файл идёт первым: у него нет числового суффикса
            self._open_current(files[0], from_beginning=self.settings.start_from_beginning)
            self._read_new_messages()

    def _replay_backlog(self, path: str) -> None:
        reader = LogFileReader(path, self._framer_factory())
        try:
            reader.open(from_beginning=True)
            self._deliver(self._parse_records(reader.read_records()))
        except (SourceUnavailableError, OSError) as e:
            logger.warning("%s: архивный файл %s пропущен: %s", self.description, path, e)
        finally:
            reader.close()

    def _open_current(self, path: str, from_beginning: bool) -> None:
        reader = LogFileReader(path, self._framer_factory())
        reader.open(from_beginning=from_beginning)
        self._reader = reader
        self._current_file = reader.path
        logger.info("%s: текущий файл %s", self.description, self._current_file)

    def _close_source(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None

    def _recover_watch(self) -> None:
        self._subscribe(self.directory)
        self._read_new_messages()

    # ------------------------------------------------------------------

    def handle_file_created(self, path: str) -> None:
        if not self.is_active or not self._matches(path):
            return
        with self._lock:
            if self._state not in (ReceiverState.ACTIVE, ReceiverState.INACTIVE):
                return
            if self._current_file is None:
                # Единственный новый файл становится наблюдаемым
                try:
                    self._open_current(path, from_beginning=True)
                except SourceUnavailableError as e:
                    logger.warning("%s: новый файл %s недоступен: %s", self.description, path, e)
                    return
                self._read_new_messages()
            elif os.path.abspath(path) == self._current_file:
                # Текущий файл создан заново: читатель сам переоткроет его
                self._read_new_messages()
            elif natural_sort_key(os.path.abspath(path)) < natural_sort_key(self._current_file):
                logger.warning(
                    "%s: обнаружена ротация (%s); новые записи будут прочитаны после reset()",
                    self.description, path,
                )

    def handle_file_changed(self, path: str) -> None:
        if not self.is_active:
            return
        if self._current_file is None:
            self.handle_file_created(path)
            return
        if os.path.abspath(path) == self._current_file:
            self._read_new_messages()

    def _read_new_messages(self) -> None:
        with self._lock:
            if self._reader is None:
                return
            raw_records = self._reader.read_records()
            self._deliver(self._parse_records(raw_records))
