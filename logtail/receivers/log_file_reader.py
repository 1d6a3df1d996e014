"""
Чтение новых данных из наблюдаемого файла.

`LogFileReader` связывает открытый дескриптор файла, курсор смещения и
фреймер: при каждом проходе он определяет, сколько байт добавилось,
читает их, декодирует и возвращает полные записи. Байты декодируются
инкрементальным декодером, поэтому многобайтовый символ, разрезанный
границей чтения, не портится.

Перед каждым проходом путь сверяется с открытым дескриптором по
`st_dev`/`st_ino`: если файл удалён и создан заново или подменён
переименованием, он переоткрывается и читается с начала.
"""

import codecs
import logging
import os
from typing import List, Optional

from logtail.framing.offset_cursor import OffsetCursor
from logtail.framing.record_framer import RecordFramer
from logtail.models.errors import SourceUnavailableError
from logtail.settings import get_encoding, get_read_chunk_bytes

logger = logging.getLogger(__name__)


class LogFileReader:
    """
    Дескриптор, курсор и фреймер одного файла.

    Атрибуты:
        path: абсолютный путь к файлу;
        framer: фреймер, накапливающий незавершённую запись;
        cursor: курсор смещения.
    """

    def __init__(self, path: str, framer: RecordFramer,
                 encoding: Optional[str] = None, chunk_bytes: Optional[int] = None) -> None:
        self.path = os.path.abspath(path)
        self.framer = framer
        self.cursor = OffsetCursor(self.path)
        self._decoder = codecs.getincrementaldecoder(encoding or get_encoding())(errors="replace")
        self._chunk_bytes = chunk_bytes or get_read_chunk_bytes()
        self._handle = None

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(self, from_beginning: bool) -> None:
        """
        Открывает файл только для чтения.

        :param from_beginning: начать с нулевого смещения; иначе с конца
            файла, чтобы получать только новые записи.
        :raises SourceUnavailableError: если файл не удаётся открыть.
        """
        try:
            self._handle = open(self.path, "rb")
        except OSError as e:
            raise SourceUnavailableError(f"Не удалось открыть файл {self.path}: {e}") from e
        length = os.fstat(self._handle.fileno()).st_size
        self.cursor.seek_to(0 if from_beginning else length)
        self._discard_pending()

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def _discard_pending(self) -> None:
        self.framer.reset()
        self._decoder.reset()

    def _is_same_file(self, stat: os.stat_result) -> bool:
        opened = os.fstat(self._handle.fileno())
        return (stat.st_dev, stat.st_ino) == (opened.st_dev, opened.st_ino)

    def _reopen(self) -> None:
        """Путь указывает на другой файл (удалён и создан заново или подменён)."""
        logger.warning("Файл %s пересоздан, чтение начинается сначала", self.path)
        # Старый дескриптор закрывается только после успешного открытия нового
        handle = open(self.path, "rb")
        self._handle.close()
        self._handle = handle
        self.cursor.seek_to(0)
        self._discard_pending()

    def read_records(self) -> List[str]:
        """
        Читает всё, что добавилось с прошлого прохода, и возвращает полные записи.

        Смещение фиксируется после каждого успешно прочитанного блока, поэтому
        `OSError` посреди чтения не приводит к пропуску непрочитанных байт.
        """
        if self._handle is None:
            return []

        try:
            stat = os.stat(self.path)
        except FileNotFoundError:
            # Файл удалён; позиция сохраняется до его появления
            return []
        if not self._is_same_file(stat):
            self._reopen()

        length = os.fstat(self._handle.fileno()).st_size
        available = self.cursor.advance(length)
        if self.cursor.reset_detected:
            logger.warning("Файл %s усечён, чтение начинается сначала", self.path)
            self._discard_pending()
        if available == 0:
            return []

        records: List[str] = []
        self._handle.seek(self.cursor.last_offset)
        remaining = available
        while remaining > 0:
            chunk = self._handle.read(min(remaining, self._chunk_bytes))
            if not chunk:
                break
            self.cursor.commit(self.cursor.last_offset + len(chunk))
            remaining -= len(chunk)
            records.extend(self.framer.feed(self._decoder.decode(chunk)))
        return records

    def __repr__(self) -> str:
        return f"LogFileReader(path={self.path!r}, offset={self.cursor.last_offset})"
