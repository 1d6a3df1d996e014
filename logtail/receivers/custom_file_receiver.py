from typing import Optional

from logtail.framing.record_framer import LineRecordFramer
from logtail.layout.layout_store import LayoutStore
from logtail.models.receiver_settings import FileReceiverSettings
from logtail.parsers.regex_line_parser import (
    DEFAULT_LINE_PATTERN,
    DEFAULT_TIMESTAMP_FORMAT,
    RegexLineParser,
)
from logtail.receivers.file_receiver import FileReceiver


class CustomFileReceiver(FileReceiver):
    """
    Текстовый лог произвольного формата.

    Формат строки задаётся регулярным выражением с именованными группами
    (см. `RegexLineParser`); по умолчанию ожидаются строки вида
    ``2025-07-22 13:17:16,212 [ERROR] [main] f.configuration: сообщение``.
    """

    name = "Custom File Receiver"
    layout_key = "custom_file_receiver"

    def __init__(self, path: str, pattern: str = DEFAULT_LINE_PATTERN,
                 timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
                 start_from_beginning: bool = False,
                 layout_store: Optional[LayoutStore] = None) -> None:
        super().__init__(
            FileReceiverSettings(path=path, start_from_beginning=start_from_beginning),
            RegexLineParser(pattern, timestamp_format),
            LineRecordFramer,
            layout_store,
        )
