from typing import Optional

from logtail.framing.record_framer import LineRecordFramer
from logtail.layout.layout_store import LayoutStore
from logtail.models.receiver_settings import FileReceiverSettings
from logtail.parsers.syslog_parser import SyslogParser
from logtail.receivers.file_receiver import FileReceiver


class SyslogFileReceiver(FileReceiver):
    """Файл syslog (RFC 3164), одна строка — одно сообщение."""

    name = "Syslog File Receiver"
    layout_key = "syslog_file_receiver"

    def __init__(self, path: str, start_from_beginning: bool = False,
                 layout_store: Optional[LayoutStore] = None) -> None:
        super().__init__(
            FileReceiverSettings(path=path, start_from_beginning=start_from_beginning),
            SyslogParser(),
            LineRecordFramer,
            layout_store,
        )
