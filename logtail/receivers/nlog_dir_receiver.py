"""
Ресивер каталога NLog.

NLog, настроенный на ``Log4JXmlEventLayout`` и архивацию файлов, пишет
события в текущий файл и переименовывает заполненные в ``*.log.1``,
``*.log.2`` и т.д. Формат событий тот же, что у log4net.
"""

from functools import partial
from typing import Optional

from logtail.framing.record_framer import TagRecordFramer
from logtail.layout.layout_store import LayoutStore
from logtail.models.receiver_settings import DirReceiverSettings
from logtail.parsers.log4net_parser import LOG4J_EVENT_END, Log4NetXmlParser
from logtail.receivers.dir_receiver import DirReceiver


class NLogDirReceiver(DirReceiver):
    name = "NLog Dir Receiver"
    layout_key = "nlog_dir_receiver"

    def __init__(self, directory: str, filename_pattern: Optional[str] = None,
                 start_from_beginning: bool = False,
                 layout_store: Optional[LayoutStore] = None) -> None:
        options = {"directory": directory, "start_from_beginning": start_from_beginning}
        if filename_pattern:
            options["filename_pattern"] = filename_pattern
        super().__init__(
            DirReceiverSettings(**options),
            Log4NetXmlParser(),
            partial(TagRecordFramer, LOG4J_EVENT_END),
            layout_store,
        )
