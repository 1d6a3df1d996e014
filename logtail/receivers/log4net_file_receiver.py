from functools import partial
from typing import Optional

from logtail.framing.record_framer import TagRecordFramer
from logtail.layout.layout_store import LayoutStore
from logtail.models.receiver_settings import FileReceiverSettings
from logtail.parsers.log4net_parser import LOG4J_EVENT_END, Log4NetXmlParser
from logtail.receivers.file_receiver import FileReceiver


class Log4NetFileReceiver(FileReceiver):
    """Файл с событиями log4net в формате XmlLayoutSchemaLog4j."""

    name = "Log4Net File Receiver"
    layout_key = "log4net_file_receiver"

    def __init__(self, path: str, start_from_beginning: bool = False,
                 layout_store: Optional[LayoutStore] = None) -> None:
        super().__init__(
            FileReceiverSettings(path=path, start_from_beginning=start_from_beginning),
            Log4NetXmlParser(),
            partial(TagRecordFramer, LOG4J_EVENT_END),
            layout_store,
        )
