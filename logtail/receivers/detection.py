"""
Автоматический выбор ресивера для файла или каталога.

Каталог всегда открывается ресивером NLog. Для файла по очереди
создаются зарегистрированные файловые ресиверы, и выбирается первый,
чей `can_handle_source` распознал первую строку.
"""

import logging
import os
from typing import List, Optional, Type

from logtail.receivers.custom_file_receiver import CustomFileReceiver
from logtail.receivers.file_receiver import FileReceiver
from logtail.receivers.log4net_file_receiver import Log4NetFileReceiver
from logtail.receivers.nlog_dir_receiver import NLogDirReceiver
from logtail.receivers.receiver_base import ReceiverBase
from logtail.receivers.syslog_file_receiver import SyslogFileReceiver

logger = logging.getLogger(__name__)

# Порядок важен: строгие форматы проверяются раньше шаблона по умолчанию
FILE_RECEIVER_TYPES: List[Type[FileReceiver]] = [
    Log4NetFileReceiver,
    SyslogFileReceiver,
    CustomFileReceiver,
]


def detect_receiver(path: str, start_from_beginning: bool = False) -> Optional[ReceiverBase]:
    """
    Подбирает ресивер для источника.

    :param path: путь к лог-файлу или каталогу.
    :param start_from_beginning: читать источник с начала.
    :return: ненастроенный (не инициализированный) ресивер или None,
        если формат не распознан.
    """
    if os.path.isdir(path):
        return NLogDirReceiver(path, start_from_beginning=start_from_beginning)

    for receiver_type in FILE_RECEIVER_TYPES:
        receiver = receiver_type(path, start_from_beginning=start_from_beginning)
        if receiver.can_handle_source():
            logger.info("Формат %s распознан: %s", path, receiver.name)
            return receiver

    logger.warning("Формат файла %s не распознан", path)
    return None
