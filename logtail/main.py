"""
Точка входа командной строки logtail.

    logtail FILE [-c PATTERN] [--from-beginning] [--export CSV] [--once]

Открывает лог-файл (или каталог NLog), подбирает подходящий ресивер и
печатает сообщения по мере их появления до нажатия Ctrl+C. С параметром
``--export`` полученные сообщения при выходе сохраняются в CSV.
"""

import argparse
import logging
import os
import sys
import time
from typing import List, Optional

from logtail.export.csv_exporter import CsvExporter
from logtail.models.errors import SourceUnavailableError
from logtail.models.log_record import LogRecord
from logtail.parsers.regex_line_parser import DEFAULT_LINE_PATTERN, DEFAULT_TIMESTAMP_FORMAT
from logtail.receivers.custom_file_receiver import CustomFileReceiver
from logtail.receivers.detection import detect_receiver
from logtail.receivers.message_buffer import MessageBuffer
from logtail.receivers.nlog_dir_receiver import NLogDirReceiver
from logtail.receivers.receiver_base import ReceiverBase
from logtail.settings import get_log_level

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.5


def format_record(record: LogRecord) -> str:
    """Строка для вывода в терминал."""
    text = (
        f"{record.number:>6} {record.timestamp:%Y-%m-%d %H:%M:%S} "
        f"{record.level.value:<7} [{record.thread}] {record.logger}: {record.message}"
    )
    if record.exception:
        text += "\n" + record.exception
    return text


def print_records(records: List[LogRecord]) -> None:
    for record in records:
        print(format_record(record), flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="logtail", description="Просмотр лог-файлов в реальном времени")
    parser.add_argument("path", help="лог-файл или каталог с файлами NLog")
    parser.add_argument(
        "-c", "--custom-receiver", metavar="PATTERN",
        help="разбирать файл регулярным выражением с именованными группами "
             "(\"default\": шаблон по умолчанию)",
    )
    parser.add_argument(
        "--timestamp-format", default=DEFAULT_TIMESTAMP_FORMAT,
        help="формат strptime для группы timestamp пользовательского шаблона",
    )
    parser.add_argument(
        "--pattern", metavar="REGEX",
        help="шаблон полного пути файлов для каталога NLog",
    )
    parser.add_argument("--from-beginning", action="store_true", help="прочитать источник с начала")
    parser.add_argument("--export", metavar="CSV", help="сохранить сообщения в CSV при выходе")
    parser.add_argument("--once", action="store_true", help="выйти после первого прохода чтения")
    return parser


def create_receiver(args: argparse.Namespace) -> Optional[ReceiverBase]:
    if not os.path.exists(args.path):
        raise SourceUnavailableError(f"Файл или каталог не найден: {args.path}")
    if args.custom_receiver:
        return CustomFileReceiver(
            args.path,
            pattern=DEFAULT_LINE_PATTERN if args.custom_receiver == "default" else args.custom_receiver,
            timestamp_format=args.timestamp_format,
            start_from_beginning=args.from_beginning,
        )
    if os.path.isdir(args.path):
        return NLogDirReceiver(args.path, filename_pattern=args.pattern,
                               start_from_beginning=args.from_beginning)
    return detect_receiver(args.path, start_from_beginning=args.from_beginning)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        receiver = create_receiver(args)
    except SourceUnavailableError as e:
        logger.error("%s", e)
        return 2
    except ValueError as e:
        logger.error("Некорректные параметры: %s", e)
        return 2
    if receiver is None:
        logger.error("Не удалось определить формат %s; укажите шаблон через -c", args.path)
        return 1

    buffer = MessageBuffer(on_messages=print_records)
    try:
        receiver.initialize(buffer)
    except SourceUnavailableError as e:
        logger.error("%s", e)
        return 2

    logger.info("Наблюдение: %s", receiver.description)
    try:
        while not args.once:
            time.sleep(POLL_INTERVAL)
    except KeyboardInterrupt:
        pass
    finally:
        receiver.shutdown()

    if args.export:
        path = CsvExporter.export(buffer.messages, args.export)
        logger.info("Сообщения сохранены в %s", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
