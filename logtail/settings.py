"""
Общая конфигурация logtail.

Значения читаются из переменных окружения; если рядом с приложением лежит
файл `.env`, он загружается при импорте модуля. Переменные:

    LOGTAIL_ENCODING — кодировка наблюдаемых файлов (по умолчанию utf-8);
    LOGTAIL_LOG_LEVEL — уровень логирования самого приложения (INFO);
    LOGTAIL_LAYOUT_FILE — JSON-файл для сохранения раскладок окон;
    LOGTAIL_READ_CHUNK_BYTES — сколько байт читать из файла за один раз.
"""

import os
from dotenv import load_dotenv


# Загружаем переменные из .env файла, если он существует
load_dotenv()

DEFAULT_LAYOUT_FILE = os.path.join(os.path.expanduser("~"), ".logtail", "layouts.json")


def get_encoding() -> str:
    return os.getenv("LOGTAIL_ENCODING", "utf-8")


def get_log_level() -> str:
    return os.getenv("LOGTAIL_LOG_LEVEL", "INFO").upper()


def get_layout_file() -> str:
    return os.getenv("LOGTAIL_LAYOUT_FILE", DEFAULT_LAYOUT_FILE)


def get_read_chunk_bytes() -> int:
    """Размер блока чтения; некорректное значение заменяется на 1 МиБ."""
    raw = os.getenv("LOGTAIL_READ_CHUNK_BYTES", "")
    try:
        value = int(raw)
    except ValueError:
        return 1024 * 1024
    return max(4096, value)
