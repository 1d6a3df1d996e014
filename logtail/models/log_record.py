from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogLevel(str, Enum):
    """Нормализованный уровень логирования, общий для всех форматов."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    FATAL = "FATAL"


class LogLocation(BaseModel):
    """
    Место в исходном коде, откуда было записано сообщение.

    Поля:
        class_name: имя класса (или модуля);
        method: имя метода;
        file: путь к исходному файлу;
        line: номер строки (строкой, как его пишет log4net).
    """

    model_config = ConfigDict(frozen=True)

    class_name: str = ""
    method: str = ""
    file: str = ""
    line: str = ""

    def __str__(self) -> str:
        text = ".".join(part for part in (self.class_name, self.method) if part)
        if self.file:
            suffix = f"{self.file}:{self.line}" if self.line else self.file
            text = f"{text} ({suffix})" if text else suffix
        return text


class LogRecord(BaseModel):
    """
    Представляет одну запись лога, распознанную парсером.

    После создания запись не изменяется: её владельцем становится
    получатель (sink), которому ресивер передал пакет сообщений.

    Поля:
        number: порядковый номер записи в пределах ресивера (с 1 после сброса);
        level: нормализованный уровень логирования;
        timestamp: время записи (локальное, без часового пояса);
        logger: имя логгера (для syslog — тег процесса);
        thread: идентификатор потока (для syslog — PID);
        message: текст сообщения;
        location: место в коде, если формат его содержит;
        custom_data: дополнительные пары ключ/значение;
        exception: текст исключения (stacktrace), если он был записан.
    """

    model_config = ConfigDict(frozen=True)

    number: int = Field(ge=1)
    level: LogLevel
    timestamp: datetime
    logger: str
    thread: str = ""
    message: str = ""
    location: Optional[LogLocation] = None
    custom_data: Dict[str, str] = Field(default_factory=dict)
    exception: Optional[str] = None

    @field_validator("timestamp")
    @classmethod
    def _to_local_time(cls, value: datetime) -> datetime:
        # Время всех записей хранится как локальное, без часового пояса
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value
