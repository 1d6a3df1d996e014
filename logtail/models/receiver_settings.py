"""
Модели конфигурации ресиверов.

Настройки описываются моделями pydantic: при создании модели значения
проверяются (например, что шаблон имени файла является корректным
регулярным выражением). Проверка существования файла или каталога
выполняется отдельно методом `validate_source`, потому что файл может
появиться позже, чем была создана конфигурация.
"""

import os
import re

from pydantic import BaseModel, field_validator

from logtail.models.errors import SourceUnavailableError


class FileReceiverSettings(BaseModel):
    """
    Настройки ресивера, наблюдающего за одним файлом.

    Поля:
        path: путь к наблюдаемому лог-файлу;
        start_from_beginning: читать файл с начала (иначе только новые записи).
    """

    path: str
    start_from_beginning: bool = False

    def validate_source(self) -> None:
        """Проверяет, что файл существует; иначе `SourceUnavailableError`."""
        if not os.path.isfile(self.path):
            raise SourceUnavailableError(f"Файл не найден: {self.path}")


class DirReceiverSettings(BaseModel):
    """
    Настройки ресивера, наблюдающего за каталогом с ротируемыми файлами.

    Поля:
        directory: наблюдаемый каталог;
        filename_pattern: регулярное выражение, которому должен
            соответствовать полный путь файла;
        start_from_beginning: прочитать все ротированные файлы при запуске.
    """

    directory: str
    filename_pattern: str = r".*\.log(\.\d+)?$"
    start_from_beginning: bool = False

    @field_validator("filename_pattern")
    @classmethod
    def _check_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"Некорректный шаблон имени файла: {e}") from e
        return value

    def validate_source(self) -> None:
        """Проверяет, что каталог существует; иначе `SourceUnavailableError`."""
        if not os.path.isdir(self.directory):
            raise SourceUnavailableError(f"Каталог не найден: {self.directory}")
