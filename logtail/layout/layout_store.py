"""
Хранилище раскладок окон.

Раскладка — непрозрачная строка, которую сохраняет и загружает внешний
интерфейс; logtail её не интерпретирует. Ресивер получает хранилище
явно (а не через глобальные настройки) и сохраняет строку под ключом
своего типа.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class LayoutStore(ABC):
    @abstractmethod
    def save(self, key: str, layout: str) -> None:
        ...

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        ...


class MemoryLayoutStore(LayoutStore):
    """Хранилище в памяти (для тестов и встраивания)."""

    def __init__(self) -> None:
        self._layouts: Dict[str, str] = {}

    def save(self, key: str, layout: str) -> None:
        self._layouts[key] = layout

    def load(self, key: str) -> Optional[str]:
        return self._layouts.get(key)


class JsonLayoutStore(LayoutStore):
    """
    Раскладки в JSON-файле вида ``{"ключ": "строка раскладки"}``.

    Запись атомарная: данные пишутся во временный файл рядом с целевым,
    затем он подменяет целевой через `os.replace`.
    """

    def __init__(self, filepath: str) -> None:
        self.filepath = filepath

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.filepath):
            return {}
        try:
            with open(self.filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Не удалось прочитать раскладки из %s: %s", self.filepath, e)
            return {}
        return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}

    def save(self, key: str, layout: str) -> None:
        data = self._read_all()
        data[key] = layout
        directory = os.path.dirname(os.path.abspath(self.filepath))
        os.makedirs(directory, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.filepath)
        except Exception:
            os.unlink(tmp)
            raise

    def load(self, key: str) -> Optional[str]:
        return self._read_all().get(key)
