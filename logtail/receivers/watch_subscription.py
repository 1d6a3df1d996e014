"""
Подписка на изменения файловой системы.

Подписка — это ресурс, которым владеет ровно один ресивер: наблюдатель
watchdog и обработчик событий. Она создаётся при инициализации ресивера
и освобождается один раз при остановке или восстановлении после ошибки;
повторное освобождение ничего не делает.
"""

import logging
import os
import threading
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

PathCallback = Callable[[str], None]


class _ReceiverEventHandler(FileSystemEventHandler):
    """Передаёт события watchdog в колбэки подписки, пока она включена."""

    def __init__(self, subscription: "WatchSubscription") -> None:
        super().__init__()
        self._subscription = subscription

    def dispatch(self, event: FileSystemEvent) -> None:
        if not self._subscription.enabled:
            return
        try:
            super().dispatch(event)
        except OSError as e:
            # Ошибка ввода-вывода при обработке считается сбоем наблюдения
            self._subscription.report_error(e)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._subscription.notify_modified(os.fsdecode(event.src_path))

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._subscription.notify_created(os.fsdecode(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        # Переименование в наблюдаемом каталоге выглядит как появление нового файла
        if not event.is_directory:
            self._subscription.notify_created(os.fsdecode(event.dest_path))

    def on_deleted(self, event: FileSystemEvent) -> None:
        if os.path.abspath(os.fsdecode(event.src_path)) == self._subscription.directory:
            self._subscription.report_error(
                FileNotFoundError(f"Наблюдаемый каталог удалён: {self._subscription.directory}")
            )


class WatchSubscription:
    """
    Наблюдение за одним каталогом (без рекурсии).

    :param directory: каталог, события которого нужно получать;
    :param on_modified: вызывается с абсолютным путём изменённого файла;
    :param on_created: вызывается с путём созданного (или переименованного) файла;
    :param on_error: вызывается при сбое наблюдения; ресивер пересоздаёт подписку.
    :param observer_factory: фабрика наблюдателя (по умолчанию `watchdog.observers.Observer`).
    """

    def __init__(
        self,
        directory: str,
        on_modified: PathCallback,
        on_created: Optional[PathCallback] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        observer_factory: Callable[[], object] = Observer,
    ) -> None:
        self.directory = os.path.abspath(directory)
        self._on_modified = on_modified
        self._on_created = on_created
        self._on_error = on_error
        self._observer_factory = observer_factory
        self._observer = None
        self._enabled = False
        self._closed = False
        self._error_reported = False

    @property
    def enabled(self) -> bool:
        return self._enabled and not self._closed

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = bool(value)

    def start(self) -> None:
        """Запускает наблюдатель; ошибки запуска (`OSError`) пробрасываются."""
        if self._closed:
            raise RuntimeError("Подписка уже закрыта")
        observer = self._observer_factory()
        observer.schedule(_ReceiverEventHandler(self), self.directory, recursive=False)
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.debug("Наблюдение за каталогом %s запущено", self.directory)

    def notify_modified(self, path: str) -> None:
        self._on_modified(os.path.abspath(path))

    def notify_created(self, path: str) -> None:
        if self._on_created is not None:
            self._on_created(os.path.abspath(path))

    def report_error(self, error: Exception) -> None:
        """Сообщает ресиверу о сбое; повторные сообщения одной подписки игнорируются."""
        if self._closed or self._error_reported:
            return
        self._error_reported = True
        if self._on_error is not None:
            self._on_error(error)

    def close(self, wait: bool = True, timeout: float = 5.0) -> None:
        """
        Отключает доставку событий и останавливает наблюдатель.

        :param wait: дождаться завершения потока наблюдателя (и тем самым
            обработки события, которое выполняется прямо сейчас). Из потока
            самого наблюдателя ожидание не выполняется.
        """
        if self._closed:
            return
        self._closed = True
        self._enabled = False
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        if wait and observer is not threading.current_thread():
            observer.join(timeout)
        logger.debug("Наблюдение за каталогом %s остановлено", self.directory)
