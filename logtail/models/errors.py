class MalformedRecordError(ValueError):
    """Запись не соответствует ожидаемому формату; ресивер пропускает её."""


class SourceUnavailableError(RuntimeError):
    """Наблюдаемый файл или каталог отсутствует либо недоступен."""
