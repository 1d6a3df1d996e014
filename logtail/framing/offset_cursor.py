"""
Курсор смещения в наблюдаемом файле.

Курсор хранит позицию последнего прочитанного байта и по текущей длине
файла определяет, сколько новых байт можно прочитать. Если файл стал
короче сохранённой позиции, он был усечён, и курсор возвращается в
начало: файл перечитывается с нуля. Подмену
файла по тому же пути (другой inode) курсор не видит: её обнаруживает
`LogFileReader` и переоткрывает файл.
"""


class OffsetCursor:
    """
    Позиция чтения для одного файла.

    Метод `advance` ничего не сдвигает сам по себе (кроме сброса при
    усечении): новая позиция фиксируется отдельным вызовом `commit` после
    того, как байты действительно прочитаны. Так ошибка чтения не приводит
    к пропуску данных.

    Атрибуты:
        path: путь к файлу (для диагностики);
        last_offset: позиция, до которой файл уже прочитан;
        stream_length: длина файла при последнем вызове `advance`;
        reset_detected: `True`, если последний `advance` обнаружил усечение.
    """

    def __init__(self, path: str, last_offset: int = 0) -> None:
        if last_offset < 0:
            raise ValueError("Смещение не может быть отрицательным")
        self.path = path
        self.last_offset = last_offset
        self.stream_length = last_offset
        self.reset_detected = False

    def advance(self, current_length: int) -> int:
        """
        Возвращает количество доступных для чтения байт.

        :param current_length: текущая длина файла.
        :return: 0, если новых данных нет; длину файла, если файл был
            усечён (курсор при этом сбрасывается в 0); иначе разницу между
            длиной и сохранённой позицией.
        """
        self.stream_length = current_length
        self.reset_detected = False
        if current_length == self.last_offset:
            return 0
        if current_length < self.last_offset:
            self.last_offset = 0
            self.reset_detected = True
            return current_length
        return current_length - self.last_offset

    def commit(self, new_offset: int) -> None:
        """Фиксирует позицию после успешного чтения."""
        if new_offset < 0:
            raise ValueError("Смещение не может быть отрицательным")
        self.last_offset = new_offset

    def seek_to(self, offset: int) -> None:
        """Устанавливает позицию при открытии файла (0 или конец файла)."""
        self.commit(offset)
        self.stream_length = offset
        self.reset_detected = False

    def __repr__(self) -> str:
        return f"OffsetCursor(path={self.path!r}, last_offset={self.last_offset})"
