"""
Экспорт полученных сообщений в CSV.

Этот модуль содержит класс `CsvExporter`, который сохраняет список
объектов `LogRecord` в CSV-файл. Заголовок файла фиксирован и совпадает
со строкой, которую возвращает `ReceiverBase.csv_header()`:

    "Number","Level","Timestamp","Logger","Thread","Message","Location","Custom Data"
"""

import csv
import os
from typing import List

import pandas as pd

from logtail.models.log_record import LogRecord

CSV_COLUMNS = [
    "Number",
    "Level",
    "Timestamp",
    "Logger",
    "Thread",
    "Message",
    "Location",
    "Custom Data",
]


class CsvExporter:
    """
    Служебный класс для выгрузки сообщений в CSV.

    Методы не требуют создания экземпляра: они принимают список
    сообщений и либо строят `DataFrame`, либо сразу пишут файл.
    """

    @staticmethod
    def csv_header() -> str:
        """Заголовок CSV: все столбцы в кавычках, через запятую, с переводом строки."""
        return ",".join(f'"{column}"' for column in CSV_COLUMNS) + "\n"

    @staticmethod
    def to_dataframe(records: List[LogRecord]) -> pd.DataFrame:
        rows = []
        for record in records:
            rows.append({
                "Number": record.number,
                "Level": record.level.value,
                "Timestamp": record.timestamp.isoformat(sep=" "),
                "Logger": record.logger,
                "Thread": record.thread,
                "Message": record.message,
                "Location": str(record.location) if record.location else "",
                "Custom Data": "; ".join(f"{k}={v}" for k, v in record.custom_data.items()),
            })
        # Порядок столбцов задаём явно, чтобы пустой список тоже дал заголовок
        return pd.DataFrame(rows, columns=CSV_COLUMNS)

    @staticmethod
    def export(records: List[LogRecord], filepath: str) -> str:
        """
        Сохраняет сообщения в CSV по указанному пути.

        :param records: список сообщений в порядке получения.
        :param filepath: путь к CSV-файлу, который будет создан.
        :return: путь к созданному CSV-файлу.
        """
        df = CsvExporter.to_dataframe(records)
        directory = os.path.dirname(filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)
        # BOM-метка нужна для корректного отображения кириллицы в Excel
        df.to_csv(
            filepath,
            index=False,
            quoting=csv.QUOTE_ALL,
            encoding="utf-8-sig",
            lineterminator="\n",
        )
        return filepath
