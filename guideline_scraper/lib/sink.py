import os
import logging
from typing import Iterator

from .models import GuidelineRecord

logger = logging.getLogger("guideline_scraper")


class JsonlSink:
    """Append-only record file plus a plain-text ledger of saved names."""

    def __init__(self, records_path: str, ledger_path: str):
        """
        Args:
            records_path (str): JSON Lines file receiving one record per line
            ledger_path (str): Text file receiving one guideline name per line
        """
        self.records_path = records_path
        self.ledger_path = ledger_path
        for path in (records_path, ledger_path):
            directory = os.path.dirname(os.path.abspath(path))
            os.makedirs(directory, exist_ok=True)

    def append_record(self, record: GuidelineRecord) -> None:
        with open(self.records_path, "a", encoding="utf-8") as f:
            f.write(record.to_json() + "\n")
        logger.debug(f"Appended record for {record.name} to {self.records_path}")

    def append_name(self, name: str) -> None:
        with open(self.ledger_path, "a", encoding="utf-8") as f:
            f.write(name + "\n")

    def read_records(self) -> Iterator[GuidelineRecord]:
        """Yield every record written so far"""
        if not os.path.exists(self.records_path):
            return
        with open(self.records_path, "r", encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    yield GuidelineRecord.from_json(line)
