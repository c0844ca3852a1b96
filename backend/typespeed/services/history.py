import json
import logging
import threading
from pathlib import Path
from typing import List

from pydantic import ValidationError

from typespeed.services.game.scoring import ScoreRecord

logger = logging.getLogger(__name__)

SLOT_NAME = 'typingGameScores'
DEFAULT_LIMIT = 50


class LocalHistory:
    """
    Bounded log of finished rounds kept in one JSON file.

    Records are stored oldest first; once the log grows past `limit` the
    oldest entries are evicted. A missing or unreadable slot reads as empty
    and malformed entries are dropped.
    """

    def __init__(self, base_path: str = 'history', limit: int = DEFAULT_LIMIT):
        if limit < 1:
            raise ValueError('limit must be at least 1')
        self.base_path = Path(base_path)
        self.path = self.base_path / f'{SLOT_NAME}.json'
        self.limit = limit
        self._lock = threading.Lock()

        # Ensure directories exist
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _load(self) -> List[ScoreRecord]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning(f"[history] unreadable slot {self.path}: {exc}")
            return []
        if not isinstance(data, list):
            return []

        records = []
        for entry in data:
            try:
                records.append(ScoreRecord.model_validate(entry))
            except ValidationError as exc:
                logger.warning(f"[history] dropping malformed entry: {exc.error_count()} error(s)")
        return records

    def _save(self, records: List[ScoreRecord]) -> None:
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump([r.model_dump() for r in records], f, indent=2)

    def append(self, record: ScoreRecord) -> ScoreRecord:
        with self._lock:
            records = self._load()
            records.append(record)
            if len(records) > self.limit:
                records = records[-self.limit:]
            self._save(records)
        return record

    def list(self) -> List[ScoreRecord]:
        """All records, most recent first."""
        with self._lock:
            records = self._load()
        return list(reversed(records))

    def clear(self) -> None:
        with self._lock:
            self.path.unlink(missing_ok=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._load())
