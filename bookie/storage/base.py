"""
Base class for the in-memory record stores.

Provides:
- a re-entrant lock serializing mutations
- copy-out of stored records
- the rejection convention: log and return None, or raise when strict
"""

import logging
import threading
from typing import Generic, TypeVar

from pydantic import BaseModel

from bookie.exceptions import BookieError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class RecordStore(Generic[RecordT]):
    """Keyed store of pydantic records, insertion ordered."""

    def __init__(self) -> None:
        self._records: dict[str, RecordT] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._records)

    def _insert(self, record_id: str, record: RecordT) -> None:
        if record_id in self._records:
            raise ValueError(f"Duplicate id from id factory: {record_id}")
        self._records[record_id] = record

    def _select(self, predicate=None) -> list[RecordT]:
        with self._lock:
            records = list(self._records.values())
        return [
            record.model_copy(deep=True)
            for record in records
            if predicate is None or predicate(record)
        ]

    def _lookup(self, record_id: str) -> RecordT | None:
        record = self._records.get(record_id)
        return record.model_copy(deep=True) if record is not None else None

    @staticmethod
    def _reject(error: BookieError, strict: bool) -> None:
        logger.info(f"Rejected ({error.reason}): {error}")
        if strict:
            raise error
        return None
