import threading
from collections import defaultdict
from typing import Any, ContextManager, Dict, Iterable, List, Optional, Type

from pydantic import BaseModel

from core.db import new_id, utcnow
from storage.base import R, Storage, ordered


class MemoryStorage(Storage):
    """Dict-backed storage for development and tests.

    Records are copied on the way in and out, so callers never hold a
    reference to stored state. A re-entrant lock makes each repository call
    atomic; sequences of calls are still last-write-wins.
    """

    def __init__(self):
        self._tables: Dict[type, Dict[str, BaseModel]] = defaultdict(dict)
        self._lock = threading.RLock()

    def _atomic(self) -> ContextManager:
        return self._lock

    def _get(self, record_type: Type[R], record_id: str) -> Optional[R]:
        with self._lock:
            record = self._tables[record_type].get(record_id)
            return record.model_copy(deep=True) if record is not None else None

    def _find(self, record_type: Type[R], **filters: Any) -> List[R]:
        with self._lock:
            matches = [
                record.model_copy(deep=True)
                for record in self._tables[record_type].values()
                if all(getattr(record, key) == value for key, value in filters.items())
            ]
        return ordered(matches)

    def _insert(self, record_type: Type[R], data: BaseModel) -> R:
        record = record_type.model_validate({**data.model_dump(), "id": new_id(), "created_at": utcnow()})
        with self._lock:
            self._tables[record_type][record.id] = record
        return record.model_copy(deep=True)

    def _save(self, record: R, fields: Iterable[str]) -> Optional[R]:
        with self._lock:
            table = self._tables[type(record)]
            if record.id not in table:
                return None
            table[record.id] = record.model_copy(deep=True)
        return record

    def _delete(self, record_type: Type[BaseModel], record_id: str) -> bool:
        with self._lock:
            return self._tables[record_type].pop(record_id, None) is not None
