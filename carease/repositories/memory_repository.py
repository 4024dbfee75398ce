import threading
from typing import Dict, List, Optional

from carease.errors import ConcurrentUpdateError, DuplicateRecordError, NotFoundError
from carease.repositories.base import Repository, T


class MemoryRepository(Repository[T]):
    """
    Process-local repository used by unit tests and `STORAGE_BACKEND=memory`.
    Writes hold a lock, so the version check and the store happen as one step.
    """

    def __init__(self, name: str, parse):
        super().__init__(name, parse)
        self._records: Dict[str, T] = {}
        self._lock = threading.Lock()

    def all(self) -> List[T]:
        return [r.model_copy(deep=True) for r in list(self._records.values())]

    def get(self, record_id: str) -> Optional[T]:
        record = self._records.get(record_id)
        return record.model_copy(deep=True) if record else None

    def find(self, **criteria) -> List[T]:
        return [
            r.model_copy(deep=True)
            for r in list(self._records.values())
            if all(getattr(r, k, None) == v for k, v in criteria.items())
        ]

    def count(self) -> int:
        return len(self._records)

    def add(self, record: T) -> T:
        with self._lock:
            if record.id in self._records:
                raise DuplicateRecordError(f"{self.name} record {record.id} already exists")
            stored = record.model_copy(deep=True, update={"version": 1})
            self._records[record.id] = stored
        return stored.model_copy(deep=True)

    def update(self, record_id: str, expected_version: Optional[int] = None, **fields) -> T:
        with self._lock:
            current = self._records.get(record_id)
            if current is None:
                raise NotFoundError(f"{self.name} record {record_id} not found")
            if expected_version is not None and current.version != expected_version:
                raise ConcurrentUpdateError(
                    f"{self.name} record {record_id} is at version {current.version}, not {expected_version}"
                )

            data = current.model_dump()
            data.update(fields)
            data["version"] = current.version + 1
            # Re-validate so a bad field value never reaches the store
            updated = self.parse(data)
            self._records[record_id] = updated
        return updated.model_copy(deep=True)
