from abc import ABC, abstractmethod
from typing import Callable, Generic, List, Optional, TypeVar

from carease.schemas import VersionedRecord

T = TypeVar("T", bound=VersionedRecord)


class Repository(ABC, Generic[T]):
    """
    Storage interface for one entity collection.

    Reads return detached record copies; writes touch exactly one record.
    `update` takes an optional `expected_version` and raises
    ConcurrentUpdateError when the stored record has moved on.
    """

    def __init__(self, name: str, parse: Callable[[dict], T]):
        self.name = name
        self.parse = parse

    @abstractmethod
    def all(self) -> List[T]:
        ...

    @abstractmethod
    def get(self, record_id: str) -> Optional[T]:
        ...

    @abstractmethod
    def find(self, **criteria) -> List[T]:
        """Records whose attributes equal every keyword given."""

    def find_one(self, **criteria) -> Optional[T]:
        matches = self.find(**criteria)
        return matches[0] if matches else None

    @abstractmethod
    def add(self, record: T) -> T:
        ...

    @abstractmethod
    def update(self, record_id: str, expected_version: Optional[int] = None, **fields) -> T:
        ...

    def count(self) -> int:
        return len(self.all())
