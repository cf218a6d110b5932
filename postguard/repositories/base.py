"""
Base in-memory repository with common CRUD operations.
"""

import itertools
from dataclasses import replace
from typing import Any, Generic, Iterable, TypeVar

from postguard.core.auth.exceptions import ResourceNotFound
from postguard.core.auth.interfaces import ResourceStore

RecordT = TypeVar("RecordT")


class MemoryRepository(ResourceStore, Generic[RecordT]):
    """
    Base repository over a dict of frozen records.

    Records are never mutated in place: updates swap in a new record, so
    readers always observe a complete value. IDs are allocated
    monotonically starting at 1.

    Usage:
        class PostStore(MemoryRepository[Post]):
            resource_kind = "posts"

        store = PostStore()
        post = await store.get_by_id(1)
    """

    resource_kind: str

    def __init__(self, records: Iterable[RecordT] = ()):
        self._records: dict[int, RecordT] = {}
        for record in records:
            self._records[record.id] = record
        start = max(self._records, default=0) + 1
        self._ids = itertools.count(start)

    def _next_id(self) -> int:
        return next(self._ids)

    async def get_by_id(self, id: int) -> RecordT | None:
        """Get record by ID."""
        return self._records.get(id)

    async def list(self) -> list[RecordT]:
        """All records ordered by ID."""
        return [self._records[k] for k in sorted(self._records)]

    async def count(self) -> int:
        return len(self._records)

    async def fetch(self, resource_kind: str, resource_id: int) -> RecordT:
        """
        Fetch a record by kind and ID.

        Raises:
            ValueError: If asked for a kind this store does not hold
            ResourceNotFound: If no record has this ID
        """
        if resource_kind != self.resource_kind:
            raise ValueError(
                f"{type(self).__name__} holds '{self.resource_kind}', not '{resource_kind}'"
            )
        record = self._records.get(resource_id)
        if record is None:
            raise ResourceNotFound(resource_kind, resource_id)
        return record

    async def _insert(self, record: RecordT) -> RecordT:
        self._records[record.id] = record
        return record

    async def _update(self, id: int, **changes: Any) -> RecordT:
        record = self._records.get(id)
        if record is None:
            raise ResourceNotFound(self.resource_kind, id)
        updated = replace(record, **changes)
        self._records[id] = updated
        return updated

    async def delete(self, id: int) -> bool:
        """Delete record. Returns False if it did not exist."""
        return self._records.pop(id, None) is not None
