"""In-memory catalog of stored objects and their aggregate totals."""

import logging
from typing import Dict, List, Optional

from common.types import AggregateMeta, ObjectRecord

logger = logging.getLogger(__name__)


class Catalog:
    """
    Mapping from object name to ObjectRecord plus running totals.

    Every method is synchronous, so under the event loop no two catalog
    mutations can interleave. Guarding a logical operation that awaits in
    between is the job of LockRegistry, not of this class. Not thread-safe.
    """

    def __init__(self):
        self._records: Dict[str, ObjectRecord] = {}
        self.meta = AggregateMeta()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, name: str) -> bool:
        return name in self._records

    def contains(self, name: str) -> bool:
        return name in self._records

    def lookup(self, name: str) -> Optional[ObjectRecord]:
        """
        Get the record stored under name.

        Args:
            name: Object name

        Returns:
            ObjectRecord or None if absent
        """
        return self._records.get(name)

    def insert(self, name: str, record: ObjectRecord) -> None:
        """
        Store a record under name.

        No compare-and-set is done here: callers exclude racing inserts
        through the lock registry before awaiting anything.

        Args:
            name: Object name
            record: Fully-built record
        """
        self._records[name] = record
        logger.debug(f"Catalog insert: {name} ({record.chunk_count} chunks, {record.size} bytes)")

    def remove(self, name: str) -> Optional[ObjectRecord]:
        """
        Drop the record stored under name.

        Returns:
            The removed record, or None if there was none
        """
        record = self._records.pop(name, None)
        if record is not None:
            logger.debug(f"Catalog remove: {name}")
        return record

    def adjust(self, size_delta: int, chunks_delta: int) -> None:
        """Shift the running totals by the given deltas."""
        self.meta.total_size += size_delta
        self.meta.total_chunks += chunks_delta

    def names(self) -> List[str]:
        """Object names in insertion order."""
        return list(self._records)

    def items(self):
        return list(self._records.items())

    def snapshot(self) -> Dict[str, ObjectRecord]:
        """Shallow copy of the name → record mapping."""
        return dict(self._records)
