"""Shared data type definitions (ObjectRecord, AggregateMeta, UploadResult)."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ObjectRecord:
    """
    Catalog entry for one stored object.

    chunk_refs is kept in reassembly order. Records are never edited in
    place; a record is replaced only by removing it and inserting another.
    """
    chunk_refs: Tuple[str, ...]
    size: int
    chunk_count: int

    @classmethod
    def from_chunks(cls, chunk_refs, size: int) -> "ObjectRecord":
        refs = tuple(chunk_refs)
        return cls(chunk_refs=refs, size=size, chunk_count=len(refs))


@dataclass
class AggregateMeta:
    """
    Running totals across the whole catalog.
    """
    total_size: int = 0
    total_chunks: int = 0


@dataclass(frozen=True)
class UploadResult:
    """
    Outcome of a successful backend upload.
    """
    chunk_refs: Tuple[str, ...]
    name: str
    size: int
