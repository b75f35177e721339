"""Pydantic schemas for the catalog dump and URI payload."""

from typing import Dict, List

from pydantic import BaseModel, Field

from common.types import AggregateMeta, ObjectRecord


class ObjectEntry(BaseModel):
    """One catalog entry as exposed by /cdn/."""
    files: List[str]
    size: int
    length: int

    @classmethod
    def from_record(cls, record: ObjectRecord) -> "ObjectEntry":
        return cls(files=list(record.chunk_refs), size=record.size, length=record.chunk_count)


class CatalogMeta(BaseModel):
    """Aggregate totals as exposed by /cdn/."""
    size: int
    length: int

    @classmethod
    def from_meta(cls, meta: AggregateMeta) -> "CatalogMeta":
        return cls(size=meta.total_size, length=meta.total_chunks)


class CatalogDump(BaseModel):
    """Response model for the full catalog dump."""
    data: Dict[str, ObjectEntry]
    meta: CatalogMeta


class UriPayload(BaseModel):
    """Payload handed to external downloaders, base64-encoded on the wire."""
    file_name: str = Field(serialization_alias="fileName")
    files: List[str]
