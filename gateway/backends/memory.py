"""In-process backend keeping chunks in a dictionary."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List, Sequence

from common.constants import CHUNK_SIZE_BYTES
from common.types import UploadResult
from gateway.backends.base import StorageBackend
from gateway.backends.chunking import iter_chunks
from gateway.exceptions import ChunkNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class MemoryChannel:
    """Chunk payloads keyed by ref, plus the refs owned by each object name."""
    chunks: Dict[str, bytes] = field(default_factory=dict)
    objects: Dict[str, List[str]] = field(default_factory=dict)


class MemoryChunkBackend(StorageBackend):
    """Development and test backend. Nothing survives the process."""

    name = "memory"

    def __init__(self, chunk_size: int = CHUNK_SIZE_BYTES):
        self.chunk_size = chunk_size
        self.channel = MemoryChannel()

    async def open_channel(self) -> MemoryChannel:
        return self.channel

    async def upload(self, stream: AsyncIterator[bytes], name: str, channel: MemoryChannel) -> UploadResult:
        chunk_refs: List[str] = []
        total_bytes = 0

        async for chunk in iter_chunks(stream, self.chunk_size):
            chunk_ref = f"mem://{uuid.uuid4().hex}"
            channel.chunks[chunk_ref] = chunk
            chunk_refs.append(chunk_ref)
            total_bytes += len(chunk)

        channel.objects.setdefault(name, []).extend(chunk_refs)
        logger.info(f"Stored {name} in memory: {len(chunk_refs)} chunks, {total_bytes} bytes")
        return UploadResult(chunk_refs=tuple(chunk_refs), name=name, size=total_bytes)

    async def download(self, chunk_refs: Sequence[str], name: str) -> AsyncIterator[bytes]:
        for chunk_ref in chunk_refs:
            data = self.channel.chunks.get(chunk_ref)
            if data is None:
                raise ChunkNotFoundError(f"Chunk {chunk_ref} of {name} is missing")
            yield data

    async def remove(self, name: str, channel: MemoryChannel) -> None:
        for chunk_ref in channel.objects.pop(name, []):
            channel.chunks.pop(chunk_ref, None)
        logger.info(f"Removed chunks of {name} from memory")
