"""Backend that keeps chunks as files under a local directory."""

import asyncio
import hashlib
import logging
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, List, Sequence

from common.constants import CHUNK_SIZE_BYTES, STREAM_PIECE_SIZE_BYTES
from common.types import UploadResult
from gateway.backends.base import StorageBackend
from gateway.backends.chunking import iter_chunks
from gateway.exceptions import ChunkNotFoundError, StorageBackendError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalChannel:
    """Channel handle for the local backend: the chunk root directory."""
    root: Path


def object_directory(name: str) -> str:
    """
    Get the directory name holding an object's chunks.

    Object names come straight from the URL, so they are hashed rather than
    used as path components.
    """
    return hashlib.sha256(name.encode("utf-8")).hexdigest()


class LocalChunkBackend(StorageBackend):
    """
    Stores every chunk as ``<sha256(name)>/<index>-<uuid>.chk`` under root.

    Chunk refs are paths relative to root.
    """

    name = "local"

    def __init__(self, root, chunk_size: int = CHUNK_SIZE_BYTES, piece_size: int = STREAM_PIECE_SIZE_BYTES):
        self.root = Path(root)
        self.chunk_size = chunk_size
        self.piece_size = piece_size

    async def open_channel(self) -> LocalChannel:
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info(f"Local chunk storage ready at {self.root}")
        return LocalChannel(root=self.root)

    def _resolve(self, root: Path, chunk_ref: str) -> Path:
        path = (root / chunk_ref).resolve()
        try:
            path.relative_to(root.resolve())
        except ValueError:
            raise ChunkNotFoundError(f"Chunk ref {chunk_ref} is outside chunk storage")
        return path

    async def upload(self, stream: AsyncIterator[bytes], name: str, channel: LocalChannel) -> UploadResult:
        loop = asyncio.get_running_loop()
        directory = object_directory(name)
        object_path = channel.root / directory
        await loop.run_in_executor(None, lambda: object_path.mkdir(parents=True, exist_ok=True))

        chunk_refs: List[str] = []
        total_bytes = 0

        try:
            index = 0
            async for chunk in iter_chunks(stream, self.chunk_size):
                chunk_ref = f"{directory}/{index:06d}-{uuid.uuid4().hex}.chk"
                await loop.run_in_executor(None, (channel.root / chunk_ref).write_bytes, chunk)
                chunk_refs.append(chunk_ref)
                total_bytes += len(chunk)
                index += 1
                logger.debug(f"Wrote chunk {index} for {name} ({len(chunk)} bytes)")
        except Exception as e:
            logger.error(f"Upload of {name} failed after {len(chunk_refs)} chunks: {e}")
            if chunk_refs:
                logger.info(f"Cleaning up {len(chunk_refs)} orphaned chunks of {name}")
                await loop.run_in_executor(None, self._unlink_chunks, channel.root, chunk_refs)
            raise

        logger.info(f"Stored {name}: {len(chunk_refs)} chunks, {total_bytes} bytes")
        return UploadResult(chunk_refs=tuple(chunk_refs), name=name, size=total_bytes)

    def _unlink_chunks(self, root: Path, chunk_refs: Sequence[str]) -> None:
        for chunk_ref in chunk_refs:
            try:
                (root / chunk_ref).unlink()
            except OSError as e:
                logger.warning(f"Could not remove orphaned chunk {chunk_ref}: {e}")

    async def download(self, chunk_refs: Sequence[str], name: str) -> AsyncIterator[bytes]:
        loop = asyncio.get_running_loop()
        total_chunks = len(chunk_refs)

        for position, chunk_ref in enumerate(chunk_refs, start=1):
            path = self._resolve(self.root, chunk_ref)
            logger.debug(f"Streaming chunk {position}/{total_chunks} of {name}")
            try:
                handle = await loop.run_in_executor(None, open, path, "rb")
            except FileNotFoundError:
                raise ChunkNotFoundError(f"Chunk {chunk_ref} of {name} is missing")
            try:
                while True:
                    piece = await loop.run_in_executor(None, handle.read, self.piece_size)
                    if not piece:
                        break
                    yield piece
            finally:
                handle.close()

    async def remove(self, name: str, channel: LocalChannel) -> None:
        object_path = channel.root / object_directory(name)
        if not object_path.exists():
            logger.warning(f"No chunk directory for {name}; nothing to remove")
            return

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, shutil.rmtree, object_path)
        except OSError as e:
            raise StorageBackendError(f"Failed to remove chunks of {name}: {e}") from e
        logger.info(f"Removed chunks of {name}")
