"""Object lifecycle coordinator: upload, download and delete against the catalog."""

import logging
from typing import Any, AsyncIterator, Tuple

from common.types import ObjectRecord
from gateway.backends.base import StorageBackend
from gateway.catalog import Catalog
from gateway.exceptions import ObjectConflictError, ObjectNotFoundError, StorageBackendError
from gateway.lock_registry import LockKind, LockRegistry
from gateway.utils import normalize_object_name

logger = logging.getLogger(__name__)


class DownloadStream:
    """
    Streamed body of one download.

    The name is entered into the downloading set when the stream is created
    and released when iteration finishes, fails, or when release() is called
    for a stream that was never consumed.
    """

    def __init__(self, name: str, record: ObjectRecord, backend: StorageBackend, locks: LockRegistry):
        self.name = name
        self.record = record
        self._backend = backend
        self._locks = locks
        self._released = False
        self._locks.acquire(LockKind.DOWNLOAD, name)

    @property
    def size(self) -> int:
        return self.record.size

    async def __aiter__(self) -> AsyncIterator[bytes]:
        bytes_streamed = 0
        try:
            async for piece in self._backend.download(self.record.chunk_refs, self.name):
                bytes_streamed += len(piece)
                yield piece
            logger.info(f"Streamed {self.name}: {bytes_streamed} bytes")
        except Exception as e:
            logger.error(
                f"Download of {self.name} failed after {bytes_streamed}/{self.record.size} bytes: {e}"
            )
            raise
        finally:
            self.release()

    def release(self) -> None:
        if not self._released:
            self._released = True
            self._locks.release(LockKind.DOWNLOAD, self.name)

    async def aclose(self) -> None:
        """Async form of release(); background tasks await it on the event loop."""
        self.release()


class ObjectCoordinator:
    """
    Orchestrates the object lifecycle against a catalog, a lock registry and
    a storage backend.

    Lock consultation is asymmetric: delete checks all three
    sets, upload checks only the uploading set plus catalog presence, and
    download checks none (it only records itself).
    """

    def __init__(self, catalog: Catalog, locks: LockRegistry, backend: StorageBackend, channel: Any = None):
        self.catalog = catalog
        self.locks = locks
        self.backend = backend
        self.channel = channel

    async def upload(self, requested_name: str, stream: AsyncIterator[bytes]) -> Tuple[str, ObjectRecord]:
        """
        Store a new object.

        Args:
            requested_name: Raw name from the request path
            stream: Async iterator of body pieces

        Returns:
            (stored name, committed record)

        Raises:
            ObjectConflictError: If the name exists or is already being uploaded
            StorageBackendError: If the backend upload fails
        """
        name = normalize_object_name(requested_name)

        if self.catalog.contains(name) or self.locks.is_held(LockKind.UPLOAD, name):
            logger.warning(f"Upload rejected for {name}: exists or already uploading")
            raise ObjectConflictError(f"Object {name} exists or is being uploaded by someone else")

        with self.locks.hold(LockKind.UPLOAD, name):
            logger.info(f"Upload started: {name}")
            try:
                result = await self.backend.upload(stream, name, self.channel)
            except StorageBackendError:
                logger.error(f"Upload of {name} failed in backend", exc_info=True)
                raise
            except Exception as e:
                logger.error(f"Upload of {name} failed in backend: {e}", exc_info=True)
                raise StorageBackendError(f"Upload of {name} failed: {e}") from e

            record = ObjectRecord.from_chunks(result.chunk_refs, result.size)

            previous = self.catalog.remove(result.name)
            if previous is not None:
                logger.warning(f"Backend resolved {name} to existing object {result.name}; replacing it")
                self.catalog.adjust(-previous.size, -previous.chunk_count)

            self.catalog.insert(result.name, record)
            self.catalog.adjust(record.size, record.chunk_count)

        logger.info(f"Upload committed: {result.name} ({record.chunk_count} chunks, {record.size} bytes)")
        return result.name, record

    def open_download(self, name: str) -> DownloadStream:
        """
        Start streaming an object.

        Args:
            name: Object name

        Returns:
            DownloadStream holding the downloading marker for name

        Raises:
            ObjectNotFoundError: If no record exists (no state is touched)
        """
        record = self.catalog.lookup(name)
        if record is None:
            raise ObjectNotFoundError(f"Object {name} not found")

        logger.info(f"Download started: {name} ({record.chunk_count} chunks, {record.size} bytes)")
        return DownloadStream(name, record, self.backend, self.locks)

    async def delete(self, name: str) -> ObjectRecord:
        """
        Discard an object's chunks and drop it from the catalog.

        If the backend removal succeeds but the process dies before the
        catalog mutation below runs, the catalog keeps a stale record.

        Args:
            name: Object name

        Returns:
            The removed record

        Raises:
            ObjectConflictError: If name is being uploaded, downloaded or deleted
            ObjectNotFoundError: If no record exists
            StorageBackendError: If the backend removal fails
        """
        if self.locks.is_busy(name):
            logger.warning(f"Delete rejected for {name}: operation in flight")
            raise ObjectConflictError(f"Object {name} is being uploaded, downloaded or deleted")

        record = self.catalog.lookup(name)
        if record is None:
            raise ObjectNotFoundError(f"Object {name} not found")

        with self.locks.hold(LockKind.DELETE, name):
            logger.info(f"Delete started: {name}")
            try:
                await self.backend.remove(name, self.channel)
            except StorageBackendError:
                logger.error(f"Delete of {name} failed in backend", exc_info=True)
                raise
            except Exception as e:
                logger.error(f"Delete of {name} failed in backend: {e}", exc_info=True)
                raise StorageBackendError(f"Delete of {name} failed: {e}") from e

            # an upload may have replaced the record while remove() was awaited
            removed = self.catalog.remove(name)
            if removed is not None:
                self.catalog.adjust(-removed.size, -removed.chunk_count)
                record = removed

        logger.info(f"Delete committed: {name}")
        return record

    def describe(self, name: str) -> ObjectRecord:
        """
        Get the record for name without touching any lock.

        Raises:
            ObjectNotFoundError: If no record exists
        """
        record = self.catalog.lookup(name)
        if record is None:
            raise ObjectNotFoundError(f"Object {name} not found")
        return record
