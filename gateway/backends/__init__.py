"""Pluggable chunk-transport backends."""

from gateway.backends.base import StorageBackend
from gateway.backends.local import LocalChunkBackend
from gateway.backends.memory import MemoryChunkBackend
from gateway.exceptions import UnknownBackendError


def create_backend(kind: str, chunk_storage_path: str, chunk_size: int) -> StorageBackend:
    """
    Build the backend selected by STORAGE_BACKEND.

    Args:
        kind: Backend name ("local" or "memory")
        chunk_storage_path: Root directory for the local backend
        chunk_size: Maximum chunk size in bytes

    Returns:
        StorageBackend instance

    Raises:
        UnknownBackendError: If kind is not a registered backend
    """
    kind = kind.strip().lower()
    if kind == "local":
        return LocalChunkBackend(chunk_storage_path, chunk_size=chunk_size)
    if kind == "memory":
        return MemoryChunkBackend(chunk_size=chunk_size)
    raise UnknownBackendError(f"Unknown storage backend: {kind}")


__all__ = ["StorageBackend", "LocalChunkBackend", "MemoryChunkBackend", "create_backend"]
