"""Storage backend interface consumed by the object coordinator."""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Sequence

from common.types import UploadResult


class StorageBackend(ABC):
    """
    Chunk-transport adapter.

    A backend splits an incoming byte stream into chunks and pushes them to
    its channel, streams chunks back in order, and discards every chunk of a
    named object. The channel is an opaque handle the application opens once
    at startup and passes back into upload and remove.
    """

    name: str = "abstract"

    @abstractmethod
    async def open_channel(self) -> Any:
        """Open the process-lifetime channel handle."""

    async def close_channel(self, channel: Any) -> None:
        """Release the channel handle on shutdown."""
        return None

    @abstractmethod
    async def upload(self, stream: AsyncIterator[bytes], name: str, channel: Any) -> UploadResult:
        """
        Push a byte stream to the channel as a sequence of chunks.

        Args:
            stream: Async iterator of raw body pieces
            name: Normalized object name
            channel: Handle returned by open_channel

        Returns:
            UploadResult with chunk refs in reassembly order, the resolved
            object name and the total number of bytes stored
        """

    @abstractmethod
    def download(self, chunk_refs: Sequence[str], name: str) -> AsyncIterator[bytes]:
        """
        Stream the chunks back in the given order.

        Implementations are async generators. A failure after the first
        yielded piece propagates to the caller mid-stream.
        """

    @abstractmethod
    async def remove(self, name: str, channel: Any) -> None:
        """Discard every chunk stored for name."""
