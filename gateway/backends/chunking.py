"""Re-chunking of incoming byte streams into fixed-size chunks."""

from typing import AsyncIterator


async def iter_chunks(stream: AsyncIterator[bytes], chunk_size: int) -> AsyncIterator[bytes]:
    """
    Regroup arbitrary-sized body pieces into chunks of chunk_size bytes.

    Every yielded chunk is exactly chunk_size bytes except the last one,
    which holds the remainder. An empty stream yields nothing.

    Args:
        stream: Async iterator of body pieces
        chunk_size: Maximum chunk size in bytes

    Yields:
        Chunk payloads in stream order
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    buffer = bytearray()
    async for piece in stream:
        if not piece:
            continue
        buffer.extend(piece)
        while len(buffer) >= chunk_size:
            yield bytes(buffer[:chunk_size])
            del buffer[:chunk_size]

    if buffer:
        yield bytes(buffer)
