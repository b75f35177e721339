"""Tests for the chunk-transport backends."""

import pytest

from gateway.backends import LocalChunkBackend, MemoryChunkBackend, create_backend
from gateway.backends.chunking import iter_chunks
from gateway.backends.local import object_directory
from gateway.exceptions import ChunkNotFoundError, StorageBackendError, UnknownBackendError
from tests.conftest import TEST_CHUNK_SIZE, byte_stream


async def collect(iterator) -> list:
    return [piece async for piece in iterator]


async def failing_stream(payload: bytes, fail_after: int):
    for start in range(0, fail_after, 100):
        yield payload[start:start + 100]
    raise ConnectionResetError("client went away")


class TestIterChunks:
    """Test re-chunking of incoming streams."""

    @pytest.mark.asyncio
    async def test_exact_chunks_with_remainder(self, payload):
        chunks = await collect(iter_chunks(byte_stream(payload, piece_size=333), TEST_CHUNK_SIZE))

        assert len(chunks) == 10
        assert all(len(chunk) == TEST_CHUNK_SIZE for chunk in chunks[:-1])
        assert len(chunks[-1]) == 4096 - 9 * TEST_CHUNK_SIZE
        assert b"".join(chunks) == payload

    @pytest.mark.asyncio
    async def test_empty_stream_yields_nothing(self):
        assert await collect(iter_chunks(byte_stream(b""), 10)) == []

    @pytest.mark.asyncio
    async def test_rejects_non_positive_chunk_size(self):
        with pytest.raises(ValueError):
            await collect(iter_chunks(byte_stream(b"abc"), 0))


class TestMemoryChunkBackend:
    """Test the in-process backend."""

    @pytest.mark.asyncio
    async def test_upload_and_download(self, payload):
        backend = MemoryChunkBackend(chunk_size=TEST_CHUNK_SIZE)
        channel = await backend.open_channel()

        result = await backend.upload(byte_stream(payload), "a.bin", channel)

        assert result.name == "a.bin"
        assert result.size == 4096
        assert len(result.chunk_refs) == 10
        assert all(ref.startswith("mem://") for ref in result.chunk_refs)
        assert b"".join(await collect(backend.download(result.chunk_refs, "a.bin"))) == payload

    @pytest.mark.asyncio
    async def test_remove_discards_chunks(self, payload):
        backend = MemoryChunkBackend(chunk_size=TEST_CHUNK_SIZE)
        channel = await backend.open_channel()
        result = await backend.upload(byte_stream(payload), "a.bin", channel)

        await backend.remove("a.bin", channel)

        assert channel.chunks == {}
        with pytest.raises(ChunkNotFoundError):
            await collect(backend.download(result.chunk_refs, "a.bin"))

    @pytest.mark.asyncio
    async def test_remove_unknown_name_is_noop(self):
        backend = MemoryChunkBackend()
        channel = await backend.open_channel()

        await backend.remove("never-stored", channel)


class TestLocalChunkBackend:
    """Test the filesystem backend."""

    @pytest.fixture
    def local_backend(self, tmp_path):
        return LocalChunkBackend(tmp_path / "chunks", chunk_size=TEST_CHUNK_SIZE, piece_size=128)

    @pytest.mark.asyncio
    async def test_open_channel_creates_root(self, local_backend):
        channel = await local_backend.open_channel()

        assert channel.root.is_dir()

    @pytest.mark.asyncio
    async def test_upload_writes_one_file_per_chunk(self, local_backend, payload):
        channel = await local_backend.open_channel()

        result = await local_backend.upload(byte_stream(payload), "report_1.pdf", channel)

        object_path = channel.root / object_directory("report_1.pdf")
        assert result.size == 4096
        assert len(result.chunk_refs) == 10
        assert sorted(p.name for p in object_path.iterdir()) == [ref.split("/")[1] for ref in result.chunk_refs]

    @pytest.mark.asyncio
    async def test_download_streams_in_order(self, local_backend, payload):
        channel = await local_backend.open_channel()
        result = await local_backend.upload(byte_stream(payload), "a.bin", channel)

        pieces = await collect(local_backend.download(result.chunk_refs, "a.bin"))

        assert b"".join(pieces) == payload
        assert max(len(p) for p in pieces) <= 128

    @pytest.mark.asyncio
    async def test_remove_deletes_object_directory(self, local_backend, payload):
        channel = await local_backend.open_channel()
        await local_backend.upload(byte_stream(payload), "a.bin", channel)

        await local_backend.remove("a.bin", channel)

        assert not (channel.root / object_directory("a.bin")).exists()

    @pytest.mark.asyncio
    async def test_remove_missing_directory_is_noop(self, local_backend):
        channel = await local_backend.open_channel()

        await local_backend.remove("never-stored", channel)

    @pytest.mark.asyncio
    async def test_failed_upload_cleans_up_written_chunks(self, local_backend, payload):
        channel = await local_backend.open_channel()

        with pytest.raises(ConnectionResetError):
            await local_backend.upload(failing_stream(payload, 1000), "a.bin", channel)

        assert list((channel.root / object_directory("a.bin")).iterdir()) == []

    @pytest.mark.asyncio
    async def test_missing_chunk_file(self, local_backend, payload):
        channel = await local_backend.open_channel()
        result = await local_backend.upload(byte_stream(payload), "a.bin", channel)
        (channel.root / result.chunk_refs[3]).unlink()

        with pytest.raises(ChunkNotFoundError):
            await collect(local_backend.download(result.chunk_refs, "a.bin"))

    @pytest.mark.asyncio
    async def test_ref_outside_root_is_rejected(self, local_backend):
        await local_backend.open_channel()

        with pytest.raises(StorageBackendError):
            await collect(local_backend.download(["../../etc/passwd"], "a.bin"))

    def test_object_directory_is_stable_and_path_safe(self):
        assert object_directory("../x") == object_directory("../x")
        assert "/" not in object_directory("../x")
        assert object_directory("a") != object_directory("b")


class TestCreateBackend:
    """Test backend selection."""

    def test_local(self, tmp_path):
        backend = create_backend("local", str(tmp_path), 1024)

        assert isinstance(backend, LocalChunkBackend)
        assert backend.chunk_size == 1024

    def test_memory_is_case_insensitive(self, tmp_path):
        assert isinstance(create_backend(" Memory ", str(tmp_path), 1024), MemoryChunkBackend)

    def test_unknown(self, tmp_path):
        with pytest.raises(UnknownBackendError):
            create_backend("s3", str(tmp_path), 1024)
