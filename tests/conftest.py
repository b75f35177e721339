"""Shared pytest fixtures for all tests."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from cli.config import Config
from gateway.backends.memory import MemoryChunkBackend
from gateway.catalog import Catalog
from gateway.coordinator import ObjectCoordinator
from gateway.lock_registry import LockRegistry
from gateway.main import create_app

# 4096 bytes split at 410 bytes gives exactly 10 chunks
TEST_CHUNK_SIZE = 410


class GatedBackend(MemoryChunkBackend):
    """
    Memory backend whose upload and remove wait on events, so tests can hold
    an operation in flight and interleave others with it.
    """

    def __init__(self, chunk_size: int = TEST_CHUNK_SIZE):
        super().__init__(chunk_size=chunk_size)
        self.upload_gate = asyncio.Event()
        self.remove_gate = asyncio.Event()
        self.upload_gate.set()
        self.remove_gate.set()
        self.upload_entered = asyncio.Event()
        self.remove_entered = asyncio.Event()
        self.upload_calls = 0
        self.remove_calls = 0
        self.fail_upload = False
        self.fail_remove = False

    async def upload(self, stream, name, channel):
        self.upload_calls += 1
        self.upload_entered.set()
        await self.upload_gate.wait()
        if self.fail_upload:
            raise RuntimeError("channel unreachable")
        return await super().upload(stream, name, channel)

    async def remove(self, name, channel):
        self.remove_calls += 1
        self.remove_entered.set()
        await self.remove_gate.wait()
        if self.fail_remove:
            raise RuntimeError("channel unreachable")
        await super().remove(name, channel)


async def byte_stream(payload: bytes, piece_size: int = 1000):
    """Async iterator over payload in piece_size slices."""
    for start in range(0, len(payload), piece_size):
        yield payload[start:start + piece_size]


@pytest.fixture
def backend():
    """Gated memory backend (gates open by default)."""
    return GatedBackend()


@pytest.fixture
def coordinator(backend):
    """Isolated coordinator wired to the gated backend."""
    return ObjectCoordinator(Catalog(), LockRegistry(), backend, channel=backend.channel)


@pytest.fixture
def payload():
    """4096-byte payload with a recognizable pattern."""
    return bytes(range(256)) * 16


@pytest.fixture(autouse=True)
def no_env_auth(monkeypatch):
    """Keep the process environment from enabling auth or CDN in tests."""
    monkeypatch.setattr("gateway.config.AUTH", "")
    monkeypatch.setattr("gateway.config.CDN_ENABLED", False)


@pytest.fixture
def make_client():
    """
    Factory building a started TestClient around a fresh app.

    Returns:
        Callable accepting create_app keyword arguments
    """
    clients = []

    def _make(**kwargs):
        kwargs.setdefault("backend", MemoryChunkBackend(chunk_size=TEST_CHUNK_SIZE))
        client = TestClient(create_app(**kwargs))
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    """Started TestClient with the CDN dump enabled and no auth."""
    return make_client(cdn_enabled=True)


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Returns:
        Path to temporary .chunkdrive directory
    """
    config_dir = tmp_path / '.chunkdrive'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing uploads.

    Returns:
        Path to sample file
    """
    file_path = tmp_path / 'report 1.pdf'
    file_path.write_bytes(b'%PDF-1.4 sample content for testing')
    return file_path
