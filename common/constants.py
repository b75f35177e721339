"""Project-wide constants (chunk sizing, streaming, defaults)."""

CHUNK_SIZE_BYTES: int = 8 * 1024 * 1024  # 8 MiB, the attachment limit of the original channel

STREAM_PIECE_SIZE_BYTES: int = 64 * 1024

DEFAULT_CHUNK_STORAGE_PATH: str = "/app/data/chunks"

DEFAULT_GATEWAY_PORT: int = 8080

AUTH_REALM: str = 'Basic realm="DDrive Access", charset="UTF-8"'
