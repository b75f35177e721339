"""Utility functions for CLI operations."""

import sys
from typing import Iterator

from cli.constants import GREEN, RESET
from common.formatting import format_file_size


def read_with_progress(file_path: str, file_size: int, label: str, piece_size: int = 64 * 1024) -> Iterator[bytes]:
    """
    Yield a file's content in pieces while drawing a progress line on stdout.

    Args:
        file_path: Path of the file to read
        file_size: Total size of the file in bytes
        label: Display name for the progress line
        piece_size: Bytes per yielded piece

    Yields:
        File content pieces
    """
    transferred = 0
    with open(file_path, 'rb') as f:
        while True:
            piece = f.read(piece_size)
            if not piece:
                break
            transferred += len(piece)
            show_progress("Uploading", label, transferred, file_size)
            yield piece
    finish_progress()


def show_progress(action: str, label: str, transferred: int, total: int) -> None:
    """Redraw the current progress line."""
    progress = (transferred / total) * 100 if total else 100.0
    sys.stdout.write(
        f"\r{action} {label}: {format_file_size(transferred)} / {format_file_size(total)} ({GREEN}{progress:.1f}%{RESET})"
    )
    sys.stdout.flush()


def finish_progress() -> None:
    sys.stdout.write('\n')
    sys.stdout.flush()


def clear_progress() -> None:
    sys.stdout.write('\r' + ' ' * 100 + '\r')
    sys.stdout.flush()
