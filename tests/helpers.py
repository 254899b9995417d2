"""Shared test helpers for dropbox_upload tests."""

from __future__ import annotations

from datetime import datetime

from dropbox_upload.models import RemoteFileEntry

GB = 1024**3
MB = 1024**2

# Chunk size used instead of 150 MiB so chunked uploads stay small
TEST_CHUNK_SIZE = 1024


class MockFileMetadata:
    """Mock dropbox.files.FileMetadata returned by uploads."""

    def __init__(self, name: str, rev: str = "015f0e1c2a3b4c5d", size: int = 0) -> None:
        self.name = name
        self.rev = rev
        self.size = size


def remote_file(path: str, size: int, day: int) -> RemoteFileEntry:
    """Build a RemoteFileEntry modified on the given day of January 2024."""
    return RemoteFileEntry(
        path_display=path,
        size=size,
        server_modified=datetime(2024, 1, day, 12, 0, 0),
    )
