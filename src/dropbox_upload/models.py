"""Data models for the dropbox_upload library."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

WRITE_MODES = ("add", "overwrite", "update")


@dataclass(frozen=True)
class UploadRequest:
    """A validated upload request.

    update_rev is set if and only if write_mode is "update".
    """

    file_path: Path
    destination_path: str
    access_token: str
    write_mode: str = "add"
    update_rev: str | None = None
    enable_clear: bool = False
    dropbox_path: str | None = None

    @property
    def file_size(self) -> int:
        return self.file_path.stat().st_size


@dataclass(frozen=True)
class SpaceUsage:
    """Storage usage of a Dropbox account, in bytes."""

    used: int
    allocated: int

    @property
    def remaining(self) -> int:
        return self.allocated - self.used


@dataclass(frozen=True)
class RemoteFileEntry:
    """A file stored in Dropbox."""

    path_display: str
    size: int
    server_modified: datetime


@dataclass(frozen=True)
class ChunkPart:
    """A temporary local file holding one slice of a large upload."""

    local_path: Path
    size: int
    index: int


@dataclass(frozen=True)
class UploadResult:
    """Result of an upload operation."""

    remote_name: str
    revision: str
    cloud_path: str
    chunked: bool = False
