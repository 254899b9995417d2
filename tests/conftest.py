"""Pytest fixtures for dropbox_upload tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from helpers import GB

from dropbox_upload.models import SpaceUsage


@pytest.fixture
def mock_dbx() -> MagicMock:
    """Create a mock DropboxAPI with plenty of free space."""
    client = MagicMock()
    client.space_usage.return_value = SpaceUsage(used=1 * GB, allocated=10 * GB)
    client.list_files.return_value = []
    client.delete_file.return_value = 0
    client.files_upload_session_start.return_value = MagicMock(session_id="session-1")
    return client


@pytest.fixture
def patch_dbx_class(mock_dbx: MagicMock) -> Any:
    """Patch DropboxAPI where DropboxUploader creates it."""
    with patch("dropbox_upload.client.DropboxAPI") as mock_class:
        mock_class.return_value = mock_dbx
        yield mock_dbx


@pytest.fixture
def temp_file(tmp_path: Path) -> Path:
    """Create a small file to upload."""
    file_path = tmp_path / "report.txt"
    file_path.write_bytes(b"quarterly numbers")
    return file_path


@pytest.fixture
def big_file(tmp_path: Path) -> Path:
    """Create a file spanning two full chunks and a partial third one."""
    file_path = tmp_path / "archive.zip"
    file_path.write_bytes(bytes(range(256)) * 10)  # 2560 bytes
    return file_path


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    """Create a directory for temporary chunk parts."""
    path = tmp_path / "work"
    path.mkdir()
    return path
