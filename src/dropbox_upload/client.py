"""Main DropboxUploader class driving the upload workflow."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Any

from dropbox.files import CommitInfo, FileMetadata, UploadSessionCursor, WriteMode

from dropbox_upload._internal.dbx_client import DropboxAPI, reraise_as
from dropbox_upload.chunker import CHUNK_SIZE, split_file
from dropbox_upload.eviction import evict, eviction_candidates
from dropbox_upload.exceptions import (
    ConfigurationError,
    StorageFullError,
    UploadError,
    VerificationError,
)
from dropbox_upload.models import RemoteFileEntry, SpaceUsage, UploadRequest, UploadResult
from dropbox_upload.params import resolve_request
from dropbox_upload.quota import check_quota, get_space_usage

logger = logging.getLogger(__name__)


def needs_chunking(file_size: int, chunk_size: int = CHUNK_SIZE) -> bool:
    """Return True if a file this big must go through an upload session."""
    return file_size >= chunk_size


def write_mode_for(request: UploadRequest) -> WriteMode:
    """Translate the request's write mode into the SDK's WriteMode."""
    if request.write_mode == "update":
        return WriteMode.update(request.update_rev)
    if request.write_mode == "overwrite":
        return WriteMode.overwrite
    return WriteMode.add


def verify_result(result: UploadResult, file_path: str | Path) -> UploadResult:
    """Check that Dropbox stored the file under the local file's name.

    Raises:
        VerificationError: If the names differ
    """
    expected = Path(file_path).name
    if result.remote_name != expected:
        raise VerificationError(
            f"Failed to upload file to Dropbox: expected '{expected}', "
            f"Dropbox reported '{result.remote_name}'"
        )
    return result


def check_work_dir(work_dir: Path) -> Path:
    """Check that temporary parts can be written to work_dir.

    Raises:
        ConfigurationError: If work_dir is missing, not a directory or read-only
    """
    if not work_dir.exists():
        raise ConfigurationError(
            f"Work directory '{work_dir}' does not exist", field="work_dir"
        )
    if not work_dir.is_dir():
        raise ConfigurationError(
            f"Work directory '{work_dir}' is not a directory", field="work_dir"
        )
    if not os.access(work_dir, os.W_OK):
        raise ConfigurationError(
            f"Work directory '{work_dir}' is not writable", field="work_dir"
        )
    return work_dir


class DropboxUploader:
    """Uploads files to Dropbox, clearing old files when space runs out.

    Example (context manager - recommended):
        with DropboxUploader("sl.token") as uploader:
            request = resolve_request("app.ipa", "sl.token", dropbox_path="/Builds")
            result = uploader.upload(request)

    Example (manual session):
        uploader = DropboxUploader("sl.token")
        uploader.upload(request)
        uploader.close()
    """

    def __init__(
        self,
        access_token: str,
        *,
        chunk_size: int = CHUNK_SIZE,
        work_dir: Path | str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the uploader.

        Args:
            access_token: Dropbox OAuth2 access token
            chunk_size: Files at least this big are uploaded in parts of this size
            work_dir: Directory for temporary parts (default: current directory)
            timeout: HTTP timeout in seconds (default: SDK default)

        Raises:
            ConfigurationError: If the token is empty or work_dir is unusable
        """
        if not access_token:
            raise ConfigurationError("access_token is required", field="access_token")
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._access_token = access_token
        self._chunk_size = chunk_size
        self._work_dir = check_work_dir(Path(work_dir)) if work_dir else None
        self._timeout = timeout
        self._client: DropboxAPI | None = None

    def __enter__(self) -> DropboxUploader:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit context manager."""
        self.close()

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def _get_client(self) -> DropboxAPI:
        """Get the underlying client, creating it on first use."""
        if self._client is None:
            self._client = DropboxAPI(self._access_token, timeout=self._timeout)
        return self._client

    def space_usage(self) -> SpaceUsage:
        """Return the account's current space usage."""
        return get_space_usage(self._get_client())

    def eviction_candidates(self) -> list[RemoteFileEntry]:
        """Return the files an eviction would delete, in deletion order."""
        return eviction_candidates(self._get_client())

    def upload(self, request: UploadRequest) -> UploadResult:
        """Upload a file to Dropbox.

        Checks that the local side can do its part, checks the quota,
        deletes the oldest files first if the account is full and
        request.enable_clear is set, uploads in one request or in a session
        depending on size, then verifies the stored name. The destination
        itself is never deleted to make room.

        Args:
            request: A request built by resolve_request()

        Returns:
            UploadResult with the new revision and Dropbox path

        Raises:
            ConfigurationError: If the file is unreadable or parts cannot be written
            FileTooLargeError: If the file exceeds the whole allocation
            StorageFullError: If space is short and enable_clear is off
            EvictionError: If clearing old files fails
            UploadError: If Dropbox rejects the upload or a local read/write fails
            VerificationError: If the stored name does not match
        """
        file_size = request.file_size
        chunked = needs_chunking(file_size, self._chunk_size)
        self._check_local(request, chunked)

        client = self._get_client()
        logger.info(f"Starting upload of {request.file_path} to Dropbox")

        remaining = check_quota(client, file_size)
        if remaining < 0:
            deficit = -remaining
            if not request.enable_clear:
                raise StorageFullError(
                    f"Dropbox storage is full: {deficit} more bytes are needed. "
                    "Enable clearing to delete the oldest files.",
                    deficit=deficit,
                )
            evict(client, deficit, keep=[request.destination_path])

        mode = write_mode_for(request)
        if chunked:
            metadata = self._upload_chunked(client, request, mode)
        else:
            metadata = self._upload_whole(client, request, mode)

        result = UploadResult(
            remote_name=metadata.name,
            revision=metadata.rev,
            cloud_path=request.destination_path,
            chunked=chunked,
        )
        verify_result(result, request.file_path)
        logger.info(f"Successfully uploaded {request.file_path.name} to {result.cloud_path}")
        return result

    def _check_local(self, request: UploadRequest, chunked: bool) -> None:
        """Fail before any request if the file or the part directory is unusable."""
        if not os.access(request.file_path, os.R_OK):
            raise ConfigurationError(
                f"File '{request.file_path}' is not readable", field="file_path"
            )
        if not chunked:
            return
        directory = self._work_dir or check_work_dir(Path.cwd())
        free = shutil.disk_usage(directory).free
        if free < request.file_size:
            raise ConfigurationError(
                f"Not enough free space in '{directory}' for upload parts: "
                f"{request.file_size} bytes needed, {free} available",
                field="work_dir",
            )

    def _upload_whole(
        self, client: DropboxAPI, request: UploadRequest, mode: WriteMode
    ) -> FileMetadata:
        try:
            data = request.file_path.read_bytes()
        except OSError as e:
            raise UploadError(f"Failed to read '{request.file_path}': {e}") from e
        with reraise_as(UploadError, "Failed to upload file to Dropbox"):
            return client.files_upload(data, request.destination_path, mode=mode)

    def _upload_chunked(
        self, client: DropboxAPI, request: UploadRequest, mode: WriteMode
    ) -> FileMetadata:
        size_mb = self._chunk_size // (1024 * 1024)
        logger.info(f"The file is a big file so we're uploading it in {size_mb}MB chunks")

        try:
            with split_file(request.file_path, self._chunk_size, self._work_dir) as parts:
                if not parts:
                    raise UploadError(f"Nothing to upload: {request.file_path} is empty")
                first, rest = parts[0], parts[1:]
                with reraise_as(UploadError, "Error uploading file to Dropbox"):
                    logger.info(f"Uploading part #1 ({first.size} bytes)...")
                    session = client.files_upload_session_start(first.local_path.read_bytes())
                    cursor = UploadSessionCursor(
                        session_id=session.session_id, offset=first.size
                    )
                    for part in rest:
                        logger.info(f"Uploading part #{part.index + 1} ({part.size} bytes)...")
                        client.files_upload_session_append_v2(
                            part.local_path.read_bytes(), cursor
                        )
                        cursor.offset += part.size
                    commit = CommitInfo(path=request.destination_path, mode=mode)
                    return client.files_upload_session_finish(b"", cursor, commit)
        except OSError as e:
            raise UploadError(
                f"Failed to prepare upload parts of '{request.file_path}': {e}"
            ) from e

    def close(self) -> None:
        """Close the client and clean up resources."""
        if self._client is not None:
            self._client.close()
        self._client = None


def upload_file(
    file_path: str | Path,
    access_token: str,
    *,
    dropbox_path: str | None = None,
    write_mode: str | None = None,
    update_rev: str | None = None,
    enable_clear: bool = False,
    work_dir: Path | str | None = None,
) -> UploadResult:
    """Validate the inputs and upload file_path in one call.

    Raises:
        ConfigurationError: If an input is invalid (before any network call)
        DropboxUploadError: For any failure of the upload workflow
    """
    request = resolve_request(
        file_path,
        access_token,
        dropbox_path=dropbox_path,
        write_mode=write_mode,
        update_rev=update_rev,
        enable_clear=enable_clear,
    )
    with DropboxUploader(request.access_token, work_dir=work_dir) as uploader:
        return uploader.upload(request)
