"""Dropbox Upload - upload files to Dropbox, making room when the account is full.

Example usage:
    from dropbox_upload import DropboxUploader, resolve_request, upload_file

    # Using context manager (recommended)
    request = resolve_request("build/app.ipa", "sl.token", dropbox_path="/Builds")
    with DropboxUploader(request.access_token) as uploader:
        result = uploader.upload(request)
        print(f"Uploaded revision {result.revision} to {result.cloud_path}")

    # One-shot helper, deleting the oldest files if space runs out
    upload_file("build/app.ipa", "sl.token", dropbox_path="/Builds", enable_clear=True)
"""

from dropbox_upload.chunker import CHUNK_SIZE, split_file
from dropbox_upload.client import DropboxUploader, upload_file
from dropbox_upload.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DropboxUploadError,
    EvictionError,
    FileTooLargeError,
    QuotaError,
    StorageFullError,
    UploadError,
    VerificationError,
)
from dropbox_upload.models import (
    ChunkPart,
    RemoteFileEntry,
    SpaceUsage,
    UploadRequest,
    UploadResult,
)
from dropbox_upload.params import resolve_request

__version__ = "0.1.0"

__all__ = [
    # Main client
    "DropboxUploader",
    "upload_file",
    "resolve_request",
    "split_file",
    "CHUNK_SIZE",
    # Models
    "UploadRequest",
    "SpaceUsage",
    "RemoteFileEntry",
    "ChunkPart",
    "UploadResult",
    # Exceptions
    "DropboxUploadError",
    "ConfigurationError",
    "AuthenticationError",
    "QuotaError",
    "FileTooLargeError",
    "StorageFullError",
    "EvictionError",
    "UploadError",
    "VerificationError",
]
