"""Exception hierarchy for the dropbox_upload library."""

from __future__ import annotations


class DropboxUploadError(Exception):
    """Base exception for all dropbox_upload errors."""

    pass


class ConfigurationError(DropboxUploadError):
    """Raised when an input parameter is missing or invalid.

    The field attribute names the offending parameter.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class AuthenticationError(DropboxUploadError):
    """Raised when Dropbox rejects the access token."""

    pass


class QuotaError(DropboxUploadError):
    """Raised when the account cannot hold the file."""

    pass


class FileTooLargeError(QuotaError):
    """Raised when the file is bigger than the whole storage allocation."""

    pass


class StorageFullError(QuotaError):
    """Raised when free space is short and clearing old files is disabled.

    The deficit attribute holds the number of bytes missing.
    """

    def __init__(self, message: str, deficit: int) -> None:
        super().__init__(message)
        self.deficit = deficit


class EvictionError(DropboxUploadError):
    """Raised when listing or deleting old files fails."""

    pass


class UploadError(DropboxUploadError):
    """Raised when a file upload fails."""

    pass


class VerificationError(UploadError):
    """Raised when the uploaded file does not match the local file name."""

    pass
