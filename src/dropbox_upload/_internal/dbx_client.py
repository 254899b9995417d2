"""Dropbox SDK wrapper exposing the narrow API surface used for uploads."""

from __future__ import annotations

import contextlib
from collections.abc import Iterator

import dropbox
from dropbox.exceptions import ApiError, AuthError, DropboxException
from dropbox.files import FileMetadata
from requests.exceptions import RequestException

from dropbox_upload.exceptions import AuthenticationError, DropboxUploadError, QuotaError
from dropbox_upload.models import RemoteFileEntry, SpaceUsage

DEFAULT_USER_AGENT = "dropbox-upload"


def describe_error(exc: BaseException) -> str:
    """Return the most useful message text carried by an SDK exception."""
    if isinstance(exc, ApiError):
        if exc.user_message_text:
            return str(exc.user_message_text)
        return str(exc.error)
    if isinstance(exc, AuthError):
        return str(exc.error)
    return str(exc)


@contextlib.contextmanager
def reraise_as(error_class: type[DropboxUploadError], message: str) -> Iterator[None]:
    """Translate SDK and transport failures into library exceptions.

    A rejected token always becomes AuthenticationError; any other remote
    failure becomes error_class with the Dropbox message appended.
    """
    try:
        yield
    except AuthError as e:
        raise AuthenticationError(
            f"Dropbox rejected the access token: {describe_error(e)}"
        ) from e
    except (DropboxException, RequestException) as e:
        raise error_class(
            f'{message}. Error message returned by Dropbox API: "{describe_error(e)}"'
        ) from e


class DropboxAPI(dropbox.Dropbox):
    """Dropbox client with helpers for quota, listing and deletion.

    Retries are disabled: every call is a single attempt and failures are
    surfaced to the caller.
    """

    def __init__(self, access_token: str, *, timeout: float | None = None) -> None:
        kwargs = {"timeout": timeout} if timeout is not None else {}
        super().__init__(
            oauth2_access_token=access_token,
            max_retries_on_error=0,
            max_retries_on_rate_limit=0,
            user_agent=DEFAULT_USER_AGENT,
            **kwargs,
        )

    def space_usage(self) -> SpaceUsage:
        """Fetch used and allocated bytes for the account.

        Raises:
            QuotaError: If the account reports an allocation without a byte limit
        """
        usage = self.users_get_space_usage()
        allocation = usage.allocation
        if allocation.is_individual():
            allocated = allocation.get_individual().allocated
        elif allocation.is_team():
            allocated = allocation.get_team().allocated
        else:
            raise QuotaError("Dropbox did not report a storage allocation for this account")
        return SpaceUsage(used=usage.used, allocated=allocated)

    def list_files(self, path: str = "") -> list[RemoteFileEntry]:
        """List every file under path, following continuation cursors.

        The first entry of each page is skipped. Folders and deleted entries
        are not returned.
        """
        files: list[RemoteFileEntry] = []
        result = self.files_list_folder(path, recursive=True)
        while True:
            for entry in result.entries[1:]:
                if isinstance(entry, FileMetadata):
                    files.append(
                        RemoteFileEntry(
                            path_display=entry.path_display,
                            size=entry.size,
                            server_modified=entry.server_modified,
                        )
                    )
            if not result.has_more:
                return files
            result = self.files_list_folder_continue(result.cursor)

    def delete_file(self, path: str) -> int:
        """Delete the file at path and return the number of bytes freed."""
        result = self.files_delete_v2(path)
        metadata = result.metadata
        if isinstance(metadata, FileMetadata):
            return int(metadata.size)
        return 0
