"""Storage quota check performed before every upload."""

from __future__ import annotations

import logging

from dropbox_upload._internal.dbx_client import DropboxAPI, reraise_as
from dropbox_upload.exceptions import FileTooLargeError, QuotaError
from dropbox_upload.models import SpaceUsage

logger = logging.getLogger(__name__)


def get_space_usage(client: DropboxAPI) -> SpaceUsage:
    """Fetch the account's used and allocated space."""
    with reraise_as(QuotaError, "Failed to read Dropbox space usage"):
        return client.space_usage()


def check_quota(client: DropboxAPI, file_size: int) -> int:
    """Compute the space left after uploading a file of file_size bytes.

    Args:
        client: Authenticated Dropbox client
        file_size: Size of the file about to be uploaded

    Returns:
        Signed headroom in bytes; negative means that many bytes are missing

    Raises:
        FileTooLargeError: If the file exceeds the total allocation
        QuotaError: If space usage cannot be read
    """
    usage = get_space_usage(client)
    if file_size > usage.allocated:
        raise FileTooLargeError(
            f"File is {file_size} bytes but the Dropbox account only has "
            f"{usage.allocated} bytes allocated"
        )
    remaining = usage.remaining - file_size
    logger.info(
        f"Dropbox space: {usage.used} of {usage.allocated} bytes used, "
        f"{remaining} bytes left after upload"
    )
    return remaining
