"""Freeing Dropbox space by deleting the oldest files first."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from dropbox_upload._internal.dbx_client import DropboxAPI, reraise_as
from dropbox_upload.exceptions import EvictionError
from dropbox_upload.models import RemoteFileEntry

logger = logging.getLogger(__name__)


def eviction_candidates(
    client: DropboxAPI, keep: Iterable[str] = ()
) -> list[RemoteFileEntry]:
    """List every remote file, oldest first.

    Files sharing a modification time keep their listing order. Paths in
    keep are left out; Dropbox paths are compared case-insensitively.
    """
    kept = {path.lower() for path in keep}
    with reraise_as(EvictionError, "Failed to list Dropbox files"):
        files = client.list_files()
    candidates = [entry for entry in files if entry.path_display.lower() not in kept]
    return sorted(candidates, key=lambda entry: entry.server_modified)


def evict(client: DropboxAPI, deficit: int, keep: Iterable[str] = ()) -> list[RemoteFileEntry]:
    """Delete the oldest files until more than deficit bytes are reclaimed.

    Stops early once enough space is freed. If every candidate is deleted and
    the deficit still stands, returns without error; the upload is attempted
    anyway and Dropbox decides. A failed deletion aborts immediately and
    files already deleted stay deleted.

    Args:
        client: Dropbox client
        deficit: Bytes that must be freed
        keep: Dropbox paths that must not be deleted, such as the upload target

    Returns:
        The deleted entries, in deletion order

    Raises:
        EvictionError: If listing or deleting fails
    """
    candidates = eviction_candidates(client, keep)
    logger.info(
        f"Need {deficit} more bytes; {len(candidates)} file(s) available for deletion"
    )

    deleted: list[RemoteFileEntry] = []
    reclaimed = 0
    for entry in candidates:
        with reraise_as(EvictionError, f"Failed to delete '{entry.path_display}'"):
            freed = client.delete_file(entry.path_display)
        deleted.append(entry)
        reclaimed += freed
        logger.info(f"Deleted {entry.path_display} ({freed} bytes, {reclaimed} reclaimed)")
        if reclaimed > deficit:
            break
    else:
        logger.warning(
            f"Only {reclaimed} of {deficit} bytes could be reclaimed; attempting upload anyway"
        )

    return deleted
