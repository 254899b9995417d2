"""Validation of upload parameters.

Everything here runs before the first network call, so a bad input never
costs a request.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from dropbox_upload.exceptions import ConfigurationError
from dropbox_upload.models import WRITE_MODES, UploadRequest

logger = logging.getLogger(__name__)

REVISION_PATTERN = re.compile(r"[0-9a-f]{9,}")


def destination_path(dropbox_path: str | None, file_path: str | Path) -> str:
    """Build the Dropbox path for file_path inside the dropbox_path folder.

    Examples:
        destination_path("/Builds", "out/app.ipa")  -> "/Builds/app.ipa"
        destination_path("Builds/", "app.ipa")      -> "/Builds/app.ipa"
        destination_path(None, "app.ipa")           -> "/app.ipa"
    """
    folder = (dropbox_path or "").strip().strip("/")
    name = os.path.basename(str(file_path))
    if not folder:
        return f"/{name}"
    return f"/{folder}/{name}"


def resolve_write_mode(write_mode: str | None) -> str:
    """Normalize the write mode, falling back to "add" for unknown values."""
    if write_mode is None or not write_mode.strip():
        return "add"
    mode = write_mode.strip().lower()
    if mode not in WRITE_MODES:
        logger.warning(f"write_mode '{write_mode}' not recognized. Defaulting to `add`.")
        return "add"
    return mode


def validate_revision(update_rev: str) -> str:
    """Check that update_rev looks like a Dropbox revision."""
    if not REVISION_PATTERN.fullmatch(update_rev):
        raise ConfigurationError(
            "Revision no. must be at least 9 hexadecimal characters ([0-9a-f]).",
            field="update_rev",
        )
    return update_rev


def resolve_request(
    file_path: str | Path | None,
    access_token: str | None,
    *,
    dropbox_path: str | None = None,
    write_mode: str | None = None,
    update_rev: str | None = None,
    enable_clear: bool = False,
) -> UploadRequest:
    """Validate raw inputs and build an UploadRequest.

    Args:
        file_path: Local file to upload; must exist
        access_token: Dropbox access token; must be non-empty
        dropbox_path: Destination folder in Dropbox
        write_mode: One of add, overwrite, update (default add)
        update_rev: Revision to replace; required when write_mode is update
        enable_clear: Delete oldest files when the account is full

    Returns:
        UploadRequest ready for DropboxUploader.upload()

    Raises:
        ConfigurationError: If any input is missing or invalid
    """
    if not file_path or not str(file_path).strip():
        raise ConfigurationError(
            "No file path specified for upload to Dropbox, pass using `file_path`",
            field="file_path",
        )
    path = Path(file_path)
    if not path.exists():
        raise ConfigurationError(f"Couldn't find file at path '{path}'", field="file_path")
    if not path.is_file():
        raise ConfigurationError(f"Path '{path}' is not a regular file", field="file_path")

    if not access_token or not access_token.strip():
        raise ConfigurationError(
            "access_token not specified for Dropbox app. "
            "Provide your app's access_token or create a new one",
            field="access_token",
        )

    mode = resolve_write_mode(write_mode)

    if update_rev:
        validate_revision(update_rev)
    if mode == "update" and not update_rev:
        raise ConfigurationError(
            "You need to specify `update_rev` when using `update` write_mode.",
            field="update_rev",
        )
    if mode != "update" and update_rev:
        logger.warning(f"Ignoring update_rev '{update_rev}' because write_mode is '{mode}'")
        update_rev = None

    return UploadRequest(
        file_path=path,
        destination_path=destination_path(dropbox_path, path),
        access_token=access_token.strip(),
        write_mode=mode,
        update_rev=update_rev,
        enable_clear=enable_clear,
        dropbox_path=dropbox_path,
    )
