"""Command-line interface for dropbox_upload."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from dropbox_upload import (
    AuthenticationError,
    ConfigurationError,
    DropboxUploader,
    DropboxUploadError,
    resolve_request,
)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def get_uploader(access_token: str | None, work_dir: Path | None = None) -> DropboxUploader:
    """Create a DropboxUploader, failing before any request if no token is set.

    The token check is what guards usage and ls. For upload it never fires,
    since resolve_request has already rejected a blank token.

    Raises:
        ConfigurationError: If the token is blank or work_dir is unusable
    """
    if not access_token or not access_token.strip():
        raise ConfigurationError(
            "access_token not specified for Dropbox app. "
            "Pass --access-token or set DROPBOX_ACCESS_TOKEN",
            field="access_token",
        )
    return DropboxUploader(access_token.strip(), work_dir=work_dir)


def _fail(message: str) -> None:
    click.echo(click.style(message, fg="red"), err=True)
    sys.exit(1)


@click.group()
@click.version_option(package_name="dropbox-upload")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors")
def main(verbose: bool, quiet: bool) -> None:
    """Dropbox upload CLI - Upload files to Dropbox, clearing space if needed.

    Settings are also read from DROPBOX_* environment variables and from a
    .env file in the current directory.
    """
    load_dotenv()
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


@main.command()
@click.argument("file_path", envvar="DROPBOX_FILE_PATH", type=click.Path(path_type=Path))
@click.option(
    "--dropbox-path",
    "-d",
    envvar="DROPBOX_PATH",
    default=None,
    help="Destination Dropbox folder (default: root)",
)
@click.option(
    "--write-mode",
    "-m",
    envvar="DROPBOX_WRITE_MODE",
    default=None,
    help="add, overwrite or update (default: add)",
)
@click.option(
    "--update-rev",
    envvar="DROPBOX_UPDATE_REV",
    default=None,
    help="Revision of the file replaced in `update` write mode",
)
@click.option(
    "--access-token",
    "-t",
    envvar="DROPBOX_ACCESS_TOKEN",
    help="Dropbox app access token",
)
@click.option(
    "--enable-clear",
    is_flag=True,
    envvar="DROPBOX_ENABLE_CLEAR",
    help="Delete the oldest Dropbox files when there is not enough space",
)
@click.option(
    "--work-dir",
    envvar="DROPBOX_WORK_DIR",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for temporary chunk files (default: current directory)",
)
def upload(
    file_path: Path,
    dropbox_path: str | None,
    write_mode: str | None,
    update_rev: str | None,
    access_token: str | None,
    enable_clear: bool,
    work_dir: Path | None,
) -> None:
    """Upload a file to Dropbox.

    FILE_PATH: Local file to upload.

    Examples:

        dropbox-upload upload build/app.ipa --dropbox-path /Builds

        dropbox-upload upload app.ipa -m overwrite --enable-clear

        dropbox-upload upload app.ipa -m update --update-rev a1c10ce0dd78
    """
    try:
        request = resolve_request(
            file_path,
            access_token,
            dropbox_path=dropbox_path,
            write_mode=write_mode,
            update_rev=update_rev,
            enable_clear=enable_clear,
        )
        uploader = get_uploader(request.access_token, work_dir)
        try:
            result = uploader.upload(request)
        finally:
            uploader.close()
    except ConfigurationError as e:
        _fail(f"Configuration error: {e}")
    except AuthenticationError as e:
        _fail(f"Authentication failed: {e}")
    except DropboxUploadError as e:
        _fail(f"Error: {e}")
    else:
        click.echo(click.style(f"File revision: '{result.revision}'", fg="green"))
        click.echo(
            click.style(
                f"Successfully uploaded file to Dropbox at '{result.cloud_path}'", fg="green"
            )
        )


@main.command()
@click.option(
    "--access-token",
    "-t",
    envvar="DROPBOX_ACCESS_TOKEN",
    help="Dropbox app access token",
)
def usage(access_token: str | None) -> None:
    """Show used, allocated and free Dropbox space."""
    try:
        uploader = get_uploader(access_token)
        try:
            space = uploader.space_usage()
        finally:
            uploader.close()
    except AuthenticationError as e:
        _fail(f"Authentication failed: {e}")
    except DropboxUploadError as e:
        _fail(f"Error: {e}")
    else:
        click.echo(f"Used:      {_format_size(space.used)}")
        click.echo(f"Allocated: {_format_size(space.allocated)}")
        click.echo(f"Free:      {_format_size(max(space.remaining, 0))}")


@main.command("ls")
@click.option(
    "--access-token",
    "-t",
    envvar="DROPBOX_ACCESS_TOKEN",
    help="Dropbox app access token",
)
def list_candidates(access_token: str | None) -> None:
    """List Dropbox files in the order --enable-clear would delete them.

    Oldest files come first. Nothing is deleted.
    """
    try:
        uploader = get_uploader(access_token)
        try:
            entries = uploader.eviction_candidates()
        finally:
            uploader.close()
    except AuthenticationError as e:
        _fail(f"Authentication failed: {e}")
    except DropboxUploadError as e:
        _fail(f"Error: {e}")
    else:
        if not entries:
            click.echo("(no files)")
        for entry in entries:
            modified = entry.server_modified.strftime("%Y-%m-%d %H:%M")
            click.echo(f"  {modified}  {entry.path_display}  ({_format_size(entry.size)})")


def _format_size(size_bytes: int) -> str:
    """Format file size in human-readable form."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}" if unit != "B" else f"{size_bytes} {unit}"
        size_bytes /= 1024  # type: ignore[assignment]
    return f"{size_bytes:.1f} TB"


if __name__ == "__main__":
    main()
