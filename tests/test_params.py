"""Tests for upload parameter validation."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from dropbox_upload import ConfigurationError, resolve_request
from dropbox_upload.params import destination_path, resolve_write_mode


class TestResolveRequest:
    """Tests for resolve_request."""

    def test_defaults(self, temp_file: Path) -> None:
        """Test that write mode defaults to add and clearing is off."""
        request = resolve_request(temp_file, "token")

        assert request.file_path == temp_file
        assert request.write_mode == "add"
        assert request.update_rev is None
        assert request.enable_clear is False
        assert request.destination_path == "/report.txt"

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file is rejected."""
        with pytest.raises(ConfigurationError, match="Couldn't find file") as exc_info:
            resolve_request(tmp_path / "missing.txt", "token")

        assert exc_info.value.field == "file_path"

    def test_empty_file_path(self) -> None:
        """Test that an empty file path is rejected."""
        with pytest.raises(ConfigurationError, match="No file path"):
            resolve_request("", "token")

    def test_directory_rejected(self, tmp_path: Path) -> None:
        """Test that a directory cannot be uploaded."""
        with pytest.raises(ConfigurationError, match="not a regular file"):
            resolve_request(tmp_path, "token")

    @pytest.mark.parametrize("token", [None, "", "   "])
    def test_missing_access_token(self, temp_file: Path, token: str | None) -> None:
        """Test that a blank access token is rejected."""
        with pytest.raises(ConfigurationError, match="access_token") as exc_info:
            resolve_request(temp_file, token)

        assert exc_info.value.field == "access_token"

    def test_overwrite_mode(self, temp_file: Path) -> None:
        """Test that overwrite mode is kept."""
        request = resolve_request(temp_file, "token", write_mode="overwrite")

        assert request.write_mode == "overwrite"

    def test_update_mode_with_revision(self, temp_file: Path) -> None:
        """Test that update mode keeps a valid revision."""
        request = resolve_request(
            temp_file, "token", write_mode="update", update_rev="a1c10ce0dd78"
        )

        assert request.write_mode == "update"
        assert request.update_rev == "a1c10ce0dd78"

    def test_update_mode_requires_revision(self, temp_file: Path) -> None:
        """Test that update mode without a revision fails."""
        with pytest.raises(ConfigurationError, match="update_rev") as exc_info:
            resolve_request(temp_file, "token", write_mode="update")

        assert exc_info.value.field == "update_rev"

    @pytest.mark.parametrize("rev", ["a1c10ce0", "A1C10CE0DD78", "xyz123456789", "a1c10ce0dd78-"])
    def test_update_mode_rejects_bad_revision(self, temp_file: Path, rev: str) -> None:
        """Test that revisions not made of 9+ lowercase hex characters fail."""
        with pytest.raises(ConfigurationError, match="at least 9 hexadecimal"):
            resolve_request(temp_file, "token", write_mode="update", update_rev=rev)

    def test_revision_ignored_outside_update_mode(
        self, temp_file: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that a revision given with add mode is dropped with a warning."""
        with caplog.at_level(logging.WARNING):
            request = resolve_request(temp_file, "token", update_rev="a1c10ce0dd78")

        assert request.update_rev is None
        assert "Ignoring update_rev" in caplog.text

    def test_bad_revision_rejected_in_any_mode(self, temp_file: Path) -> None:
        """Test that a malformed revision fails even when it would be ignored."""
        with pytest.raises(ConfigurationError):
            resolve_request(temp_file, "token", write_mode="add", update_rev="nothex")

    def test_destination_uses_dropbox_path(self, temp_file: Path) -> None:
        """Test that the destination joins folder and file name."""
        request = resolve_request(temp_file, "token", dropbox_path="/Reports/2024")

        assert request.destination_path == "/Reports/2024/report.txt"
        assert request.dropbox_path == "/Reports/2024"

    def test_strips_access_token(self, temp_file: Path) -> None:
        """Test that surrounding whitespace is removed from the token."""
        request = resolve_request(temp_file, "  token \n")

        assert request.access_token == "token"


class TestResolveWriteMode:
    """Tests for write mode normalization."""

    @pytest.mark.parametrize("mode", ["add", "overwrite", "update"])
    def test_known_modes(self, mode: str) -> None:
        """Test that known modes pass through."""
        assert resolve_write_mode(mode) == mode

    def test_none_defaults_to_add(self) -> None:
        """Test that no mode means add."""
        assert resolve_write_mode(None) == "add"

    def test_case_and_whitespace_normalized(self) -> None:
        """Test that mode matching ignores case and whitespace."""
        assert resolve_write_mode(" Overwrite ") == "overwrite"

    def test_unknown_mode_falls_back_to_add(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that an unknown mode warns and falls back to add."""
        with caplog.at_level(logging.WARNING):
            assert resolve_write_mode("replace") == "add"

        assert "not recognized" in caplog.text


class TestDestinationPath:
    """Tests for destination_path."""

    def test_root_when_no_folder(self) -> None:
        """Test that no folder uploads to the root."""
        assert destination_path(None, "out/app.ipa") == "/app.ipa"
        assert destination_path("", "app.ipa") == "/app.ipa"
        assert destination_path("/", "app.ipa") == "/app.ipa"

    def test_normalizes_slashes(self) -> None:
        """Test that missing leading and extra trailing slashes are fixed."""
        assert destination_path("Builds", "app.ipa") == "/Builds/app.ipa"
        assert destination_path("/Builds/", "app.ipa") == "/Builds/app.ipa"

    def test_uses_base_name(self) -> None:
        """Test that only the file's base name is appended."""
        assert destination_path("/My Folder/Text files", "/tmp/a/b/c.txt") == (
            "/My Folder/Text files/c.txt"
        )
