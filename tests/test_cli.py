"""
Tests for fbupload.cli module.

Tests the command-line interface including:
- upload exit codes and output
- Flag to profile override mapping
- validate-profile output
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from fbupload.cli import main
from fbupload.results import ErrorKind, UploadFailure, UploadSuccess


def _exit_code(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestUploadCommand:
    """Tests for 'fbupload upload'."""

    def test_success(self, sample_file, capsys):
        """Test that a successful upload exits 0 and prints the URL."""
        success = UploadSuccess("https://fb.example.com/files/docs/report.txt")

        with patch("fbupload.cli.upload_file", return_value=success) as mock_upload:
            code = _exit_code(
                [
                    "upload",
                    str(sample_file),
                    "--url",
                    "https://fb.example.com",
                    "--credentials-id",
                    "deploy",
                    "--remote-dir",
                    "/docs",
                ]
            )

        assert code == 0
        out = capsys.readouterr().out
        assert "https://fb.example.com/files/docs/report.txt" in out
        assert "[SUCCESS]" in out
        args, kwargs = mock_upload.call_args
        assert args == ("https://fb.example.com", str(sample_file), "deploy")
        assert kwargs["remote_dir"] == "/docs"

    def test_failure(self, sample_file, capsys):
        """Test that a failed upload exits 1 and prints the message."""
        failure = UploadFailure(ErrorKind.AUTHENTICATION_FAILED, "rejected", "401")

        with patch("fbupload.cli.upload_file", return_value=failure):
            code = _exit_code(
                ["upload", str(sample_file), "--credentials-id", "deploy"]
            )

        assert code == 1
        assert "[FAILED] Login failed (HTTP 401): rejected" in capsys.readouterr().out

    def test_flags_override_profile(self, sample_file, create_yaml_file):
        """Test that CLI flags win over profile settings."""
        profile_path = create_yaml_file(
            "fb.yaml",
            {"server": {"transfer": "direct"}, "transport": {"timeout": 10}},
        )
        success = UploadSuccess("https://x/files/report.txt")

        with patch("fbupload.cli.upload_file", return_value=success) as mock_upload:
            _exit_code(
                [
                    "upload",
                    str(sample_file),
                    "--credentials-id",
                    "deploy",
                    "--profile",
                    str(profile_path),
                    "--transfer",
                    "resumable",
                    "--convention",
                    "marker",
                ]
            )

        profile = mock_upload.call_args.kwargs["profile"]
        assert profile["server"]["transfer"] == "resumable"
        assert profile["transport"]["convention"] == "marker"
        assert profile["transport"]["timeout"] == 10

    def test_bad_profile(self, sample_file, tmp_test_dir, capsys):
        """Test that an unreadable profile exits 1 before uploading."""
        with patch("fbupload.cli.upload_file") as mock_upload:
            code = _exit_code(
                [
                    "upload",
                    str(sample_file),
                    "--credentials-id",
                    "deploy",
                    "--profile",
                    str(tmp_test_dir / "missing.yaml"),
                ]
            )

        assert code == 1
        assert "Error:" in capsys.readouterr().out
        mock_upload.assert_not_called()

    def test_credentials_id_required(self, sample_file):
        """Test that argparse rejects a missing --credentials-id."""
        assert _exit_code(["upload", str(sample_file)]) == 2


class TestValidateProfileCommand:
    """Tests for 'fbupload validate-profile'."""

    def test_valid(self, create_yaml_file, capsys):
        """Test that a valid profile exits 0."""
        path = create_yaml_file(
            "fb.yaml", {"server": {"url": "https://files.example.com"}}
        )

        assert _exit_code(["validate-profile", str(path)]) == 0
        assert "[SUCCESS] Profile is valid!" in capsys.readouterr().out

    def test_invalid(self, create_yaml_file, capsys):
        """Test that an invalid profile exits 1 and lists the errors."""
        path = create_yaml_file("fb.yaml", {"transport": {"backend": "wget"}})

        assert _exit_code(["validate-profile", str(path)]) == 1
        out = capsys.readouterr().out
        assert "transport.backend" in out
        assert "[FAILED]" in out
