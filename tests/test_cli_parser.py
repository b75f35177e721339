"""Tests for the CLI command parser."""

import pytest

from cli.models import (
    DeleteCommand,
    DownloadCommand,
    ListCommand,
    LoginCommand,
    StatsCommand,
    UploadCommand,
    UriCommand,
)
from cli.parser import ParseError, parse_command


class TestValidCommands:
    """Tests for well-formed input."""

    def test_list_and_alias(self):
        assert parse_command("list") == ListCommand()
        assert parse_command("ls") == ListCommand()

    def test_upload_quoted_path(self):
        cmd = parse_command('upload "./annual report.pdf"')

        assert cmd == UploadCommand(file_path="./annual report.pdf")

    def test_upload_with_object_name(self):
        cmd = parse_command("upload a.pdf report-2024.pdf")

        assert cmd.object_name == "report-2024.pdf"

    def test_download_with_output(self):
        assert parse_command("download a.bin out/a.bin") == DownloadCommand("a.bin", "out/a.bin")

    def test_delete_many_and_alias(self):
        assert parse_command("delete a b") == DeleteCommand(object_names=("a", "b"))
        assert parse_command("rm a") == DeleteCommand(object_names=("a",))

    def test_uri_stats_login(self):
        assert parse_command("uri a.bin") == UriCommand(object_name="a.bin")
        assert parse_command("stats") == StatsCommand()
        assert parse_command("login admin 's3 cret'") == LoginCommand("admin", "s3 cret")


class TestInvalidCommands:
    """Tests for input the parser rejects."""

    @pytest.mark.parametrize("line", [
        "",
        "   ",
        "unknown",
        "list extra",
        "upload",
        "upload a b c",
        "download",
        "delete",
        "uri",
        "uri a b",
        "stats now",
        "login admin",
        'upload "unterminated',
    ])
    def test_rejected(self, line):
        with pytest.raises(ParseError):
            parse_command(line)
