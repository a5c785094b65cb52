"""Tests for encoding-aware reads and atomic writes."""

import os
import stat
from unittest.mock import patch

import pytest

from localeflow_sync.file_handler import read_file_with_encoding, write_file


class TestReadFileWithEncoding:
    def test_utf8(self, tmp_path):
        path = tmp_path / "en.json"
        path.write_bytes('{"k": "ünï"}'.encode("utf-8"))
        content, encoding = read_file_with_encoding(path)
        assert content == '{"k": "ünï"}'
        assert encoding == "utf-8"

    def test_bom_is_stripped(self, tmp_path):
        path = tmp_path / "en.json"
        path.write_bytes(b"\xef\xbb\xbf" + b'{"k": "v"}')
        content, _ = read_file_with_encoding(path)
        assert content == '{"k": "v"}'

    def test_empty_file(self, tmp_path):
        path = tmp_path / "en.json"
        path.write_bytes(b"")
        assert read_file_with_encoding(path) == ("", "utf-8")

    def test_legacy_encoding_detected(self, tmp_path):
        path = tmp_path / "de.json"
        text = '{"greeting": "Grüße aus München, schöne Äpfel"}'
        path.write_bytes(text.encode("latin-1"))
        content, encoding = read_file_with_encoding(path)
        assert encoding != "utf-8"
        assert content.startswith('{"greeting": "Gr')


class TestWriteFile:
    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "a" / "b" / "en.json"
        written = write_file(path, "{}\n")
        assert path.read_text(encoding="utf-8") == "{}\n"
        assert written == 3

    def test_returns_encoded_length(self, tmp_path):
        assert write_file(tmp_path / "x.json", "ü") == 2

    def test_replaces_existing_content(self, tmp_path):
        path = tmp_path / "en.json"
        path.write_text("old", encoding="utf-8")
        write_file(path, "new")
        assert path.read_text(encoding="utf-8") == "new"

    def test_no_temp_files_left(self, tmp_path):
        write_file(tmp_path / "en.json", "{}")
        assert [p.name for p in tmp_path.iterdir()] == ["en.json"]

    def test_preserves_mode(self, tmp_path):
        path = tmp_path / "en.json"
        path.write_text("old", encoding="utf-8")
        os.chmod(path, 0o600)
        write_file(path, "new")
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_failed_replace_keeps_original(self, tmp_path):
        path = tmp_path / "en.json"
        path.write_text("original", encoding="utf-8")
        with patch(
            "localeflow_sync.file_handler.os.replace",
            side_effect=OSError("disk full"),
        ):
            with pytest.raises(OSError, match="disk full"):
                write_file(path, "replacement")
        assert path.read_text(encoding="utf-8") == "original"
        assert [p.name for p in tmp_path.iterdir()] == ["en.json"]
