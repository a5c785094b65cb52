"""Tests for the error taxonomy and exit codes."""

import pytest

from localeflow_sync.errors import (
    ConfigurationError,
    ConflictResolutionError,
    FormatError,
    LocaleflowError,
    LocalReadError,
    LocalWriteError,
    PartialWriteError,
    RemoteError,
)


@pytest.mark.parametrize(
    "error,code",
    [
        (ConflictResolutionError("x"), 2),
        (ConfigurationError("x"), 3),
        (RemoteError("x"), 4),
        (FormatError("x"), 5),
        (LocalWriteError("x"), 6),
        (PartialWriteError("x"), 7),
        (LocalReadError("x"), 8),
    ],
)
def test_exit_codes(error, code):
    assert isinstance(error, LocaleflowError)
    assert error.exit_code == code


def test_render_includes_action():
    text = RemoteError("HTTP 500").render()
    assert text.startswith("Error (remote): HTTP 500")
    assert "No local files were changed" in text


def test_format_error_prefixes_path():
    error = FormatError("Invalid JSON", path="locales/en.json")
    assert error.message == "locales/en.json: Invalid JSON"
    assert error.path == "locales/en.json"


def test_partial_write_is_a_write_error():
    error = PartialWriteError("x", written=["de"], failed=["en"])
    assert isinstance(error, LocalWriteError)
    assert error.written == ["de"]
    assert error.failed == ["en"]


def test_read_error_render():
    text = LocalReadError("Could not read en.json: denied").render()
    assert text.startswith("Error (read): Could not read en.json")
    assert "readable" in text
