"""Tests for the command-line entry point."""

import io
import json
from unittest.mock import patch

import pytest

from conftest import FakeRemoteStore, write_json
from localeflow_sync import __version__
from localeflow_sync.cli import build_parser, main


class ClosingStore(FakeRemoteStore):
    closed = False

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def _isolate(tmp_path, monkeypatch):
    """Run every command from an empty project directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("localeflow_sync.cli.load_dotenv", lambda: None)
    monkeypatch.setattr(
        "localeflow_sync.cli.setup_logging", lambda **kwargs: None
    )


def _run(argv, store=None):
    store = store if store is not None else ClosingStore()
    return main(argv, store_factory=lambda options: store)


TARGET = ["-p", "web", "-s", "frontend"]


class TestParser:
    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_push_force_maps_to_force_local(self):
        args = build_parser().parse_args(["push", "-f", "-S", "src"])
        assert args.force_local is True
        assert args.dir == "src"


class TestInit:
    def test_creates_config(self, tmp_path, capsys):
        assert _run(["init"]) == 0
        assert (tmp_path / ".localeflow" / "config.yml").exists()
        assert "Created" in capsys.readouterr().out

    def test_existing_config(self, tmp_path, capsys):
        _run(["init"])
        capsys.readouterr()
        assert _run(["init"]) == 0
        assert "Config already exists" in capsys.readouterr().out


class TestPull:
    def test_writes_files_and_reports(self, tmp_path, capsys):
        store = ClosingStore({"en": {"home.title": "Hi"}})

        assert _run(["pull", *TARGET], store) == 0

        written = json.loads((tmp_path / "locales" / "en.json").read_text())
        assert written == {"home": {"title": "Hi"}}
        assert "Pulled 1 key(s)" in capsys.readouterr().out
        assert store.closed

    def test_json_output(self, capsys):
        store = ClosingStore({"en": {"a": "1"}})
        assert _run(["pull", *TARGET, "--json"], store) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["keys_written"] == 1
        assert data["languages"] == ["en"]

    def test_config_file_supplies_target(self, tmp_path, capsys):
        config = tmp_path / ".localeflow" / "config.yml"
        config.parent.mkdir()
        config.write_text(
            "project: web\ndefault_space: frontend\n"
            "format:\n  type: yaml\n"
            "paths:\n  translations: i18n\n"
        )
        store = ClosingStore({"de": {"a": "eins"}})

        assert _run(["pull"], store) == 0
        assert (tmp_path / "i18n" / "de.yaml").exists()

    def test_remote_failure_exit_code(self, tmp_path, capsys):
        store = ClosingStore(fail_fetch=True)
        assert _run(["pull", *TARGET], store) == 4
        assert "Error (remote)" in capsys.readouterr().err
        assert store.closed

    def test_reports_removed_stale_files(self, tmp_path, capsys):
        write_json(tmp_path / "locales" / "en.json", '{"old": "stale"}')
        store = ClosingStore({"en": {"common:x": "1"}})

        assert _run(["pull", *TARGET], store) == 0

        assert not (tmp_path / "locales" / "en.json").exists()
        assert "Removed 1 stale file(s)" in capsys.readouterr().out


class TestSync:
    def test_missing_project(self, capsys):
        assert _run(["sync", "-s", "frontend"]) == 3
        assert "Project is required" in capsys.readouterr().err

    def test_conflicting_flags(self, capsys):
        code = _run(["sync", *TARGET, "--force-local", "--force-remote"])
        assert code == 3
        assert "mutually exclusive" in capsys.readouterr().err

    def test_dry_run(self, tmp_path, capsys):
        write_json(tmp_path / "locales" / "en.json", '{"a": "local"}')
        store = ClosingStore({"en": {"a": "remote"}})

        assert _run(["sync", *TARGET, "--dry-run"], store) == 0

        assert "DRY RUN" in capsys.readouterr().out
        assert store.uploads == []

    def test_conflicts_without_terminal(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO())
        write_json(tmp_path / "locales" / "en.json", '{"a": "local"}')
        store = ClosingStore({"en": {"a": "remote"}})

        assert _run(["sync", *TARGET], store) == 2
        assert "--force-local" in capsys.readouterr().err
        assert store.uploads == []

    def test_force_remote(self, tmp_path, capsys):
        write_json(tmp_path / "locales" / "en.json", '{"a": "local"}')
        store = ClosingStore({"en": {"a": "remote"}})

        assert _run(["sync", *TARGET, "--force-remote"], store) == 0

        written = json.loads((tmp_path / "locales" / "en.json").read_text())
        assert written == {"a": "remote"}
        assert "Sync complete" in capsys.readouterr().out

    def test_malformed_local_file(self, tmp_path, capsys):
        write_json(tmp_path / "locales" / "en.json", "{broken")
        assert _run(["sync", *TARGET], ClosingStore({})) == 5
        assert "Error (format)" in capsys.readouterr().err

    def test_duplicate_key_in_local_file(self, tmp_path, capsys):
        write_json(
            tmp_path / "locales" / "en.json", '{"a": "1", "a": "2"}'
        )
        assert _run(["sync", *TARGET], ClosingStore({})) == 5
        assert "Duplicate key 'a'" in capsys.readouterr().err

    def test_unreadable_local_file(self, tmp_path, capsys):
        write_json(tmp_path / "locales" / "en.json", '{"a": "1"}')
        with patch(
            "localeflow_sync.translation_io.read_file_with_encoding",
            side_effect=PermissionError("denied"),
        ):
            code = _run(["sync", *TARGET], ClosingStore({}))
        assert code == 8
        err = capsys.readouterr().err
        assert "Error (read)" in err
        assert "Traceback" not in err


class TestPush:
    def test_force(self, tmp_path, capsys):
        write_json(tmp_path / "src" / "en.json", '{"a": "1"}')
        store = ClosingStore({"en": {"a": "0"}})

        assert _run(["push", *TARGET, "-S", "src", "-f"], store) == 0

        assert store.uploads == [{"en": {"a": "1"}}]
        assert "Pushed 1 key(s)" in capsys.readouterr().out

    def test_nothing_to_push(self, capsys):
        assert _run(["push", *TARGET]) == 0
        assert "Nothing to push." in capsys.readouterr().out


def test_keyboard_interrupt(monkeypatch, capsys):
    def _interrupt(options):
        raise KeyboardInterrupt

    assert main(["pull", *TARGET], store_factory=_interrupt) == 130
    assert "Interrupted" in capsys.readouterr().err
